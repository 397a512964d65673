import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, PositiveInt, NonNegativeInt, model_validator, Field

from .utils import LoggingConfig

logger = logging.getLogger(__name__)

class TrackingSettings(BaseModel):
    """
    Head tilt classification and gesture debouncing.
    Landmark indices follow the MediaPipe Face Mesh topology.
    """
    threshold_deg: float = Field(12.0, gt=0, description="Tilt angle beyond which a direction is reported.")
    debounce_ms: float = Field(800.0, gt=0, description="Minimum time between two emitted gestures.")
    left_eye_index: NonNegativeInt = Field(33, description="Landmark used as the left eye reference point.")
    right_eye_index: NonNegativeInt = Field(263, description="Landmark used as the right eye reference point.")

    @model_validator(mode='after')
    def validate_eye_indices(self) -> "TrackingSettings":
        if self.left_eye_index == self.right_eye_index:
            raise ValueError('Eye landmark indices must differ.')
        return self

class CameraSettings(BaseModel):
    index: NonNegativeInt = 0
    width: PositiveInt = 640
    height: PositiveInt = 480
    start_timeout_s: float = Field(10.0, gt=0, description="Give up if the device is not ready by then.")

class DetectorSettings(BaseModel):
    max_num_faces: PositiveInt = 1
    refine_landmarks: bool = False
    min_detection_confidence: float = Field(0.5, ge=0, le=1)
    min_tracking_confidence: float = Field(0.5, ge=0, le=1)
    task_model_path: Optional[Path] = Field(
        None,
        description="face_landmarker.task model, only needed for MediaPipe builds without 'solutions'."
    )

class GameSettings(BaseModel):
    shuffle: bool = True
    question_limit: Optional[PositiveInt] = None
    unit_ids: Optional[list[str]] = None
    questions_path: Optional[Path] = Field(None, description="JSON question bank. Bundled bank if unset.")

class FeedbackSettings(BaseModel):
    """Durations (seconds) of the answer feedback shown before moving on."""
    highlight_s: float = Field(0.3, ge=0)
    correct_s: float = Field(1.5, ge=0)
    incorrect_s: float = Field(1.2, ge=0)

class AppSettings(BaseSettings):
    """
    Main application settings, loaded from environment variables and defaults.
    """
    use_dummy_mode: bool = False

    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    camera: CameraSettings = Field(default_factory=CameraSettings)
    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    game: GameSettings = Field(default_factory=GameSettings)
    feedback: FeedbackSettings = Field(default_factory=FeedbackSettings)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="TILTQUIZ__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )
