from .app import (
    AppSettings,
    CameraSettings,
    DetectorSettings,
    FeedbackSettings,
    GameSettings,
    TrackingSettings,
)
from .utils import LoggingConfig

__all__ = [
    "AppSettings",
    "CameraSettings",
    "DetectorSettings",
    "FeedbackSettings",
    "GameSettings",
    "LoggingConfig",
    "TrackingSettings",
]
