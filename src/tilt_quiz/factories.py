from functools import partial
from typing import Callable, Optional

from .acquisition import DummyFrameSource, FrameSource, LandmarkDetector, ScriptedDetector
from .configs import AppSettings
from .core import CameraSession, FeedbackPresenter, GameManager, QuizView, SampleSink
from .feedback import TimedFeedback
from .questions import QuestionBank
from .tracking import GestureDebouncer, TiltClassifier


def create_source_factory(settings: AppSettings) -> Callable[[], FrameSource]:
    """
    Returns a factory producing a fresh FrameSource for each camera session.
    """
    if settings.use_dummy_mode:
        return partial(DummyFrameSource, fps=30)

    # Needs the `camera` extra.
    from .acquisition.opencv import OpenCVFrameSource
    return partial(OpenCVFrameSource, settings.camera)


def create_detector_factory(settings: AppSettings) -> Callable[[], LandmarkDetector]:
    if settings.use_dummy_mode:
        return ScriptedDetector

    from .acquisition.face_mesh import FaceMeshDetector
    return partial(FaceMeshDetector, settings.detector)


def create_camera_session(settings: AppSettings) -> CameraSession:
    tracking = settings.tracking
    return CameraSession(
        source_factory=create_source_factory(settings),
        detector_factory=create_detector_factory(settings),
        classifier=TiltClassifier(
            threshold_deg=tracking.threshold_deg,
            left_eye_index=tracking.left_eye_index,
            right_eye_index=tracking.right_eye_index,
        ),
        debouncer=GestureDebouncer(debounce_ms=tracking.debounce_ms),
        start_timeout_s=settings.camera.start_timeout_s,
    )


def load_question_bank(settings: AppSettings) -> QuestionBank:
    path = settings.game.questions_path
    return QuestionBank.from_file(path) if path else QuestionBank.default()


def create_game_manager(
    settings: AppSettings,
    view: Optional[QuizView] = None,
    feedback: Optional[FeedbackPresenter] = None,
    sample_sink: Optional[SampleSink] = None,
) -> GameManager:
    return GameManager(
        settings=settings,
        bank=load_question_bank(settings),
        camera=create_camera_session(settings),
        feedback=feedback or TimedFeedback(settings.feedback),
        view=view,
        sample_sink=sample_sink,
    )
