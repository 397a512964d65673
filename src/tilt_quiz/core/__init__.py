from .camera import CameraSession, SampleSink
from .protocols import FeedbackDone, FeedbackPresenter, QuizView
from .quiz import QuizSession, prepare_question
from .state import QuizState
from .manager import GameManager

__all__ = [
    "CameraSession",
    "FeedbackDone",
    "FeedbackPresenter",
    "GameManager",
    "QuizSession",
    "QuizState",
    "QuizView",
    "SampleSink",
    "prepare_question",
]
