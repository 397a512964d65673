from .gesture import Direction, GestureEvent, TiltSample
from .landmarks import Landmark, LandmarkSet
from .question import PreparedQuestion, Question, Unit
from .result import ResultTier, SessionResult

__all__ = [
    "Direction",
    "GestureEvent",
    "Landmark",
    "LandmarkSet",
    "PreparedQuestion",
    "Question",
    "ResultTier",
    "SessionResult",
    "TiltSample",
    "Unit",
]
