from .classifier import TiltClassifier, classify_angle, tilt_angle
from .debouncer import GestureCallback, GestureDebouncer, Subscription

__all__ = [
    "GestureCallback",
    "GestureDebouncer",
    "Subscription",
    "TiltClassifier",
    "classify_angle",
    "tilt_angle",
]
