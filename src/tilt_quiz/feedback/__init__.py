from .console import ConsoleView, TiltIndicator
from .timed import ImmediateFeedback, TimedFeedback

__all__ = ["ConsoleView", "ImmediateFeedback", "TiltIndicator", "TimedFeedback"]
