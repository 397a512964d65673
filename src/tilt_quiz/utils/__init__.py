from .clock import Clock, monotonic_ms
from .logging import ThrottledLogger

__all__ = ["Clock", "ThrottledLogger", "monotonic_ms"]
