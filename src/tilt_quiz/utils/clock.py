import time
from typing import Callable

# Returns a monotonic timestamp in milliseconds.
Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic_ns() / 1_000_000
