import time
import logging

class ThrottledLogger:
    """
    Collapses repeated per-frame messages into one record per interval.
    The number of suppressed calls is prefixed to the emitted message.
    """
    def __init__(self, logger: logging.Logger, interval_sec: float = 5.0) -> None:
        self._logger = logger
        self._interval = interval_sec
        self._last_log_time = 0.0
        self._counter = 0

    def _log(self, level: int, message: str, *args, **kwargs) -> None:
        self._counter += 1
        now = time.monotonic()

        if self._last_log_time == 0.0 or now - self._last_log_time >= self._interval:
            self._logger.log(level, "[%d] " + message, self._counter, *args, **kwargs)
            self._last_log_time = now
            self._counter = 0

    def info(self, message: str, *args, **kwargs) -> None:
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self._log(logging.ERROR, message, *args, **kwargs)
