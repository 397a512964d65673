import asyncio
import logging
from typing import Optional

from ..configs import FeedbackSettings
from ..core.protocols import FeedbackDone
from ..models import SessionResult

logger = logging.getLogger(__name__)


class TimedFeedback:
    """
    Feedback presenter that holds each answer for a fixed time on the event loop.

    The answer is highlighted for `highlight_s`, then the correct/wrong
    feedback plays for `correct_s` / `incorrect_s` before `on_complete`
    fires. Must be used from within a running event loop.
    """

    def __init__(self, settings: FeedbackSettings, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._settings = settings
        self._loop = loop
        self._pending: set[asyncio.TimerHandle] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def present_correct(self, on_complete: FeedbackDone) -> None:
        logger.info("Correct!")
        self._schedule(self._settings.highlight_s + self._settings.correct_s, on_complete)

    def present_incorrect(self, on_complete: FeedbackDone) -> None:
        logger.info("Wrong answer.")
        self._schedule(self._settings.highlight_s + self._settings.incorrect_s, on_complete)

    def celebrate(self, result: SessionResult) -> None:
        if result.score > 0:
            logger.info("Celebrating %d/%d!", result.score, result.total_answered)

    def cancel(self) -> None:
        for handle in self._pending:
            handle.cancel()
        if self._pending:
            logger.debug("Cancelled %d pending feedback timer(s).", len(self._pending))
        self._pending.clear()

    def _schedule(self, delay_s: float, on_complete: FeedbackDone) -> None:
        loop = self._loop or asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def _fire() -> None:
            self._pending.discard(handle)
            on_complete()

        handle = loop.call_later(delay_s, _fire)
        self._pending.add(handle)


class ImmediateFeedback:
    """Completes every feedback synchronously. For headless runs and tests."""

    def __init__(self):
        self.presented: list[bool] = []
        self.celebrated: list[SessionResult] = []

    def present_correct(self, on_complete: FeedbackDone) -> None:
        self.presented.append(True)
        on_complete()

    def present_incorrect(self, on_complete: FeedbackDone) -> None:
        self.presented.append(False)
        on_complete()

    def celebrate(self, result: SessionResult) -> None:
        self.celebrated.append(result)

    def cancel(self) -> None:
        pass
