import logging
from typing import Callable, Optional

from ..models import GestureEvent, TiltSample
from ..utils.clock import Clock, monotonic_ms

logger = logging.getLogger(__name__)

GestureCallback = Callable[[GestureEvent], None]


class Subscription:
    """
    Handle returned by `GestureDebouncer.subscribe`.

    Revoking only clears the debouncer slot if this subscription still holds
    it, so a stale holder can never unsubscribe its successor.
    """
    __slots__ = ("_debouncer", "_callback")

    def __init__(self, debouncer: "GestureDebouncer", callback: GestureCallback):
        self._debouncer = debouncer
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._debouncer._callback is self._callback

    def revoke(self) -> None:
        if self.active:
            self._debouncer.clear()


class GestureDebouncer:
    """
    Turns per-frame tilt samples into discrete gesture events.

    At most one event is emitted per debounce window, however long a tilt is
    held. Samples inside the window are dropped, not queued. There is a single
    callback slot: subscribing replaces the previous holder.
    """

    def __init__(self, debounce_ms: float = 800.0, clock: Clock = monotonic_ms):
        if debounce_ms <= 0:
            raise ValueError("Debounce window must be positive.")
        self._debounce_ms = debounce_ms
        self._clock = clock
        self._callback: Optional[GestureCallback] = None
        self._last_emitted_at: Optional[float] = None

    @property
    def debounce_ms(self) -> float:
        return self._debounce_ms

    @property
    def has_subscriber(self) -> bool:
        return self._callback is not None

    def subscribe(self, callback: GestureCallback) -> Subscription:
        """Registers `callback`, discarding any previous one. The next gesture fires immediately."""
        self._callback = callback
        self._last_emitted_at = None
        logger.debug("Gesture callback registered.")
        return Subscription(self, callback)

    def clear(self) -> None:
        self._callback = None
        self._last_emitted_at = None
        logger.debug("Gesture callback cleared.")

    def feed(self, sample: TiltSample) -> Optional[GestureEvent]:
        """
        Offers one classified sample. Returns the emitted event, if any.
        """
        if sample.direction is None or self._callback is None:
            return None

        now = self._clock()
        if self._last_emitted_at is not None and now - self._last_emitted_at < self._debounce_ms:
            logger.debug("Dropped %s tilt inside debounce window.", sample.direction.value)
            return None

        event = GestureEvent(direction=sample.direction, timestamp_ms=now)
        # Stamp before dispatch so re-entrant feeds from the callback are debounced too.
        self._last_emitted_at = now
        logger.info("Tilt detected: %s, angle: %.1f°", event.direction.value, sample.angle_deg or 0.0)
        self._callback(event)
        return event
