from abc import ABC, abstractmethod
from asyncio import Event
from typing import Any, Awaitable, Callable, Optional, final

from ..models import LandmarkSet

# Opaque image handed from a FrameSource to a LandmarkDetector.
Frame = Any
FrameCallback = Callable[[Frame], Awaitable[None]]


class FrameSource(ABC):
    """
    Abstract Base Class for all video frame sources.

    A FrameSource owns one capture device. It is opened once, then `run`
    delivers frames one at a time to a callback until `stop` is called.
    Instances are single-use: a new camera session creates a new source.
    """

    def __init__(self):
        self._stop_event = Event()

    @abstractmethod
    async def open(self) -> None:
        """
        Acquires the capture device.

        Raises AcquisitionError if the device is unavailable. Must not leave
        the device half-open on failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def run(self, on_frame: FrameCallback) -> None:
        """
        Delivers frames serially to `on_frame` until the stop event is set.

        The next frame is not read before `on_frame` has returned.
        """
        raise NotImplementedError

    @abstractmethod
    def release(self) -> None:
        """Releases the capture device. Safe to call more than once."""
        raise NotImplementedError

    @final
    async def stop(self) -> None:
        """
        Signals the source to stop delivering frames.

        This is a final method and should not be overridden. Subclasses can
        perform cleanup in their 'run' method's finally block.
        """
        self._stop_event.set()

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()


class LandmarkDetector(ABC):
    """Finds one face in a frame and returns its landmarks."""

    @abstractmethod
    def detect(self, frame: Frame) -> Optional[LandmarkSet]:
        """
        Blocking call. Returns the first face's landmarks or None if no
        face was found.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Releases the detector model. Safe to call more than once."""
        raise NotImplementedError
