import asyncio
import logging
from typing import Optional

import cv2

from ..configs import CameraSettings
from ..errors import AcquisitionError
from ..utils.logging import ThrottledLogger
from .base import FrameCallback, FrameSource

logger = logging.getLogger(__name__)


class OpenCVFrameSource(FrameSource):
    """
    A FrameSource backed by a local webcam through OpenCV.

    Frames are BGR numpy arrays, passed on unflipped. Only the on-screen
    preview is mirrored, and the tilt sign convention depends on that.
    """

    def __init__(self, settings: CameraSettings):
        super().__init__()
        self._settings = settings
        self._cap: Optional[cv2.VideoCapture] = None
        self._read_failures = ThrottledLogger(logger)

    async def open(self) -> None:
        index = self._settings.index
        logger.info("Opening camera %d...", index)
        # The device open can't be interrupted; if we are cancelled, release whatever it returns.
        opening = asyncio.ensure_future(asyncio.to_thread(cv2.VideoCapture, index))
        try:
            cap = await asyncio.shield(opening)
        except asyncio.CancelledError:
            opening.add_done_callback(_release_abandoned)
            raise

        if not cap.isOpened():
            cap.release()
            raise AcquisitionError(f"Unable to open camera {index}. Is it in use or is access denied?")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._settings.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._settings.height)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        self._cap = cap
        logger.info("Camera %d opened.", index)

    async def run(self, on_frame: FrameCallback) -> None:
        if self._cap is None:
            raise RuntimeError("Camera not opened.")

        try:
            while not self._stop_event.is_set():
                ok, frame = await asyncio.to_thread(self._cap.read)
                if not ok:
                    self._read_failures.warning("Camera returned no frame.")
                    await asyncio.sleep(0.05)
                    continue
                await on_frame(frame)

        except asyncio.CancelledError:
            logger.info("Camera read loop cancelled.")
            raise
        finally:
            logger.info("Camera frame loop has stopped.")

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera released.")


def _release_abandoned(opening: asyncio.Future) -> None:
    if opening.cancelled() or opening.exception() is not None:
        return
    opening.result().release()
    logger.info("Released a camera that finished opening after the open was cancelled.")
