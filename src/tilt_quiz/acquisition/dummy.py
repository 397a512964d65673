import asyncio
import logging
import math
import time
from typing import Optional, Sequence

from ..errors import AcquisitionError
from ..models import LandmarkSet
from .base import FrameCallback, FrameSource, LandmarkDetector

logger = logging.getLogger(__name__)

FACE_MESH_POINTS = 468

# (angle in degrees, number of frames) -- straight, their left, straight, their right.
DEFAULT_SCRIPT: tuple[tuple[float, int], ...] = (
    (0.0, 45),
    (20.0, 15),
    (0.0, 45),
    (-20.0, 15),
)


class DummyFrameSource(FrameSource):
    """
    A FrameSource that emits numbered synthetic frames at a fixed rate.

    Frames are plain integers (the frame counter), which is all the
    ScriptedDetector needs. Useful for running the game without a webcam.
    """

    def __init__(self, fps: int = 30, open_delay_s: float = 0.0, fail_open: bool = False):
        super().__init__()
        if fps <= 0:
            raise ValueError("FPS must be positive.")
        self._interval_s = 1.0 / fps
        self._open_delay_s = open_delay_s
        self._fail_open = fail_open
        self.is_open = False
        self.release_count = 0

    async def open(self) -> None:
        if self._open_delay_s:
            await asyncio.sleep(self._open_delay_s)
        if self._fail_open:
            raise AcquisitionError("Dummy camera refused to open.")
        self.is_open = True
        logger.info("DummyFrameSource opened at %.0f FPS.", 1.0 / self._interval_s)

    async def run(self, on_frame: FrameCallback) -> None:
        start_time = time.monotonic()
        frame_counter = 0

        try:
            while not self._stop_event.is_set():
                target_time = start_time + (frame_counter * self._interval_s)
                await on_frame(frame_counter)
                frame_counter += 1

                sleep_duration = target_time + self._interval_s - time.monotonic()
                if sleep_duration > 0:
                    await asyncio.sleep(sleep_duration)
                else:
                    await asyncio.sleep(0)

        except asyncio.CancelledError:
            logger.info("Dummy frame source run task was cancelled.")
            raise
        finally:
            logger.info("DummyFrameSource has stopped after %d frames.", frame_counter)

    def release(self) -> None:
        self.is_open = False
        self.release_count += 1


def landmarks_for_angle(angle_deg: float, eye_distance: float = 0.2,
                        left_eye_index: int = 33, right_eye_index: int = 263) -> LandmarkSet:
    """Builds a face whose eye line is rotated by `angle_deg`."""
    half = eye_distance / 2
    dx = half * math.cos(math.radians(angle_deg))
    dy = half * math.sin(math.radians(angle_deg))
    points = [(0.5, 0.5)] * FACE_MESH_POINTS
    points[left_eye_index] = (0.5 - dx, 0.5 - dy)
    points[right_eye_index] = (0.5 + dx, 0.5 + dy)
    return LandmarkSet.from_xy(points)


class ScriptedDetector(LandmarkDetector):
    """
    A LandmarkDetector that ignores image content and replays a looping
    script of tilt angles, one step per frame. An angle of None means
    "no face in view".
    """

    def __init__(self, script: Sequence[tuple[Optional[float], int]] = DEFAULT_SCRIPT):
        if not script or any(frames <= 0 for _, frames in script):
            raise ValueError("Script needs at least one step with a positive frame count.")
        self._timeline: list[Optional[float]] = [
            angle for angle, frames in script for _ in range(frames)
        ]
        self._calls = 0
        self.closed = False

    def detect(self, frame) -> Optional[LandmarkSet]:
        angle = self._timeline[self._calls % len(self._timeline)]
        self._calls += 1
        if angle is None:
            return None
        return landmarks_for_angle(angle)

    def close(self) -> None:
        self.closed = True
