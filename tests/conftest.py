import asyncio
import threading

import pytest

from tilt_quiz.acquisition import FrameSource, LandmarkDetector, landmarks_for_angle


class FakeClock:
    """Millisecond clock that only moves when told to."""
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class ManualFeedback:
    """Feedback presenter whose completions are fired by the test."""
    def __init__(self):
        self.pending = []
        self.outcomes = []
        self.celebrated = []
        self.cancel_calls = 0

    def present_correct(self, on_complete):
        self.outcomes.append(True)
        self.pending.append(on_complete)

    def present_incorrect(self, on_complete):
        self.outcomes.append(False)
        self.pending.append(on_complete)

    def celebrate(self, result):
        self.celebrated.append(result)

    def cancel(self):
        self.cancel_calls += 1

    def complete(self):
        self.pending.pop(0)()


class ManualFrameSource(FrameSource):
    """FrameSource fed by the test through `push`."""
    def __init__(self, fail_open: Exception = None, hang_open: bool = False):
        super().__init__()
        self._fail_open = fail_open
        self._hang_open = hang_open
        self._frames = []
        self.opened = False
        self.release_count = 0
        self.processed = 0

    async def open(self):
        if self._hang_open:
            await asyncio.Event().wait()
        if self._fail_open is not None:
            raise self._fail_open
        self.opened = True

    async def run(self, on_frame):
        while not self._stop_event.is_set():
            if not self._frames:
                await asyncio.sleep(0.001)
                continue
            await on_frame(self._frames.pop(0))
            self.processed += 1

    def release(self):
        self.release_count += 1

    def push(self, frame="frame"):
        self._frames.append(frame)


class FixedDetector(LandmarkDetector):
    """Always sees the same face, tilted by `angle_deg` (None: no face)."""
    def __init__(self, angle_deg=20.0, fail_first: int = 0):
        self._angle = angle_deg
        self._fail_first = fail_first
        self.calls = 0
        self.close_count = 0

    def detect(self, frame):
        self.calls += 1
        if self.calls <= self._fail_first:
            raise RuntimeError("detector hiccup")
        return None if self._angle is None else landmarks_for_angle(self._angle)

    def close(self):
        self.close_count += 1


class BlockingDetector(FixedDetector):
    """Blocks inside `detect` until the test sets `release`."""
    def __init__(self, angle_deg=20.0):
        super().__init__(angle_deg)
        self.entered = threading.Event()
        self.release = threading.Event()
        self.inside = False
        self.closed_while_inside = False

    def detect(self, frame):
        self.inside = True
        self.entered.set()
        try:
            self.release.wait(timeout=5)
            return super().detect(frame)
        finally:
            self.inside = False

    def close(self):
        if self.inside:
            self.closed_while_inside = True
        super().close()


async def wait_until(predicate, timeout: float = 2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.002)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def feedback():
    return ManualFeedback()
