import asyncio

import pytest

from tilt_quiz.acquisition import DummyFrameSource, ScriptedDetector
from tilt_quiz.errors import AcquisitionError
from tilt_quiz.models import Direction
from tilt_quiz.tracking import TiltClassifier


def test_scripted_detector_replays_and_loops():
    detector = ScriptedDetector([(0.0, 1), (20.0, 2), (None, 1)])
    classifier = TiltClassifier()
    directions = [classifier.classify(detector.detect(i)).direction for i in range(5)]
    assert directions == [None, Direction.LEFT, Direction.LEFT, None, None]

    detector.close()
    assert detector.closed


def test_scripted_detector_rejects_empty_script():
    with pytest.raises(ValueError):
        ScriptedDetector([])
    with pytest.raises(ValueError):
        ScriptedDetector([(10.0, 0)])


@pytest.mark.asyncio
async def test_dummy_source_delivers_numbered_frames_until_stopped():
    source = DummyFrameSource(fps=200)
    await source.open()
    assert source.is_open

    frames = []

    async def on_frame(frame):
        frames.append(frame)
        if len(frames) == 5:
            await source.stop()

    await asyncio.wait_for(source.run(on_frame), timeout=2)
    source.release()

    assert frames == [0, 1, 2, 3, 4]
    assert not source.is_open


@pytest.mark.asyncio
async def test_dummy_source_can_refuse_to_open():
    source = DummyFrameSource(fail_open=True)
    with pytest.raises(AcquisitionError):
        await source.open()
