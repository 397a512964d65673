import random

import pytest

from conftest import FakeClock, FixedDetector, ManualFeedback, ManualFrameSource, wait_until
from tilt_quiz.configs import AppSettings
from tilt_quiz.core import CameraSession, GameManager, QuizState
from tilt_quiz.errors import AcquisitionError, EmptySessionError
from tilt_quiz.feedback import ImmediateFeedback
from tilt_quiz.models import Direction, ResultTier
from tilt_quiz.questions import QuestionBank
from tilt_quiz.tracking import GestureDebouncer, TiltClassifier

BANK = {
    "units": [{"id": "animals", "name": "Animals"}, {"id": "food", "name": "Food"}],
    "questions": [
        {"unit": "Animals", "question": "Barks", "correct": "dog", "wrong": "cat"},
        {"unit": "Animals", "question": "Meows", "correct": "cat", "wrong": "dog"},
        {"unit": "Animals", "question": "Moos", "correct": "cow", "wrong": "pig"},
        {"unit": "Food", "question": "Yellow fruit", "correct": "banana", "wrong": "plum", "disabled": True},
    ],
}


def make_manager(feedback=None, sources=None, detector_angle=20.0):
    made = {"sources": [], "detectors": []}

    def new_source():
        source = (sources or ManualFrameSource)()
        made["sources"].append(source)
        return source

    def new_detector():
        detector = FixedDetector(detector_angle)
        made["detectors"].append(detector)
        return detector

    camera = CameraSession(new_source, new_detector, TiltClassifier(), GestureDebouncer(800, clock=FakeClock()))
    manager = GameManager(
        settings=AppSettings(),
        bank=QuestionBank.from_data(BANK),
        camera=camera,
        feedback=feedback or ImmediateFeedback(),
        rng=random.Random(7),
    )
    return manager, made


@pytest.mark.asyncio
async def test_full_game_reaches_finished_and_stops_camera():
    manager, _ = make_manager()
    session = await manager.start_game(unit_ids=["animals"])
    assert manager.camera.is_tracking
    assert session.total_questions == 3

    for question in list(session.questions):
        session.answer(question.correct_side)

    result = await manager.wait_finished()
    assert result.score == 3 and result.total_answered == 3
    assert result.tier is ResultTier.SUPERSTAR
    assert not manager.camera.is_active
    assert not manager.debouncer.has_subscriber


@pytest.mark.asyncio
async def test_tilt_frames_answer_questions():
    manager, made = make_manager(detector_angle=20.0)
    session = await manager.start_game(shuffle=False, unit_ids=["animals"])

    source = made["sources"][0]
    source.push()
    await wait_until(lambda: source.processed == 1)

    assert session.current_index == 1
    expected = 1 if session.questions[0].correct_side is Direction.LEFT else 0
    assert session.score == expected
    await manager.shutdown()


@pytest.mark.asyncio
async def test_end_game_early_counts_answered_only():
    feedback = ManualFeedback()
    manager, _ = make_manager(feedback=feedback)
    session = await manager.start_game(unit_ids=["animals"])

    session.answer(session.current_question.correct_side)
    feedback.complete()
    # Second answer is still in its feedback when the game is ended.
    session.answer(session.current_question.correct_side)

    result = await manager.end_game()
    assert result.total_answered == 1
    assert session.state is QuizState.FINISHED
    assert not manager.camera.is_active
    assert await manager.wait_finished() is result

    # A late feedback completion must not revive the session.
    session_index = session.current_index
    for pending in list(feedback.pending):
        pending()
    assert session.current_index == session_index


@pytest.mark.asyncio
async def test_no_eligible_questions_raises_before_camera_starts():
    manager, made = make_manager()
    with pytest.raises(EmptySessionError):
        await manager.start_game(unit_ids=["food"])
    assert made["sources"] == []
    assert manager.session is None


@pytest.mark.asyncio
async def test_camera_failure_propagates():
    manager, _ = make_manager(sources=lambda: ManualFrameSource(fail_open=AcquisitionError("denied")))
    with pytest.raises(AcquisitionError):
        await manager.start_game()
    assert manager.session is None
    assert not manager.camera.is_active


@pytest.mark.asyncio
async def test_limit_and_new_game_replaces_old_one():
    feedback = ManualFeedback()
    manager, _ = make_manager(feedback=feedback)
    first = await manager.start_game(limit=2)
    assert first.total_questions == 2

    second = await manager.start_game(limit=1)
    assert first.is_finished
    assert not second.is_finished
    assert manager.camera.is_tracking
    await manager.shutdown()
    assert second.is_finished


@pytest.mark.asyncio
async def test_shutdown_is_idempotent():
    manager, _ = make_manager()
    await manager.shutdown()
    await manager.start_camera()
    await manager.shutdown()
    await manager.shutdown()
    assert not manager.camera.is_active


@pytest.mark.asyncio
async def test_wait_finished_without_game_fails():
    manager, _ = make_manager()
    with pytest.raises(RuntimeError):
        await manager.wait_finished()
