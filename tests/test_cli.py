import logging
from pathlib import Path

import pytest

from tilt_quiz.__main__ import apply_overrides, parse_args, run_game
from tilt_quiz.configs import AppSettings
from tilt_quiz.errors import TiltQuizError
from tilt_quiz.utils import ThrottledLogger


def test_parse_args_and_overrides():
    args = parse_args(["--dummy", "--limit", "3", "--no-shuffle", "--unit", "Animals", "--unit", "u2",
                       "--questions", "bank.json"])
    settings = apply_overrides(AppSettings(), args)

    assert settings.use_dummy_mode
    assert settings.game.question_limit == 3
    assert settings.game.shuffle is False
    assert settings.game.questions_path == Path("bank.json")
    assert args.unit == ["Animals", "u2"]


def test_zero_limit_means_no_limit():
    settings = apply_overrides(AppSettings(), parse_args(["--limit", "0"]))
    assert settings.game.question_limit is None


@pytest.mark.asyncio
async def test_unknown_unit_is_reported():
    settings = AppSettings(use_dummy_mode=True)
    with pytest.raises(TiltQuizError, match="Unknown unit"):
        await run_game(settings, ["No Such Unit"])


@pytest.mark.asyncio
async def test_dummy_game_plays_to_the_end(capsys):
    settings = AppSettings(use_dummy_mode=True)
    settings.game.question_limit = 2
    settings.feedback.highlight_s = 0.0
    settings.feedback.correct_s = 0.0
    settings.feedback.incorrect_s = 0.0

    result = await run_game(settings)

    assert result.total_answered == 2
    out = capsys.readouterr().out
    assert "Question 1/2" in out
    assert "Question 2/2" in out
    assert result.title in out


def test_throttled_logger_collapses_repeats(caplog):
    throttled = ThrottledLogger(logging.getLogger("tilt_quiz.test"), interval_sec=60)
    with caplog.at_level(logging.INFO, logger="tilt_quiz.test"):
        for _ in range(5):
            throttled.warning("no frame")
    assert len(caplog.records) == 1
    assert caplog.records[0].getMessage() == "[1] no frame"
