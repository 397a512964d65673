import pytest
from pydantic import ValidationError

from tilt_quiz.configs import AppSettings, TrackingSettings


def test_defaults():
    settings = AppSettings()
    assert settings.tracking.threshold_deg == 12.0
    assert settings.tracking.debounce_ms == 800.0
    assert (settings.tracking.left_eye_index, settings.tracking.right_eye_index) == (33, 263)
    assert (settings.camera.width, settings.camera.height) == (640, 480)
    assert settings.feedback.correct_s == 1.5
    assert settings.feedback.incorrect_s == 1.2
    assert settings.game.shuffle is True
    assert settings.use_dummy_mode is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TILTQUIZ__TRACKING__THRESHOLD_DEG", "15")
    monkeypatch.setenv("TILTQUIZ__GAME__QUESTION_LIMIT", "5")
    monkeypatch.setenv("TILTQUIZ__USE_DUMMY_MODE", "true")
    settings = AppSettings()
    assert settings.tracking.threshold_deg == 15.0
    assert settings.game.question_limit == 5
    assert settings.use_dummy_mode is True


def test_eye_indices_must_differ():
    with pytest.raises(ValidationError):
        TrackingSettings(left_eye_index=33, right_eye_index=33)


def test_debounce_must_be_positive():
    with pytest.raises(ValidationError):
        TrackingSettings(debounce_ms=0)
