import logging

import pytest

from folproof import config
from folproof.config import DEFAULT_DECISION_LIMIT, Settings
from folproof.result import Err, Ok


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FOLPROOF_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FOLPROOF_DECISION_LIMIT", raising=False)


def test_defaults() -> None:
    match Settings.from_env():
        case Ok(settings):
            assert settings.log_level == "WARNING"
            assert settings.decision_limit == DEFAULT_DECISION_LIMIT
            assert settings.log_level_number == logging.WARNING
        case Err(e):
            pytest.fail(f"Expected Ok, got Err: {e}")


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOLPROOF_LOG_LEVEL", "debug")
    monkeypatch.setenv("FOLPROOF_DECISION_LIMIT", "50")
    match Settings.from_env():
        case Ok(settings):
            assert settings == Settings(log_level="DEBUG", decision_limit=50)
        case Err(e):
            pytest.fail(f"Expected Ok, got Err: {e}")


def test_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOLPROOF_LOG_LEVEL", "LOUD")
    match Settings.from_env():
        case Err(e):
            assert "LOUD" in str(e)
        case Ok(settings):
            pytest.fail(f"Expected Err, got {settings}")


@pytest.mark.parametrize("raw", ["0", "-3", "many", ""])
def test_bad_decision_limit(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("FOLPROOF_DECISION_LIMIT", raw)
    assert isinstance(Settings.from_env(), Err)


def test_cached_settings_raise_on_bad_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOLPROOF_DECISION_LIMIT", "none")
    config.settings.cache_clear()
    try:
        with pytest.raises(ValueError):
            config.settings()
    finally:
        config.settings.cache_clear()
