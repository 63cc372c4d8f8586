import pytest
from pydantic import ValidationError

from affirm.config import AffirmSettings, get_settings, reset_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("AFFIRM_TIMEZONE_OFFSET_MINUTES", raising=False)

    settings = AffirmSettings()

    assert settings.max_recursion_depth == 10
    assert settings.use_line_breaks is False
    assert settings.max_formatted_depth == 5
    assert settings.timezone_offset_minutes is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("AFFIRM_MAX_RECURSION_DEPTH", "4")
    monkeypatch.setenv("AFFIRM_USE_LINE_BREAKS", "true")

    settings = AffirmSettings()

    assert settings.max_recursion_depth == 4
    assert settings.use_line_breaks is True


def test_rejects_invalid_depth(monkeypatch):
    monkeypatch.setenv("AFFIRM_MAX_RECURSION_DEPTH", "0")

    with pytest.raises(ValidationError):
        AffirmSettings()


def test_settings_are_cached_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("AFFIRM_MAX_RECURSION_DEPTH", "7")
    reset_settings()

    assert get_settings() is not first
    assert get_settings().max_recursion_depth == 7
