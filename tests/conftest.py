import re
from collections.abc import Callable

import pytest

from affirm.config import reset_settings
from affirm.equivalency import AssertionOptions


def wildcard_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a pattern where ``*`` matches any text, newlines included."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


@pytest.fixture
def matches_wildcard() -> Callable[[str, str], bool]:
    """Whether a whole message matches a ``*`` wildcard pattern."""

    def matches(pattern: str, text: str) -> bool:
        return wildcard_pattern(pattern).fullmatch(text) is not None

    return matches


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Pin the local UTC offset and start every test from default settings and options."""
    monkeypatch.setenv("AFFIRM_TIMEZONE_OFFSET_MINUTES", "0")
    monkeypatch.delenv("AFFIRM_MAX_RECURSION_DEPTH", raising=False)
    monkeypatch.delenv("AFFIRM_USE_LINE_BREAKS", raising=False)
    reset_settings()
    AssertionOptions.reset()
    yield
    AssertionOptions.reset()
    reset_settings()
