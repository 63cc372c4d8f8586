"""Exception types raised by affirm."""

from __future__ import annotations

from collections.abc import Sequence


class AssertionFailedError(AssertionError):
    """AssertionError carrying every failure collected for one assertion call.

    Attributes
    ----------
    failures : list[str]
        The individual failure lines, in the order they were recorded.
    """

    def __init__(self, message: str, failures: Sequence[str] | None = None):
        self.failures = list(failures) if failures is not None else [message]
        super().__init__(message)


class InvalidOperationError(RuntimeError):
    """The library was used in a way that cannot produce a meaningful result.

    Raised immediately and never collected into an assertion scope.
    """
