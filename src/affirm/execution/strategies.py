"""What an assertion scope does with the failures recorded into it."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

from affirm.exceptions import AssertionFailedError


class FailureKind(enum.Enum):
    """Category of a recorded failure."""

    ASSERTION_FAILED = "assertion_failed"
    CONFIGURATION = "configuration"
    NO_STRATEGY_FOUND = "no_strategy_found"
    CYCLIC_REFERENCE = "cyclic_reference"
    MAX_DEPTH = "max_depth"


@dataclass(frozen=True, slots=True, eq=False)
class Failure:
    """One rendered failure line.

    Records compare by identity, so the same record handed to a scope twice is
    stored once while two identical lines from separate calls are both kept.

    Attributes
    ----------
    message : str
        The rendered failure text.
    kind : FailureKind
        Why the failure was recorded.
    """

    message: str
    kind: FailureKind = FailureKind.ASSERTION_FAILED

    def __str__(self) -> str:
        return self.message


def build_error_message(failures: list[Failure], reportables: Mapping[str, str]) -> str:
    message = "\n".join(failure.message for failure in failures)
    if reportables:
        message += "\n\n" + "\n".join(f"With {key}:\n{value}" for key, value in reportables.items())
    return message


class AssertionStrategy(ABC):
    """Policy for handling failures recorded into a scope."""

    @property
    @abstractmethod
    def failures(self) -> list[Failure]:
        """Failures held by this strategy, in the order they were recorded."""

    @abstractmethod
    def handle_failure(self, failure: Failure) -> None:
        """Accept a newly recorded failure."""

    @abstractmethod
    def discard_failures(self) -> list[Failure]:
        """Forget and return every failure held so far."""

    @abstractmethod
    def throw_if_any(self, reportables: Mapping[str, str]) -> None:
        """Raise one `AssertionFailedError` if any failure is held."""


class CollectingAssertionStrategy(AssertionStrategy):
    """Keep failures until the owning scope ends."""

    def __init__(self) -> None:
        self._failures: list[Failure] = []

    @property
    def failures(self) -> list[Failure]:
        return list(self._failures)

    def handle_failure(self, failure: Failure) -> None:
        if any(existing is failure for existing in self._failures):
            return
        self._failures.append(failure)

    def discard_failures(self) -> list[Failure]:
        discarded, self._failures = self._failures, []
        return discarded

    def throw_if_any(self, reportables: Mapping[str, str]) -> None:
        if self._failures:
            failures = self.discard_failures()
            raise AssertionFailedError(
                build_error_message(failures, reportables),
                [failure.message for failure in failures],
            )


class ThrowingAssertionStrategy(AssertionStrategy):
    """Raise as soon as a failure is recorded; used outside any explicit scope."""

    @property
    def failures(self) -> list[Failure]:
        return []

    def handle_failure(self, failure: Failure) -> None:
        raise AssertionFailedError(failure.message)

    def discard_failures(self) -> list[Failure]:
        return []

    def throw_if_any(self, reportables: Mapping[str, str]) -> None:
        return None
