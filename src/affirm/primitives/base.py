"""Base classes shared by the fluent assertion entry points."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from affirm.execution import AssertionScope


TAssertions = TypeVar("TAssertions", bound="BaseAssertions")


class AndConstraint(Generic[TAssertions]):
    """Result of a passed assertion, allowing further assertions on the same subject.

    Attributes
    ----------
    and_ : BaseAssertions
        The assertions object the constraint was returned by.

    Examples
    --------
    >>> should(3).not_be_none().and_.be(3)
    """

    def __init__(self, parent: TAssertions):
        self.and_ = parent


class BaseAssertions:
    """Holds the subject of a chain of assertions.

    Parameters
    ----------
    subject : Any
        The value being asserted on.
    declared_type : Any or None
        Static type of the subject, used by the equivalency engine. None when
        unknown.
    scope : AssertionScope or None
        Scope receiving the failures. Defaults to the current scope at the time
        each assertion runs.
    """

    def __init__(self, subject: Any, declared_type: Any = None, scope: AssertionScope | None = None):
        self.subject = subject
        self.declared_type = declared_type
        self._scope = scope

    @property
    def scope(self) -> AssertionScope:
        return self._scope if self._scope is not None else AssertionScope.current()

    def _execute(self, because: str, because_args: tuple[Any, ...]) -> AssertionScope:
        return self.scope.because_of(because, *because_args)

    def _and(self) -> AndConstraint:
        return AndConstraint(self)
