"""Failure aggregation boundary for assertions."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from affirm.context import SCOPE_CONTEXT, get_current_scope
from affirm.execution.message import MessageBuilder, sanitize_reason
from affirm.execution.strategies import (
    AssertionStrategy,
    CollectingAssertionStrategy,
    Failure,
    FailureKind,
    ThrowingAssertionStrategy,
    build_error_message,
)


logger = logging.getLogger(__name__)


class AssertionScope:
    """Collects failures of the assertions executed inside it.

    Used as a context manager, the scope becomes the current scope of the
    calling thread or task. A scope nested in another one hands its failures
    to the parent when it ends; only the outermost scope raises, with one
    `AssertionFailedError` listing every failure.

    Parameters
    ----------
    context : str or None
        Description of what is being asserted on, used for ``{context}``.
        Inherited from the parent when omitted.
    parent : AssertionScope or None
        Scope receiving this scope's failures. Defaults to the current scope.
    strategy : AssertionStrategy or None
        What to do with failures. Defaults to collecting them.

    Examples
    --------
    >>> with AssertionScope():
    ...     should(1).be(2)
    ...     should("a").be("b")
    Traceback (most recent call last):
    AssertionFailedError: Expected object to be 2, but found 1.
    Expected object to be "b", but found "a".
    """

    def __init__(
        self,
        context: str | None = None,
        *,
        parent: AssertionScope | None = None,
        strategy: AssertionStrategy | None = None,
    ):
        self._parent = parent if parent is not None else get_current_scope()
        self._strategy = strategy or CollectingAssertionStrategy()
        self._context_data: dict[str, tuple[Any, bool]] = {}
        self._context: str | None = None
        self._use_line_breaks = False
        self._reason = ""
        self._expectation = ""
        self._succeeded = False
        self._reportable = True
        self._token = None

        if self._parent is not None:
            self._context_data.update(self._parent._context_data)
            self._context = self._parent._context
            self._use_line_breaks = self._parent._use_line_breaks

        if context is not None:
            self._context = context

    @classmethod
    def current(cls) -> AssertionScope:
        """The innermost active scope, or a scope that raises on the first failure."""
        scope = get_current_scope()
        if scope is None:
            scope = cls(strategy=ThrowingAssertionStrategy())
        return scope

    @property
    def parent(self) -> AssertionScope | None:
        return self._parent

    @property
    def context(self) -> str | None:
        return self._context

    @context.setter
    def context(self, value: str | None) -> None:
        self._context = value

    @property
    def succeeded(self) -> bool:
        return self._succeeded

    @property
    def failures(self) -> list[str]:
        return [failure.message for failure in self._strategy.failures]

    @property
    def failure_records(self) -> list[Failure]:
        return self._strategy.failures

    def has_failures(self) -> bool:
        return bool(self._strategy.failures)

    def using_line_breaks(self) -> AssertionScope:
        self._use_line_breaks = True
        return self

    def for_condition(self, condition: bool) -> AssertionScope:
        self._succeeded = bool(condition)
        return self

    def because_of(self, because: str = "", *because_args: Any) -> AssertionScope:
        """Set the reason appended to the next failure through ``{reason}``."""
        self._reason = sanitize_reason(because, because_args)
        return self

    def with_expectation(self, template: str, *args: Any) -> AssertionScope:
        """Set a prefix for the messages of subsequent failures."""
        self._expectation = self._build(template, args)
        return self

    def fail_with(self, template: str, *args: Any, kind: FailureKind = FailureKind.ASSERTION_FAILED) -> bool:
        """Record a failure unless the last condition held.

        Parameters
        ----------
        template : str
            Message template, see `MessageBuilder`.
        *args : Any
            Values substituted for ``{0}``, ``{1}``... after formatting.
        kind : FailureKind
            Category of the failure.

        Returns
        -------
        bool
            True when the condition held and nothing was recorded.
        """
        try:
            if self._succeeded:
                return True
            message = self._expectation + self._build(template, args, capitalize=not self._expectation)
            self.add_failure(Failure(message, kind))
            return False
        finally:
            self._succeeded = False

    def add_failure(self, failure: Failure | str) -> None:
        """Record an already rendered failure."""
        if isinstance(failure, str):
            failure = Failure(failure)
        self._strategy.handle_failure(failure)

    def add_reportable(self, key: str, value: Any) -> None:
        """Add data shown after the failures as ``With <key>:``; ``value`` may be a callable."""
        self._context_data[key] = (value, True)

    def add_non_reportable(self, key: str, value: Any) -> None:
        """Add data only available to ``{key}`` placeholders."""
        self._context_data[key] = (value, False)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._context_data:
            return default
        value, _ = self._context_data[key]
        return value() if callable(value) else value

    def discard(self) -> list[str]:
        """Drop the failures of this scope and stop it from reporting anything.

        Returns
        -------
        list[str]
            The failures recorded so far.
        """
        self._reportable = False
        discarded = [failure.message for failure in self._strategy.discard_failures()]
        if discarded:
            logger.debug("Discarded %d failure(s) in assertion scope", len(discarded))
        return discarded

    def dispose(self, error: BaseException | None = None) -> None:
        """End the scope, handing failures to the parent or raising them.

        Parameters
        ----------
        error : BaseException or None
            Exception propagating out of the scope. The outermost scope attaches
            its failures to it as a note instead of raising.
        """
        if not self._reportable:
            return

        if self._parent is not None:
            self._parent._receive(self)
            return

        if error is not None:
            failures = self._strategy.discard_failures()
            if failures:
                error.add_note(build_error_message(failures, self._reportables()))
            return

        self._strategy.throw_if_any(self._reportables())

    def _receive(self, child: AssertionScope) -> None:
        for key, (value, reportable) in child._context_data.items():
            if reportable:
                self._context_data[key] = (value, True)
        for failure in child._strategy.discard_failures():
            self._strategy.handle_failure(failure)

    def _reportables(self) -> dict[str, str]:
        return {
            key: str(value() if callable(value) else value)
            for key, (value, reportable) in self._context_data.items()
            if reportable
        }

    def _build(self, template: str, args: tuple[Any, ...], capitalize: bool = True) -> str:
        data = {key: value for key, (value, _) in self._context_data.items()}
        return MessageBuilder(self._use_line_breaks).build(
            template, args, self._reason, data, self._context, capitalize=capitalize
        )

    def __enter__(self) -> AssertionScope:
        self._token = SCOPE_CONTEXT.set(self)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if self._token is not None:
            SCOPE_CONTEXT.reset(self._token)
            self._token = None
        self.dispose(exc)
        return False
