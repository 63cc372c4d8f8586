"""User-defined assertions that replace the default comparison of matching nodes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from affirm.equivalency.typeinfo import origin_class
from affirm.equivalency.validation_context import EquivalencyValidationContext
from affirm.execution import AssertionScope
from affirm.formatting import type_name


if TYPE_CHECKING:
    from affirm.equivalency.options import EquivalencyOptions


@dataclass(frozen=True, slots=True)
class AssertionContext:
    """What a rule action receives about the node it compares.

    Attributes
    ----------
    subject : Any
        Value found at the node.
    expectation : Any
        Value expected at the node.
    because : str
        Reason template of the enclosing assertion.
    because_args : tuple
        Arguments for ``because``.
    """

    subject: Any
    expectation: Any
    because: str = ""
    because_args: tuple[Any, ...] = ()


class AssertionRule(ABC):
    """Takes over the comparison of nodes it applies to."""

    @abstractmethod
    def assert_equality(self, context: EquivalencyValidationContext, options: EquivalencyOptions) -> bool:
        """Compare the node if this rule applies to it.

        Returns
        -------
        bool
            True when the rule applied, whether or not the comparison failed.
        """

    def __str__(self) -> str:
        return type(self).__name__


class PredicateAssertionRule(AssertionRule):
    """Run ``action`` on every node for which ``predicate`` holds."""

    def __init__(
        self,
        predicate: Callable[[EquivalencyValidationContext], bool],
        action: Callable[[AssertionContext], Any],
        description: str | None = None,
    ):
        self.predicate = predicate
        self.action = action
        self.description = description or getattr(predicate, "__name__", repr(predicate))

    def assert_equality(self, context, options):
        if not self.predicate(context):
            return False
        self.action(AssertionContext(context.subject, context.expectation, context.because, context.because_args))
        return True

    def __str__(self) -> str:
        return f"Invoke {getattr(self.action, '__name__', 'action')} when {self.description}"


class TypeAssertionRule(AssertionRule):
    """Run ``action`` on every node whose subject is a ``target_type``."""

    def __init__(self, target_type: type, action: Callable[[AssertionContext], Any]):
        self.target_type = target_type
        self.action = action

    def applies_to(self, context: EquivalencyValidationContext) -> bool:
        subject_type = context.runtime_type if context.subject is not None else origin_class(context.compile_time_type)
        return isinstance(subject_type, type) and issubclass(subject_type, self.target_type)

    def assert_equality(self, context, options):
        if not self.applies_to(context):
            return False

        scope = AssertionScope.current()
        scope.because_of(context.because, *context.because_args)
        if context.expectation is not None and not isinstance(context.expectation, self.target_type):
            scope.fail_with(
                "Expected {context:expectation} to be a {0}{reason}, but found a {1}.",
                self.target_type,
                type(context.expectation),
            )
            return True

        self.action(AssertionContext(context.subject, context.expectation, context.because, context.because_args))
        return True

    def __str__(self) -> str:
        return f"Invoke {getattr(self.action, '__name__', 'action')} when subject is {type_name(self.target_type)}"


class Restriction:
    """Returned by ``options.using(action)``; completed with ``when`` or ``when_type_is``."""

    def __init__(self, options: EquivalencyOptions, action: Callable[[AssertionContext], Any]):
        self._options = options
        self._action = action

    def when(self, predicate: Callable[[EquivalencyValidationContext], bool]) -> EquivalencyOptions:
        return self._options.using(PredicateAssertionRule(predicate, self._action))

    def when_type_is(self, target_type: type) -> EquivalencyOptions:
        return self._options.using(TypeAssertionRule(target_type, self._action))
