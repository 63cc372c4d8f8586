"""Strategies that each claim one category of node in an equivalency comparison."""

from __future__ import annotations

import enum
import types
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from affirm.equivalency.matching import find_match
from affirm.equivalency.options import EnumEquivalencyHandling, EquivalencyOptions
from affirm.equivalency.selection import member_path, select_members
from affirm.equivalency.typeinfo import is_value_type
from affirm.equivalency.validation_context import EquivalencyValidationContext
from affirm.exceptions import InvalidOperationError
from affirm.execution import AssertionScope, Failure


if TYPE_CHECKING:
    from affirm.equivalency.validator import EquivalencyValidator


NO_MEMBERS_MESSAGE = (
    "No members were found for comparison. Please specify some members to include in the comparison "
    "or choose a more meaningful assertion."
)


class EquivalencyStep(ABC):
    """A strategy that may claim a node of the object graph."""

    @abstractmethod
    def can_handle(self, context: EquivalencyValidationContext, options: EquivalencyOptions) -> bool:
        """Whether this step applies to the node."""

    @abstractmethod
    def handle(
        self,
        context: EquivalencyValidationContext,
        validator: EquivalencyValidator,
        options: EquivalencyOptions,
    ) -> bool:
        """Compare the node.

        Returns
        -------
        bool
            True when the node was dealt with and no later step should run.
        """

    def __str__(self) -> str:
        return type(self).__name__


def scope_for(context: EquivalencyValidationContext) -> AssertionScope:
    return AssertionScope.current().because_of(context.because, *context.because_args)


class RunAllUserStepsEquivalencyStep(EquivalencyStep):
    def can_handle(self, context, options):
        return bool(options.user_equivalency_steps)

    def handle(self, context, validator, options):
        for step in options.user_equivalency_steps:
            if step.can_handle(context, options) and step.handle(context, validator, options):
                return True
        return False


class AssertionRuleEquivalencyStep(EquivalencyStep):
    """Let user assertion rules compare the node, most recently added first.

    Each applicable rule runs in its own scope. The first rule that records no
    failure wins. When all of them fail, the failures of the most recently
    added one are reported.
    """

    def can_handle(self, context, options):
        return not context.is_root and bool(options.assertion_rules)

    def handle(self, context, validator, options):
        parent = AssertionScope.current()
        reported: list[Failure] | None = None

        for rule in options.assertion_rules:
            with AssertionScope(parent=parent) as attempt:
                applied = rule.assert_equality(context, options)
                failures = attempt.failure_records
                attempt.discard()

            if not applied:
                continue
            if not failures:
                return True
            if reported is None:
                reported = failures

        if reported is None:
            return False

        for failure in reported:
            parent.add_failure(failure)
        return True


class ReferenceEqualityEquivalencyStep(EquivalencyStep):
    """Identical objects are equivalent; ``None`` is only equivalent to ``None``."""

    def can_handle(self, context, options):
        return True

    def handle(self, context, validator, options):
        if context.subject is context.expectation:
            return True
        if context.expectation is None:
            scope_for(context).fail_with(
                "Expected {context:subject} to be <null>{reason}, but found {0}.", context.subject
            )
            return True
        if context.subject is None:
            scope_for(context).fail_with(
                "Expected {context:subject} to be {0}{reason}, but found <null>.", context.expectation
            )
            return True
        return False


class EnumEquivalencyStep(EquivalencyStep):
    def can_handle(self, context, options):
        return isinstance(context.expectation, enum.Enum)

    def handle(self, context, validator, options):
        subject = context.subject
        expectation = context.expectation
        scope = scope_for(context)

        if options.enum_equivalency_handling is EnumEquivalencyHandling.BY_NAME:
            scope.for_condition(getattr(subject, "name", None) == expectation.name).fail_with(
                "Expected {context:enum} to equal {0} by name{reason}, but found {1}.", expectation, subject
            )
        else:
            subject_value = subject.value if isinstance(subject, enum.Enum) else subject
            scope.for_condition(subject_value == expectation.value).fail_with(
                "Expected {context:enum} to equal {0} by value{reason}, but found {1}.", expectation, subject
            )
        return True


class SimpleEqualityEquivalencyStep(EquivalencyStep):
    """Compare with ``==``: value types, configured value types, and every nested
    object when nested objects are excluded."""

    def can_handle(self, context, options):
        extra = tuple(options.value_types)
        return (
            is_value_type(context.expectation, extra)
            or is_value_type(context.subject, extra)
            or (not options.is_recursive and not context.is_root)
        )

    def handle(self, context, validator, options):
        subject = context.subject
        expectation = context.expectation
        scope = scope_for(context)

        if isinstance(subject, str) and isinstance(expectation, str):
            _assert_strings_equal(scope, subject, expectation)
        else:
            scope.for_condition(subject == expectation).fail_with(
                "Expected {context:subject} to be {0}{reason}, but found {1}.", expectation, subject
            )
        return True


def _assert_strings_equal(scope: AssertionScope, subject: str, expectation: str) -> None:
    if subject == expectation:
        return

    index = next(
        (i for i, (left, right) in enumerate(zip(subject, expectation)) if left != right),
        min(len(subject), len(expectation)),
    )
    segment = subject[index : index + 3]

    if len(subject) != len(expectation):
        scope.fail_with(
            "Expected {context:subject} to be {0} with a length of {1}{reason}, but {2} has a length of {3}, "
            "differs near {4} (index {5}).",
            expectation,
            len(expectation),
            subject,
            len(subject),
            segment,
            index,
        )
    else:
        scope.fail_with(
            "Expected {context:subject} to be {0}{reason}, but {1} differs near {2} (index {3}).",
            expectation,
            subject,
            segment,
            index,
        )


class StructuralEqualityEquivalencyStep(EquivalencyStep):
    """Compare complex objects member by member."""

    _OPAQUE = (type, types.FunctionType, types.BuiltinFunctionType, types.MethodType, types.ModuleType)

    def can_handle(self, context, options):
        if isinstance(context.expectation, self._OPAQUE):
            return False
        return context.is_root or options.is_recursive

    def handle(self, context, validator, options):
        members = select_members(context, options)
        if not members:
            raise InvalidOperationError(NO_MEMBERS_MESSAGE)

        for member in members:
            matched = find_match(member, context.expectation, member_path(context, member), options)
            if matched is None:
                continue
            child = context.for_member(member, member.get_value(context.subject), matched.get_value(context.expectation))
            validator.assert_equality_using(child)
        return True
