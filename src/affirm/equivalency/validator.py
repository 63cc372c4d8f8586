"""Recursive driver of an equivalency comparison."""

from __future__ import annotations

import logging
from typing import Any

from affirm.config import get_settings
from affirm.context import assertion_scope_context
from affirm.equivalency.dictionaries import GenericDictionaryEquivalencyStep
from affirm.equivalency.enumerables import EnumerableEquivalencyStep
from affirm.equivalency.options import CyclicReferenceHandling, EquivalencyOptions
from affirm.equivalency.steps import (
    AssertionRuleEquivalencyStep,
    EnumEquivalencyStep,
    EquivalencyStep,
    ReferenceEqualityEquivalencyStep,
    RunAllUserStepsEquivalencyStep,
    SimpleEqualityEquivalencyStep,
    StructuralEqualityEquivalencyStep,
    scope_for,
)
from affirm.equivalency.typeinfo import is_reference_node
from affirm.equivalency.validation_context import EquivalencyValidationContext
from affirm.execution import AssertionScope, Failure, FailureKind


logger = logging.getLogger(__name__)


BUILT_IN_STEPS: tuple[EquivalencyStep, ...] = (
    RunAllUserStepsEquivalencyStep(),
    AssertionRuleEquivalencyStep(),
    ReferenceEqualityEquivalencyStep(),
    EnumEquivalencyStep(),
    GenericDictionaryEquivalencyStep(),
    EnumerableEquivalencyStep(),
    SimpleEqualityEquivalencyStep(),
    StructuralEqualityEquivalencyStep(),
)


class EquivalencyValidator:
    """Walks two object graphs side by side and records every difference.

    Failures go to the current assertion scope. The traversal carries on past
    a failing node so one call reports all differences.

    Parameters
    ----------
    options : EquivalencyOptions
        Frozen configuration of the comparison.
    scope : AssertionScope
        Scope receiving the failures.
    """

    def __init__(self, options: EquivalencyOptions, scope: AssertionScope):
        self.options = options
        self.scope = scope
        self.max_recursion_depth = get_settings().max_recursion_depth
        # Holds the compared values so their ids stay unique for the whole traversal.
        self._visited: dict[tuple[int, int], tuple[Any, Any]] = {}
        self._ancestors: list[tuple[int, int]] = []

    def assert_equality(self, context: EquivalencyValidationContext) -> None:
        """Compare the root pair of a traversal."""
        self._visited = {}
        self._ancestors = []
        self.scope.add_reportable("configuration", str(self.options))
        with assertion_scope_context(self.scope):
            self.assert_equality_using(context)

    def assert_equality_using(self, context: EquivalencyValidationContext) -> None:
        """Compare one node and, through the steps, everything below it."""
        scope = AssertionScope.current()
        if self._exceeds_max_depth(context, scope):
            return

        pair = (id(context.subject), id(context.expectation))
        tracked = is_reference_node(context.subject) and is_reference_node(context.expectation)
        if tracked:
            if pair in self._ancestors:
                self._handle_cycle(context, scope)
                return
            if pair in self._visited:
                logger.debug("Skipping %s, already compared", context.selected_member_description)
                return
            self._visited[pair] = (context.subject, context.expectation)
            self._ancestors.append(pair)

        previous = scope.context
        scope.context = context.selected_member_description
        try:
            self._run_steps(context, scope)
        finally:
            scope.context = previous
            if tracked:
                self._ancestors.pop()

    def try_to_match(self, context: EquivalencyValidationContext) -> list[Failure]:
        """Compare a node in a scope of its own and return its failures without reporting them."""
        visited = dict(self._visited)
        try:
            with AssertionScope(parent=AssertionScope.current()) as attempt:
                self.assert_equality_using(context)
                failures = attempt.failure_records
                attempt.discard()
        finally:
            self._visited = visited
        return failures

    def _run_steps(self, context: EquivalencyValidationContext, scope: AssertionScope) -> None:
        for step in BUILT_IN_STEPS:
            if step.can_handle(context, self.options) and step.handle(context, self, self.options):
                return

        logger.debug("No step claimed %s", context.selected_member_description)
        scope.fail_with(
            "No equivalency strategy found for {context:subject} of type {0}.",
            context.runtime_type,
            kind=FailureKind.NO_STRATEGY_FOUND,
        )

    def _exceeds_max_depth(self, context: EquivalencyValidationContext, scope: AssertionScope) -> bool:
        if self.options.allow_infinite_recursion or context.depth <= self.max_recursion_depth:
            return False
        scope.fail_with(
            "The maximum recursion depth was reached.  The path is {0}.",
            context.selected_member_path,
            kind=FailureKind.MAX_DEPTH,
        )
        return True

    def _handle_cycle(self, context: EquivalencyValidationContext, scope: AssertionScope) -> None:
        if self.options.cyclic_reference_handling is CyclicReferenceHandling.IGNORE:
            logger.debug("Ignoring cyclic reference at %s", context.selected_member_description)
            return

        previous = scope.context
        scope.context = context.selected_member_description
        try:
            scope_for(context).fail_with(
                "Expected {context:subject} to be {0}{reason}, but it contains a cyclic reference.",
                context.expectation,
                kind=FailureKind.CYCLIC_REFERENCE,
            )
        finally:
            scope.context = previous
