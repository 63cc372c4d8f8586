"""Configuration of a structural equivalency comparison."""

from __future__ import annotations

import enum
import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from affirm.equivalency.matching import MemberMatchingRule, MustMatchByNameRule, TryMatchByNameRule
from affirm.equivalency.rules import AssertionRule, Restriction
from affirm.equivalency.selection import (
    AllPublicFieldsSelectionRule,
    AllPublicPropertiesSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    IncludeMemberByPathSelectionRule,
    IncludeMemberByPredicateSelectionRule,
    MemberSelectionRule,
)
from affirm.equivalency.validation_context import EquivalencyValidationContext, strip_indexers
from affirm.exceptions import InvalidOperationError
from affirm.formatting import type_name


if TYPE_CHECKING:
    from affirm.equivalency.steps import EquivalencyStep


logger = logging.getLogger(__name__)


class CyclicReferenceHandling(enum.Enum):
    IGNORE = "ignore"
    THROW = "throw"


class EnumEquivalencyHandling(enum.Enum):
    BY_VALUE = "by_value"
    BY_NAME = "by_name"


class OrderingRule(ABC):
    """Decides whether the items of a collection must appear in the same order."""

    @abstractmethod
    def applies_to(self, context: EquivalencyValidationContext) -> bool:
        """Whether the collection at ``context`` is compared in strict order."""

    def __str__(self) -> str:
        return type(self).__name__


class MatchAllOrderingRule(OrderingRule):
    def applies_to(self, context):
        return True

    def __str__(self) -> str:
        return "Be strict about the order of items in all collections"


class PathBasedOrderingRule(OrderingRule):
    def __init__(self, path: str):
        self.path = strip_indexers(path)

    def applies_to(self, context):
        return strip_indexers(context.selected_member_path) == self.path

    def __str__(self) -> str:
        return f"Be strict about the order of items in member root.{self.path}"


class PredicateBasedOrderingRule(OrderingRule):
    def __init__(self, predicate: Callable[[EquivalencyValidationContext], bool]):
        self.predicate = predicate

    def applies_to(self, context):
        return bool(self.predicate(context))

    def __str__(self) -> str:
        return f"Be strict about the order of items when {getattr(self.predicate, '__name__', 'predicate')}"


def _mutator(method):
    """Reject changes once the options are frozen."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._frozen:
            raise InvalidOperationError(
                "Equivalency options cannot be changed once the comparison has started."
            )
        return method(self, *args, **kwargs)

    return wrapper


class EquivalencyOptions:
    """Fluent configuration of ``be_equivalent_to``.

    Every configuration method returns the options themselves so calls can be
    chained inside the ``configure`` callback.

    Examples
    --------
    >>> should(order).be_equivalent_to(
    ...     expected,
    ...     lambda options: options.excluding("id").with_strict_ordering_for("lines"),
    ... )
    """

    def __init__(self) -> None:
        self.use_runtime_typing = False
        self.include_properties = True
        self.include_fields = True
        self.is_recursive = True
        self.allow_infinite_recursion = False
        self.cyclic_reference_handling = CyclicReferenceHandling.IGNORE
        self.enum_equivalency_handling = EnumEquivalencyHandling.BY_VALUE
        self.value_types: list[type] = []

        self._selection_rules: list[MemberSelectionRule] = []
        self._matching_rules: list[MemberMatchingRule] = [MustMatchByNameRule()]
        self._assertion_rules: list[AssertionRule] = []
        self._user_steps: list[EquivalencyStep] = []
        self._ordering_rules: list[OrderingRule] = []
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def selection_rules(self) -> list[MemberSelectionRule]:
        """User rules preceded by the standard ones, unless a user rule overrides them."""
        if any(rule.overrides_standard_include_rules for rule in self._selection_rules):
            return list(self._selection_rules)
        standard: list[MemberSelectionRule] = []
        if self.include_fields:
            standard.append(AllPublicFieldsSelectionRule())
        if self.include_properties:
            standard.append(AllPublicPropertiesSelectionRule())
        return [*standard, *self._selection_rules]

    @property
    def matching_rules(self) -> list[MemberMatchingRule]:
        return list(self._matching_rules)

    @property
    def assertion_rules(self) -> list[AssertionRule]:
        """Most recently added first."""
        return list(self._assertion_rules)

    @property
    def user_equivalency_steps(self) -> list[EquivalencyStep]:
        """Most recently added first."""
        return list(self._user_steps)

    @property
    def ordering_rules(self) -> list[OrderingRule]:
        return list(self._ordering_rules)

    def is_ordering_strict_for(self, context: EquivalencyValidationContext) -> bool:
        return any(rule.applies_to(context) for rule in self._ordering_rules)

    def is_value_type(self, value: Any) -> bool:
        return isinstance(value, tuple(self.value_types))

    def freeze(self) -> EquivalencyOptions:
        self._frozen = True
        return self

    @_mutator
    def including_all_declared_properties(self) -> EquivalencyOptions:
        """Compare the properties of the declared types, leaving fields out."""
        self.use_runtime_typing = False
        self.include_fields = False
        self.include_properties = True
        return self

    @_mutator
    def including_all_runtime_properties(self) -> EquivalencyOptions:
        """Compare the properties of the runtime types, leaving fields out."""
        self.use_runtime_typing = True
        self.include_fields = False
        self.include_properties = True
        return self

    @_mutator
    def respecting_runtime_types(self) -> EquivalencyOptions:
        self.use_runtime_typing = True
        return self

    @_mutator
    def respecting_declared_types(self) -> EquivalencyOptions:
        self.use_runtime_typing = False
        return self

    @_mutator
    def including_fields(self) -> EquivalencyOptions:
        self.include_fields = True
        return self

    @_mutator
    def excluding_fields(self) -> EquivalencyOptions:
        self.include_fields = False
        return self

    @_mutator
    def including_properties(self) -> EquivalencyOptions:
        self.include_properties = True
        return self

    @_mutator
    def excluding_properties(self) -> EquivalencyOptions:
        self.include_properties = False
        return self

    @_mutator
    def excluding(self, member: str | Callable[..., bool]) -> EquivalencyOptions:
        """Leave out a member given by path (``"customer.id"``) or by predicate.

        A predicate receives a `MemberInfo` with the member's ``path`` and ``name``.
        """
        if isinstance(member, str):
            self._selection_rules.append(ExcludeMemberByPathSelectionRule(member))
        else:
            self._selection_rules.append(ExcludeMemberByPredicateSelectionRule(member))
        return self

    @_mutator
    def including(self, member: str | Callable[..., bool]) -> EquivalencyOptions:
        """Compare only the given members, by path or by predicate."""
        if isinstance(member, str):
            self._selection_rules.append(IncludeMemberByPathSelectionRule(member))
        else:
            self._selection_rules.append(IncludeMemberByPredicateSelectionRule(member))
        return self

    @_mutator
    def excluding_missing_members(self) -> EquivalencyOptions:
        """Skip subject members the expectation does not have instead of failing."""
        self._matching_rules = [
            rule for rule in self._matching_rules if not isinstance(rule, MustMatchByNameRule)
        ]
        if not any(isinstance(rule, TryMatchByNameRule) for rule in self._matching_rules):
            self._matching_rules.append(TryMatchByNameRule())
        return self

    @_mutator
    def throwing_on_missing_members(self) -> EquivalencyOptions:
        self._matching_rules = [
            rule for rule in self._matching_rules if not isinstance(rule, TryMatchByNameRule)
        ]
        if not any(isinstance(rule, MustMatchByNameRule) for rule in self._matching_rules):
            self._matching_rules.append(MustMatchByNameRule())
        return self

    @_mutator
    def using(self, extension: Any) -> EquivalencyOptions | Restriction:
        """Add a rule or step, or start an assertion rule from a callable.

        Selection rules are applied after the existing ones. Matching rules,
        assertion rules and equivalency steps take precedence over the
        existing ones. A plain callable returns a `Restriction` that must be
        completed with ``when(...)`` or ``when_type_is(...)``.
        """
        from affirm.equivalency.steps import EquivalencyStep

        if isinstance(extension, MemberSelectionRule):
            self._selection_rules.append(extension)
        elif isinstance(extension, MemberMatchingRule):
            self._matching_rules.insert(0, extension)
        elif isinstance(extension, AssertionRule):
            self._assertion_rules.insert(0, extension)
        elif isinstance(extension, EquivalencyStep):
            self._user_steps.insert(0, extension)
        elif isinstance(extension, OrderingRule):
            self._ordering_rules.append(extension)
        elif callable(extension):
            return Restriction(self, extension)
        else:
            raise InvalidOperationError(
                f"Cannot use {extension!r}: expected a selection rule, matching rule, assertion rule, "
                "equivalency step, ordering rule or callable."
            )
        return self

    @_mutator
    def including_nested_objects(self) -> EquivalencyOptions:
        self.is_recursive = True
        return self

    @_mutator
    def excluding_nested_objects(self) -> EquivalencyOptions:
        """Compare nested objects with ``==`` instead of member by member."""
        self.is_recursive = False
        return self

    @_mutator
    def ignoring_cyclic_references(self) -> EquivalencyOptions:
        self.cyclic_reference_handling = CyclicReferenceHandling.IGNORE
        return self

    @_mutator
    def throwing_on_cyclic_references(self) -> EquivalencyOptions:
        self.cyclic_reference_handling = CyclicReferenceHandling.THROW
        return self

    @_mutator
    def allowing_infinite_recursion(self) -> EquivalencyOptions:
        self.allow_infinite_recursion = True
        return self

    @_mutator
    def comparing_enums_by_name(self) -> EquivalencyOptions:
        self.enum_equivalency_handling = EnumEquivalencyHandling.BY_NAME
        return self

    @_mutator
    def comparing_enums_by_value(self) -> EquivalencyOptions:
        self.enum_equivalency_handling = EnumEquivalencyHandling.BY_VALUE
        return self

    @_mutator
    def comparing_by_value(self, value_type: type) -> EquivalencyOptions:
        """Compare instances of ``value_type`` with ``==``."""
        if value_type not in self.value_types:
            self.value_types.append(value_type)
        return self

    @_mutator
    def with_strict_ordering(self) -> EquivalencyOptions:
        self._ordering_rules.append(MatchAllOrderingRule())
        return self

    @_mutator
    def with_strict_ordering_for(self, member: str | Callable[[EquivalencyValidationContext], bool]) -> EquivalencyOptions:
        if isinstance(member, str):
            self._ordering_rules.append(PathBasedOrderingRule(member))
        else:
            self._ordering_rules.append(PredicateBasedOrderingRule(member))
        return self

    @_mutator
    def without_strict_ordering(self) -> EquivalencyOptions:
        self._ordering_rules.clear()
        return self

    def __str__(self) -> str:
        lines = [f"- Use {'runtime' if self.use_runtime_typing else 'declared'} types and members"]
        if self.enum_equivalency_handling is EnumEquivalencyHandling.BY_NAME:
            lines.append("- Compare enums by name")
        else:
            lines.append("- Compare enums by value")
        if self.cyclic_reference_handling is CyclicReferenceHandling.IGNORE:
            lines.append("- Ignoring cyclic references")
        if not self.is_recursive:
            lines.append("- Compare nested objects by value")
        lines.extend(f"- Compare {type_name(value_type)} by value" for value_type in self.value_types)
        for rule in [
            *self.selection_rules,
            *self._matching_rules,
            *self._ordering_rules,
            *self._assertion_rules,
            *self._user_steps,
        ]:
            lines.append(f"- {rule}")
        return "\n".join(lines)


class AssertionOptions:
    """Process-wide defaults for every equivalency comparison."""

    _configure: Callable[[EquivalencyOptions], Any] | None = None

    @classmethod
    def assert_equivalency_using(cls, configure: Callable[[EquivalencyOptions], Any]) -> None:
        """Apply ``configure`` to the options of every subsequent comparison."""
        cls._configure = configure
        logger.debug("Replaced default equivalency options")

    @classmethod
    def reset(cls) -> None:
        cls._configure = None

    @classmethod
    def equivalency_defaults(cls) -> EquivalencyOptions:
        options = EquivalencyOptions()
        if cls._configure is not None:
            options = cls._configure(options) or options
        return options
