from .dictionaries import GenericDictionaryEquivalencyStep
from .enumerables import EnumerableEquivalencyStep
from .matching import MemberMatchingRule, MustMatchByNameRule, TryMatchByNameRule
from .members import MemberKind, SelectedMemberInfo, find_member, members_of
from .options import (
    AssertionOptions,
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    EquivalencyOptions,
    OrderingRule,
)
from .rules import AssertionContext, AssertionRule, Restriction
from .selection import (
    AllPublicFieldsSelectionRule,
    AllPublicPropertiesSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    IncludeMemberByPathSelectionRule,
    IncludeMemberByPredicateSelectionRule,
    MemberInfo,
    MemberSelectionRule,
)
from .steps import EquivalencyStep
from .validation_context import EquivalencyValidationContext
from .validator import EquivalencyValidator

__all__ = [
    "AssertionOptions",
    "EquivalencyOptions",
    "CyclicReferenceHandling",
    "EnumEquivalencyHandling",
    "OrderingRule",
    "EquivalencyValidator",
    "EquivalencyValidationContext",
    "EquivalencyStep",
    "GenericDictionaryEquivalencyStep",
    "EnumerableEquivalencyStep",
    "MemberSelectionRule",
    "AllPublicFieldsSelectionRule",
    "AllPublicPropertiesSelectionRule",
    "ExcludeMemberByPathSelectionRule",
    "ExcludeMemberByPredicateSelectionRule",
    "IncludeMemberByPathSelectionRule",
    "IncludeMemberByPredicateSelectionRule",
    "MemberInfo",
    "MemberMatchingRule",
    "MustMatchByNameRule",
    "TryMatchByNameRule",
    "AssertionRule",
    "AssertionContext",
    "Restriction",
    "MemberKind",
    "SelectedMemberInfo",
    "find_member",
    "members_of",
]
