"""Rules deciding which members of an object take part in a comparison."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from affirm.equivalency.members import MemberKind, SelectedMemberInfo, members_of
from affirm.equivalency.validation_context import EquivalencyValidationContext, strip_indexers


if TYPE_CHECKING:
    from affirm.equivalency.options import EquivalencyOptions


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """A candidate member together with its path from the root.

    Passed to the predicates of ``including(...)`` and ``excluding(...)``.
    """

    path: str
    member: SelectedMemberInfo

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def declared_type(self) -> Any:
        return self.member.declared_type

    @property
    def declaring_type(self) -> type:
        return self.member.declaring_type


def member_path(context: EquivalencyValidationContext, member: SelectedMemberInfo) -> str:
    if context.selected_member_path:
        return f"{context.selected_member_path}.{member.name}"
    return member.name


def candidate_members(context: EquivalencyValidationContext, options: EquivalencyOptions) -> list[SelectedMemberInfo]:
    """Every member of the type compared at ``context``."""
    return members_of(context.effective_type(options.use_runtime_typing), context.subject)


class MemberSelectionRule(ABC):
    """Narrows or extends the members selected for a structural comparison.

    Attributes
    ----------
    overrides_standard_include_rules : bool
        When True the built-in "all public members" rules are dropped, so only
        the members this rule adds are compared.
    """

    overrides_standard_include_rules: bool = False

    @abstractmethod
    def select_members(
        self,
        selected_members: list[SelectedMemberInfo],
        context: EquivalencyValidationContext,
        options: EquivalencyOptions,
    ) -> list[SelectedMemberInfo]:
        """Return the members selected after applying this rule."""

    def __str__(self) -> str:
        return type(self).__name__


class AllPublicFieldsSelectionRule(MemberSelectionRule):
    def select_members(self, selected_members, context, options):
        fields = [member for member in candidate_members(context, options) if member.kind is MemberKind.FIELD]
        return _union(selected_members, fields)

    def __str__(self) -> str:
        return "Include all non-private fields"


class AllPublicPropertiesSelectionRule(MemberSelectionRule):
    def select_members(self, selected_members, context, options):
        properties = [
            member for member in candidate_members(context, options) if member.kind is MemberKind.PROPERTY
        ]
        return _union(selected_members, properties)

    def __str__(self) -> str:
        return "Include all non-private properties"


class ExcludeMemberByPathSelectionRule(MemberSelectionRule):
    """Leave out the member at ``path``; indexers in the compared path are ignored."""

    def __init__(self, path: str):
        self.path = strip_indexers(path)

    def select_members(self, selected_members, context, options):
        return [
            member
            for member in selected_members
            if strip_indexers(member_path(context, member)) != self.path
        ]

    def __str__(self) -> str:
        return f"Exclude member root.{self.path}"


class ExcludeMemberByPredicateSelectionRule(MemberSelectionRule):
    def __init__(self, predicate: Callable[[MemberInfo], bool], description: str | None = None):
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", repr(predicate))

    def select_members(self, selected_members, context, options):
        return [
            member
            for member in selected_members
            if not self.predicate(MemberInfo(member_path(context, member), member))
        ]

    def __str__(self) -> str:
        return f"Exclude member when {self.description}"


class IncludeMemberByPathSelectionRule(MemberSelectionRule):
    """Compare the member at ``path``, the members leading to it and everything below it."""

    overrides_standard_include_rules = True

    def __init__(self, path: str):
        self.path = strip_indexers(path)

    def select_members(self, selected_members, context, options):
        matching = [
            member
            for member in candidate_members(context, options)
            if _is_on_path(strip_indexers(member_path(context, member)), self.path)
        ]
        return _union(selected_members, matching)

    def __str__(self) -> str:
        return f"Include member root.{self.path}"


class IncludeMemberByPredicateSelectionRule(MemberSelectionRule):
    overrides_standard_include_rules = True

    def __init__(self, predicate: Callable[[MemberInfo], bool], description: str | None = None):
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", repr(predicate))

    def select_members(self, selected_members, context, options):
        matching = [
            member
            for member in candidate_members(context, options)
            if self.predicate(MemberInfo(member_path(context, member), member))
        ]
        return _union(selected_members, matching)

    def __str__(self) -> str:
        return f"Include member when {self.description}"


def select_members(context: EquivalencyValidationContext, options: EquivalencyOptions) -> list[SelectedMemberInfo]:
    """Run the selection rules of ``options`` in order."""
    selected: list[SelectedMemberInfo] = []
    for rule in options.selection_rules:
        selected = rule.select_members(selected, context, options)
    return selected


def _is_on_path(candidate: str, included: str) -> bool:
    return (
        candidate == included
        or included.startswith(candidate + ".")
        or candidate.startswith(included + ".")
    )


def _union(selected: list[SelectedMemberInfo], extra: list[SelectedMemberInfo]) -> list[SelectedMemberInfo]:
    names = {member.name for member in selected}
    return [*selected, *(member for member in extra if member.name not in names)]
