"""Rules pairing a subject member with its counterpart on the expectation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from affirm.equivalency.members import SelectedMemberInfo, find_member
from affirm.execution import AssertionScope


if TYPE_CHECKING:
    from affirm.equivalency.options import EquivalencyOptions


class MemberMatchingRule(ABC):
    """Finds the expectation member a subject member is compared with."""

    @abstractmethod
    def match(
        self,
        subject_member: SelectedMemberInfo,
        expectation: Any,
        member_path: str,
        options: EquivalencyOptions,
    ) -> SelectedMemberInfo | None:
        """Return the matching expectation member, or None to let the next rule decide."""

    def __str__(self) -> str:
        return type(self).__name__


class MustMatchByNameRule(MemberMatchingRule):
    """Match by name and record a failure when the expectation lacks the member."""

    def match(self, subject_member, expectation, member_path, options):
        matched = find_member(expectation, subject_member.name)
        if matched is None:
            path = member_path.replace("{", "{{").replace("}", "}}")
            AssertionScope.current().fail_with(f"Subject has member {path} that the other object does not have.")
        return matched

    def __str__(self) -> str:
        return "Match member by name (or throw)"


class TryMatchByNameRule(MemberMatchingRule):
    """Match by name and silently skip members the expectation lacks."""

    def match(self, subject_member, expectation, member_path, options):
        return find_member(expectation, subject_member.name)

    def __str__(self) -> str:
        return "Match member by name"


def find_match(
    subject_member: SelectedMemberInfo, expectation: Any, member_path: str, options: EquivalencyOptions
) -> SelectedMemberInfo | None:
    for rule in options.matching_rules:
        matched = rule.match(subject_member, expectation, member_path, options)
        if matched is not None:
            return matched
    return None
