"""One node of an equivalency traversal."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any

from affirm.equivalency.members import SelectedMemberInfo
from affirm.equivalency.typeinfo import is_unknown_structure, origin_class, unwrap


_INDEXER = re.compile(r"\[[^\]]*\]")


def strip_indexers(path: str) -> str:
    """``orders[0].lines[2].sku`` becomes ``orders.lines.sku`` and ``[0].sku`` becomes ``sku``."""
    return _INDEXER.sub("", path).lstrip(".")


def describe_path(path: str) -> str:
    if not path:
        return "subject"
    if path.startswith("["):
        return "item" + path
    return "member " + path


@dataclass(frozen=True, slots=True)
class EquivalencyValidationContext:
    """The pair of values compared at one position of the object graph.

    Attributes
    ----------
    subject : Any
        The value under test.
    expectation : Any
        The value it is compared against.
    selected_member_path : str
        Path from the root, such as ``orders[0].customer.name``. Empty for the root.
    compile_time_type : Any
        Declared type of the subject at this path, or None when undeclared.
    is_root : bool
        Whether this is the top-level pair.
    because : str
        Reason template supplied with the assertion.
    because_args : tuple
        Arguments for ``because``.
    depth : int
        Number of steps taken from the root.
    """

    subject: Any
    expectation: Any
    selected_member_path: str = ""
    compile_time_type: Any = None
    is_root: bool = True
    because: str = ""
    because_args: tuple[Any, ...] = ()
    depth: int = 0

    @property
    def selected_member_description(self) -> str:
        return describe_path(self.selected_member_path)

    @property
    def runtime_type(self) -> type:
        if self.subject is not None:
            return type(self.subject)
        return origin_class(self.compile_time_type) or type(None)

    def effective_type(self, use_runtime_typing: bool) -> type:
        """The type whose members are compared at this node.

        The runtime type is used when runtime typing was requested or nothing
        was declared. An explicit ``object`` or ``Any`` declaration stays
        ``object``, which has no members.
        """
        declared = unwrap(self.compile_time_type)
        if use_runtime_typing or declared is None:
            return self.runtime_type
        if is_unknown_structure(declared):
            return object
        return origin_class(declared) or self.runtime_type

    def for_member(self, member: SelectedMemberInfo, subject: Any, expectation: Any) -> EquivalencyValidationContext:
        path = f"{self.selected_member_path}.{member.name}" if self.selected_member_path else member.name
        return self._child(path, subject, expectation, member.declared_type)

    def for_collection_item(
        self, index: int, subject: Any, expectation: Any, declared_type: Any = None
    ) -> EquivalencyValidationContext:
        return self._child(f"{self.selected_member_path}[{index}]", subject, expectation, declared_type)

    def for_dictionary_item(
        self, key: Any, subject: Any, expectation: Any, declared_type: Any = None
    ) -> EquivalencyValidationContext:
        return self._child(f"{self.selected_member_path}[{key}]", subject, expectation, declared_type)

    def _child(self, path: str, subject: Any, expectation: Any, declared_type: Any) -> EquivalencyValidationContext:
        return replace(
            self,
            subject=subject,
            expectation=expectation,
            selected_member_path=path,
            compile_time_type=declared_type,
            is_root=False,
            depth=self.depth + 1,
        )
