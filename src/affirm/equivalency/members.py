"""Discovery of the data members that take part in a structural comparison."""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin, get_type_hints

from pydantic import BaseModel


logger = logging.getLogger(__name__)


class MemberKind(enum.Enum):
    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True, slots=True)
class SelectedMemberInfo:
    """A named, readable member of a type.

    Attributes
    ----------
    name : str
        Attribute name.
    declared_type : Any
        Annotated type of the member, or None when it is not annotated.
    kind : MemberKind
        Whether the member is stored data or a computed property.
    declaring_type : type
        The class that defines the member.
    """

    name: str
    declared_type: Any
    kind: MemberKind
    declaring_type: type

    def get_value(self, obj: Any) -> Any:
        return getattr(obj, self.name)

    def __str__(self) -> str:
        return f"{self.kind.value} {self.declaring_type.__name__}.{self.name}"


def members_of(tp: type, instance: Any = None) -> list[SelectedMemberInfo]:
    """All public members of ``tp``, plus the instance attributes of ``instance``.

    Parameters
    ----------
    tp : type
        The type whose members are listed.
    instance : Any
        An object of exactly type ``tp`` whose ``vars()`` may hold attributes
        the class does not declare.

    Returns
    -------
    list[SelectedMemberInfo]
        Members in declaration order, data members before properties.
    """
    members = list(_declared_members(tp))
    if instance is not None and type(instance) is tp and hasattr(instance, "__dict__"):
        known = {member.name for member in members}
        for name in vars(instance):
            if name not in known and _is_public(name):
                members.append(SelectedMemberInfo(name, None, MemberKind.FIELD, tp))
                known.add(name)
    return members


def find_member(obj: Any, name: str) -> SelectedMemberInfo | None:
    """Find the member called ``name`` on the runtime type of ``obj``."""
    for member in members_of(type(obj), obj):
        if member.name == name:
            return member
    return None


@functools.cache
def _declared_members(tp: type) -> tuple[SelectedMemberInfo, ...]:
    found: dict[str, SelectedMemberInfo] = {}
    is_model = issubclass(tp, BaseModel)
    hints = {} if is_model else _resolve_hints(tp)

    def add(name: str, kind: MemberKind, declared_type: Any = None) -> None:
        if name in found or not _is_public(name):
            return
        found[name] = SelectedMemberInfo(name, declared_type, kind, _declaring_type(tp, name))

    if is_model:
        for name, info in tp.model_fields.items():
            add(name, MemberKind.FIELD, info.annotation)
        for name, info in tp.model_computed_fields.items():
            add(name, MemberKind.PROPERTY, info.return_type)

    if dataclasses.is_dataclass(tp):
        for field in dataclasses.fields(tp):
            add(field.name, MemberKind.FIELD, hints.get(field.name))

    for name, hint in hints.items():
        if get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        add(name, MemberKind.FIELD, hint)

    for klass in reversed(tp.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__"):
                add(name, MemberKind.FIELD, hints.get(name))

    for klass in tp.__mro__:
        if klass is object or (isinstance(klass, type) and klass.__module__ == "pydantic.main"):
            continue
        for name, attribute in vars(klass).items():
            if isinstance(attribute, property):
                add(name, MemberKind.PROPERTY, _return_type(attribute.fget))
            elif isinstance(attribute, functools.cached_property):
                add(name, MemberKind.PROPERTY, _return_type(attribute.func))

    return tuple(found.values())


def _resolve_hints(tp: type) -> dict[str, Any]:
    if tp is object or tp.__module__ == "builtins":
        return {}
    try:
        return get_type_hints(tp)
    except Exception as exc:  # NameError for names imported under TYPE_CHECKING
        logger.warning("Could not resolve annotations of %s: %s", tp.__qualname__, exc)

    raw: dict[str, Any] = {}
    for klass in reversed(tp.__mro__):
        if klass is object:
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            raw[name] = None if isinstance(annotation, str) else annotation
    return raw


def _return_type(function: Any) -> Any:
    if function is None:
        return None
    try:
        return get_type_hints(function).get("return")
    except (NameError, TypeError) as exc:
        logger.debug("Could not resolve the return annotation of %s: %s", function.__qualname__, exc)
        annotation = inspect.get_annotations(function).get("return")
        return None if isinstance(annotation, str) else annotation


def _declaring_type(tp: type, name: str) -> type:
    for klass in tp.__mro__:
        if name in vars(klass) or name in inspect.get_annotations(klass):
            return klass
    return tp


def _is_public(name: str) -> bool:
    return not name.startswith("_")
