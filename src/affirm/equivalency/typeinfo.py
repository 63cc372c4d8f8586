"""Helpers for reasoning about declared and runtime types."""

from __future__ import annotations

import enum
import types
import typing
from collections.abc import Collection, Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Annotated, Any, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel


VALUE_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    Decimal,
    Fraction,
    datetime,
    date,
    time,
    timedelta,
    UUID,
    enum.Enum,
    PurePath,
)


def is_value_type(value: Any, extra_value_types: tuple[type, ...] = ()) -> bool:
    """Whether ``value`` is compared with ``==`` rather than member by member."""
    return isinstance(value, VALUE_TYPES + tuple(extra_value_types))


def is_unknown_structure(declared_type: Any) -> bool:
    """Whether ``declared_type`` says nothing about the members of a value."""
    return declared_type is object or declared_type is Any


def is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, bytearray, memoryview, Mapping, BaseModel)
    )


def is_reference_node(value: Any, extra_value_types: tuple[type, ...] = ()) -> bool:
    """Containers and complex objects, the nodes that can take part in a cycle."""
    return value is not None and not is_value_type(value, extra_value_types)


def unwrap(declared_type: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` from a declared type.

    Other unions give no single structure and are treated as undeclared.
    """
    origin = get_origin(declared_type)
    if origin is Annotated:
        return unwrap(get_args(declared_type)[0])
    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in get_args(declared_type) if arg is not type(None)]
        if len(candidates) == 1:
            return unwrap(candidates[0])
        return None
    if isinstance(declared_type, (str, typing.ForwardRef, typing.TypeVar)):
        return None
    return declared_type


def origin_class(declared_type: Any) -> type | None:
    """The class behind a declared type: ``list`` for ``list[int]``."""
    declared_type = unwrap(declared_type)
    if is_unknown_structure(declared_type):
        return object
    origin = get_origin(declared_type) or declared_type
    return origin if isinstance(origin, type) else None


def mapping_parameterizations(tp: Any) -> list[tuple[Any, Any]]:
    """The distinct ``(key, value)`` parameterizations of a mapping type.

    Looks at the type itself when it is a parameterized alias such as
    ``dict[str, int]``, otherwise at the generic bases of every class in the
    MRO.
    """
    tp = unwrap(tp)
    found: list[tuple[Any, Any]] = []

    def add(alias: Any) -> None:
        origin = get_origin(alias)
        args = get_args(alias)
        if isinstance(origin, type) and issubclass(origin, Mapping) and len(args) == 2:
            if args not in found:
                found.append(args)

    if get_origin(tp) is not None:
        add(tp)
        return found

    if isinstance(tp, type):
        for klass in tp.__mro__:
            for base in klass.__dict__.get("__orig_bases__", ()):
                add(base)
    return found


def is_unparameterized_container(declared_type: Any) -> bool:
    """Whether a container was declared without saying what it holds, e.g. ``dict``."""
    declared_type = unwrap(declared_type)
    return (
        isinstance(declared_type, type)
        and issubclass(declared_type, (Collection, Mapping))
        and not issubclass(declared_type, (str, bytes, bytearray))
        and not mapping_parameterizations(declared_type)
        and not _collection_parameterization(declared_type)
    )


def mapping_value_type(declared_type: Any, runtime_type: type) -> Any:
    """Declared type of the values of a mapping, or None when undeclared."""
    for candidate in (declared_type, runtime_type):
        parameterizations = mapping_parameterizations(candidate)
        if len(parameterizations) == 1:
            return parameterizations[0][1]
    if is_unparameterized_container(declared_type):
        return object
    return None


def collection_item_type(declared_type: Any, runtime_type: type, index: int) -> Any:
    """Declared type of the item at ``index`` of a collection, or None when undeclared."""
    declared_type = unwrap(declared_type)
    args = get_args(declared_type)
    if args:
        if get_origin(declared_type) is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            return args[index] if index < len(args) else None
        return args[0]

    for candidate in (declared_type, runtime_type):
        parameterization = _collection_parameterization(candidate)
        if parameterization is not None:
            return parameterization
    if is_unparameterized_container(declared_type):
        return object
    return None


def common_base(types_: Iterable[type]) -> type:
    """Nearest class every given type derives from; ``object`` when there is none."""
    types_ = list(dict.fromkeys(types_))
    if not types_:
        return object
    for candidate in types_[0].__mro__:
        if all(issubclass(other, candidate) for other in types_[1:]):
            return candidate
    return object


def _collection_parameterization(tp: Any) -> Any:
    if not isinstance(tp, type):
        return None
    for klass in tp.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = get_origin(base)
            args = get_args(base)
            if (
                isinstance(origin, type)
                and issubclass(origin, Collection)
                and not issubclass(origin, Mapping)
                and len(args) == 1
            ):
                return args[0]
    return None
