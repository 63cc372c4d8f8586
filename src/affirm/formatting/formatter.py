"""Turn arbitrary values into the text shown in failure messages."""

from __future__ import annotations

import enum
import sys
from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping, Sequence, Set
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from typing import Any, get_origin

from pydantic import BaseModel
from rich.pretty import pretty_repr

from affirm.config import get_settings


@dataclass(slots=True)
class FormattingContext:
    """State shared while one top-level value is being formatted.

    Attributes
    ----------
    use_line_breaks : bool
        Whether complex values may span multiple lines.
    depth : int
        Nesting level of the value currently being formatted.
    max_depth : int
        Nesting level at which children are replaced by ``...``.
    """

    registry: FormatterRegistry
    use_line_breaks: bool = False
    depth: int = 0
    max_depth: int = 5
    _seen: set[int] = field(default_factory=set)

    def format_child(self, value: Any) -> str:
        """Format a value nested inside the one currently being formatted."""
        if self.depth + 1 > self.max_depth:
            return "..."

        if _is_container(value):
            if id(value) in self._seen:
                return "{cyclic reference}"
            self._seen.add(id(value))

        self.depth += 1
        try:
            return self.registry.format_with(value, self)
        finally:
            self.depth -= 1
            self._seen.discard(id(value))


class ValueFormatter(ABC):
    """A formatter for the values it can handle."""

    @abstractmethod
    def can_handle(self, value: Any) -> bool:
        """Whether this formatter produces the text for ``value``."""

    @abstractmethod
    def to_string(self, value: Any, context: FormattingContext) -> str:
        """Render ``value``; nested values go through ``context.format_child``."""


class NullValueFormatter(ValueFormatter):
    def can_handle(self, value: Any) -> bool:
        return value is None

    def to_string(self, value: Any, context: FormattingContext) -> str:
        return "<null>"


class StringValueFormatter(ValueFormatter):
    def can_handle(self, value: Any) -> bool:
        return isinstance(value, str)

    def to_string(self, value: Any, context: FormattingContext) -> str:
        return f'"{value}"'


class NumericValueFormatter(ValueFormatter):
    """Numbers and booleans, shown as Python writes them."""

    def can_handle(self, value: Any) -> bool:
        return isinstance(value, (bool, int, float, complex, Decimal, Fraction)) and not isinstance(
            value, enum.Enum
        )

    def to_string(self, value: Any, context: FormattingContext) -> str:
        return str(value)


class EnumValueFormatter(ValueFormatter):
    def can_handle(self, value: Any) -> bool:
        return isinstance(value, enum.Enum)

    def to_string(self, value: Any, context: FormattingContext) -> str:
        return f"<{type(value).__name__}.{value.name}: {value.value!r}>"


class TypeValueFormatter(ValueFormatter):
    def can_handle(self, value: Any) -> bool:
        return isinstance(value, type)

    def to_string(self, value: Any, context: FormattingContext) -> str:
        return type_name(value)


class MappingValueFormatter(ValueFormatter):
    def can_handle(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def to_string(self, value: Any, context: FormattingContext) -> str:
        if not value:
            return "{empty}"
        items = [f"{context.format_child(k)}: {context.format_child(v)}" for k, v in value.items()]
        return _join_items("{", items, "}", context)


class CollectionValueFormatter(ValueFormatter):
    """Lists, tuples, sets and any other sized, non-string container."""

    def can_handle(self, value: Any) -> bool:
        return _is_container(value) and not isinstance(value, Mapping)

    def to_string(self, value: Any, context: FormattingContext) -> str:
        if not value:
            return "{empty}"
        items = [context.format_child(item) for item in value]
        if isinstance(value, tuple):
            return _join_items("(", items, ")", context)
        if isinstance(value, Set):
            return _join_items("{", items, "}", context)
        if isinstance(value, list):
            return _join_items("[", items, "]", context)
        return type(value).__name__ + _join_items("[", items, "]", context)


class DefaultValueFormatter(ValueFormatter):
    """Fallback for every value no other formatter claims.

    Objects that keep the default ``object.__repr__`` are rendered from their
    public attributes so two instances can be told apart in a message.
    """

    def can_handle(self, value: Any) -> bool:
        return True

    def to_string(self, value: Any, context: FormattingContext) -> str:
        if type(value).__repr__ is object.__repr__ and hasattr(value, "__dict__"):
            attributes = [
                f"{name}={context.format_child(attribute)}"
                for name, attribute in vars(value).items()
                if not name.startswith("_")
            ]
            return type_name(type(value)) + _join_items("(", attributes, ")", context)

        return pretty_repr(
            value,
            max_width=80 if context.use_line_breaks else sys.maxsize,
            max_depth=max(context.max_depth - context.depth, 1),
            expand_all=context.use_line_breaks,
        )


class FormatterRegistry:
    """Ordered set of formatters; custom formatters are consulted before built-ins."""

    def __init__(self) -> None:
        from affirm.formatting.datetimes import DateTimeValueFormatter, TimeDeltaValueFormatter

        self._custom: list[ValueFormatter] = []
        self._builtin: list[ValueFormatter] = [
            NullValueFormatter(),
            StringValueFormatter(),
            EnumValueFormatter(),
            NumericValueFormatter(),
            DateTimeValueFormatter(),
            TimeDeltaValueFormatter(),
            TypeValueFormatter(),
            MappingValueFormatter(),
            CollectionValueFormatter(),
            DefaultValueFormatter(),
        ]

    @property
    def formatters(self) -> list[ValueFormatter]:
        return [*self._custom, *self._builtin]

    def register(self, formatter: ValueFormatter) -> None:
        """Add a custom formatter that takes precedence over all existing ones."""
        self._custom.insert(0, formatter)

    def remove(self, formatter: ValueFormatter) -> None:
        self._custom.remove(formatter)

    def format(self, value: Any, use_line_breaks: bool | None = None) -> str:
        settings = get_settings()
        context = FormattingContext(
            registry=self,
            use_line_breaks=settings.use_line_breaks if use_line_breaks is None else use_line_breaks,
            max_depth=settings.max_formatted_depth,
        )
        if _is_container(value):
            context._seen.add(id(value))
        return self.format_with(value, context)

    def format_with(self, value: Any, context: FormattingContext) -> str:
        for formatter in self.formatters:
            if formatter.can_handle(value):
                return formatter.to_string(value, context)
        raise LookupError(f"No formatter handles {type(value)!r}")


formatter_registry = FormatterRegistry()


def format_value(value: Any, use_line_breaks: bool | None = None) -> str:
    """Render ``value`` for display in a failure message.

    Parameters
    ----------
    value : Any
        The value to render.
    use_line_breaks : bool or None
        Spread complex values over multiple lines. ``None`` uses the
        ``AFFIRM_USE_LINE_BREAKS`` setting.

    Returns
    -------
    str
        The display text. Formatting the same value twice yields the same text.
    """
    return formatter_registry.format(value, use_line_breaks)


def register_formatter(formatter: ValueFormatter) -> None:
    formatter_registry.register(formatter)


def remove_formatter(formatter: ValueFormatter) -> None:
    formatter_registry.remove(formatter)


def type_name(tp: Any) -> str:
    """Short, readable name for a class or a parameterized generic."""
    if isinstance(tp, type) and get_origin(tp) is None:
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")


def _is_container(value: Any) -> bool:
    return isinstance(value, (Collection, Mapping)) and not isinstance(
        value, (str, bytes, bytearray, memoryview, BaseModel)
    )


def _join_items(opening: str, items: Sequence[str], closing: str, context: FormattingContext) -> str:
    if context.use_line_breaks:
        indent = "    " * (context.depth + 1)
        body = ",\n".join(indent + item for item in items)
        return f"{opening}\n{body}\n{'    ' * context.depth}{closing}"
    return opening + ", ".join(items) + closing
