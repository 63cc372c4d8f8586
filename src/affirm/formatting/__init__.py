"""Value formatting for failure messages."""

from .formatter import (
    DefaultValueFormatter,
    FormatterRegistry,
    FormattingContext,
    ValueFormatter,
    format_value,
    formatter_registry,
    register_formatter,
    remove_formatter,
    type_name,
)
from .datetimes import DateTimeValueFormatter, TimeDeltaValueFormatter, format_timedelta

__all__ = [
    "ValueFormatter",
    "FormattingContext",
    "FormatterRegistry",
    "DefaultValueFormatter",
    "DateTimeValueFormatter",
    "TimeDeltaValueFormatter",
    "format_value",
    "format_timedelta",
    "formatter_registry",
    "register_formatter",
    "remove_formatter",
    "type_name",
]
