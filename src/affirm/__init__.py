"""Affirm - fluent assertions with deep object-graph equivalency."""

from datetime import date
from typing import Any

from .config import AffirmSettings, get_settings, reset_settings
from .equivalency import (
    AssertionContext,
    AssertionOptions,
    AssertionRule,
    CyclicReferenceHandling,
    EnumEquivalencyHandling,
    EquivalencyOptions,
    EquivalencyStep,
    EquivalencyValidationContext,
    MemberInfo,
    MemberMatchingRule,
    MemberSelectionRule,
    SelectedMemberInfo,
    find_member,
)
from .exceptions import AssertionFailedError, InvalidOperationError
from .execution import AssertionScope, Failure, FailureKind
from .formatting import ValueFormatter, format_value, register_formatter, remove_formatter
from .primitives import (
    AndConstraint,
    DateTimeAssertions,
    ObjectAssertions,
    TimeSpanAssertions,
    assert_equivalent,
)
from .version import __version__


def should(
    value: Any, *, declared_type: Any = None, scope: AssertionScope | None = None
) -> ObjectAssertions | DateTimeAssertions:
    """Start a chain of assertions on ``value``.

    Parameters
    ----------
    value : Any
        The subject of the assertions.
    declared_type : Any or None
        Static type of ``value``. Lets ``be_equivalent_to`` compare only the
        members that type declares.
    scope : AssertionScope or None
        Scope receiving failures instead of the current one.

    Returns
    -------
    ObjectAssertions or DateTimeAssertions
        `DateTimeAssertions` for dates and datetimes, `ObjectAssertions`
        otherwise.

    Examples
    --------
    >>> should(total).be(42)
    >>> should(created_at).be_after(datetime(2024, 1, 1))
    >>> should(order).be_equivalent_to(expected, lambda o: o.excluding("id"))
    """
    if isinstance(value, date):
        return DateTimeAssertions(value, declared_type, scope)
    return ObjectAssertions(value, declared_type, scope)


__all__ = [
    # Entry points
    "should",
    "assert_equivalent",
    "ObjectAssertions",
    "DateTimeAssertions",
    "TimeSpanAssertions",
    "AndConstraint",
    # Scopes and errors
    "AssertionScope",
    "AssertionFailedError",
    "InvalidOperationError",
    "Failure",
    "FailureKind",
    # Equivalency configuration
    "AssertionOptions",
    "EquivalencyOptions",
    "CyclicReferenceHandling",
    "EnumEquivalencyHandling",
    "EquivalencyStep",
    "EquivalencyValidationContext",
    "AssertionRule",
    "AssertionContext",
    "MemberSelectionRule",
    "MemberMatchingRule",
    "MemberInfo",
    "SelectedMemberInfo",
    "find_member",
    # Formatting
    "ValueFormatter",
    "format_value",
    "register_formatter",
    "remove_formatter",
    # Settings
    "AffirmSettings",
    "get_settings",
    "reset_settings",
    "__version__",
]
