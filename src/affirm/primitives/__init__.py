from .base import AndConstraint, BaseAssertions
from .datetimes import DateTimeAssertions, TimeSpanAssertions
from .objects import ObjectAssertions, assert_equivalent

__all__ = [
    "AndConstraint",
    "BaseAssertions",
    "ObjectAssertions",
    "DateTimeAssertions",
    "TimeSpanAssertions",
    "assert_equivalent",
]
