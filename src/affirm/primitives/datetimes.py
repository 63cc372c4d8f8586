"""Assertions on dates and points in time."""

from __future__ import annotations

import operator
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from affirm.primitives.base import AndConstraint, BaseAssertions


class DateTimeAssertions(BaseAssertions):
    """Assertions on a `datetime` or `date` subject.

    Examples
    --------
    >>> should(datetime(2012, 3, 10)).be(datetime(2012, 3, 11), "we want to test the failure {0}", "message")
    Traceback (most recent call last):
    AssertionFailedError: Expected date and time to be <2012-03-11> because we want to test the failure message, but found <2012-03-10>.
    >>> should(datetime(2009, 10, 1)).be_at_least(timedelta(days=1)).before(datetime(2009, 10, 2))
    """

    def be(self, expected: date, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject == expected).fail_with(
            "Expected {context:date and time} to be {0}{reason}, but found {1}.", expected, self.subject
        )
        return self._and()

    def not_be(self, unexpected: date, because: str = "", *because_args: Any) -> AndConstraint:
        self._execute(because, because_args).for_condition(self.subject != unexpected).fail_with(
            "Expected {context:date and time} not to be {0}{reason}, but it is.", unexpected
        )
        return self._and()

    def be_close_to(
        self, nearby: datetime, precision_ms: int = 20, because: str = "", *because_args: Any
    ) -> AndConstraint:
        """Assert that the subject is at most ``precision_ms`` milliseconds away from ``nearby``.

        Parameters
        ----------
        nearby : datetime
            The point in time the subject should be close to.
        precision_ms : int
            Maximum distance, inclusive, in milliseconds.
        because : str
            Reason inserted into the failure message.
        *because_args : Any
            Arguments formatted into ``because``.
        """
        precision = timedelta(milliseconds=precision_ms)
        close = self.subject is not None and nearby - precision <= self.subject <= nearby + precision
        self._execute(because, because_args).for_condition(close).fail_with(
            "Expected {context:date and time} to be within {0} ms from {1}{reason}, but found {2}.",
            precision_ms,
            nearby,
            self.subject,
        )
        return self._and()

    def be_before(self, expected: date, because: str = "", *because_args: Any) -> AndConstraint:
        return self._compare(operator.lt, "before", expected, because, because_args)

    def be_on_or_before(self, expected: date, because: str = "", *because_args: Any) -> AndConstraint:
        return self._compare(operator.le, "on or before", expected, because, because_args)

    def be_after(self, expected: date, because: str = "", *because_args: Any) -> AndConstraint:
        return self._compare(operator.gt, "after", expected, because, because_args)

    def be_on_or_after(self, expected: date, because: str = "", *because_args: Any) -> AndConstraint:
        return self._compare(operator.ge, "on or after", expected, because, because_args)

    def have_year(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("year", expected, because, because_args)

    def have_month(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("month", expected, because, because_args)

    def have_day(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("day", expected, because, because_args)

    def have_hour(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("hour", expected, because, because_args)

    def have_minute(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("minute", expected, because, because_args)

    def have_second(self, expected: int, because: str = "", *because_args: Any) -> AndConstraint:
        return self._have_part("second", expected, because, because_args)

    def be_more_than(self, time_span: timedelta) -> TimeSpanAssertions:
        """Start an assertion on the distance to another point in time; continue with ``before`` or ``after``."""
        return TimeSpanAssertions(self, "more than", time_span)

    def be_at_least(self, time_span: timedelta) -> TimeSpanAssertions:
        return TimeSpanAssertions(self, "at least", time_span)

    def be_exactly(self, time_span: timedelta) -> TimeSpanAssertions:
        return TimeSpanAssertions(self, "exactly", time_span)

    def be_within(self, time_span: timedelta) -> TimeSpanAssertions:
        return TimeSpanAssertions(self, "within", time_span)

    def be_less_than(self, time_span: timedelta) -> TimeSpanAssertions:
        return TimeSpanAssertions(self, "less than", time_span)

    def _compare(
        self,
        condition: Callable[[Any, Any], bool],
        relation: str,
        expected: date,
        because: str,
        because_args: tuple[Any, ...],
    ) -> AndConstraint:
        holds = self.subject is not None and condition(self.subject, expected)
        self._execute(because, because_args).for_condition(holds).fail_with(
            "Expected a {context:date and time} " + relation + " {0}{reason}, but found {1}.",
            expected,
            self.subject,
        )
        return self._and()

    def _have_part(self, part: str, expected: int, because: str, because_args: tuple[Any, ...]) -> AndConstraint:
        scope = self._execute(because, because_args)
        if self.subject is None:
            scope.fail_with(
                "Expected {context:" + part + "} to be {0}{reason}, but found a <null> datetime.", expected
            )
            return self._and()

        # a date has no time of day, so its time parts are those of midnight
        actual = getattr(self.subject, part, 0)
        scope.for_condition(actual == expected).fail_with(
            "Expected {context:" + part + "} to be {0}{reason}, but found {1}.", expected, actual
        )
        return self._and()


_TIME_SPAN_CONDITIONS: dict[str, Callable[[timedelta, timedelta], bool]] = {
    "more than": operator.gt,
    "at least": operator.ge,
    "exactly": operator.eq,
    "within": operator.le,
    "less than": operator.lt,
}


class TimeSpanAssertions:
    """Second half of a relative point-in-time assertion.

    Created by ``be_more_than``, ``be_at_least``, ``be_exactly``,
    ``be_within`` and ``be_less_than`` on `DateTimeAssertions`.

    Parameters
    ----------
    parent : DateTimeAssertions
        Assertions on the subject.
    condition : str
        How the measured distance relates to ``time_span``, e.g. ``"at least"``.
    time_span : timedelta
        The distance the condition refers to.
    """

    def __init__(self, parent: DateTimeAssertions, condition: str, time_span: timedelta):
        self.parent = parent
        self.condition = condition
        self.time_span = time_span

    def before(self, target: datetime, because: str = "", *because_args: Any) -> AndConstraint:
        """Assert on the distance from the subject forward to ``target``."""
        return self._assert(target, "before", because, because_args)

    def after(self, target: datetime, because: str = "", *because_args: Any) -> AndConstraint:
        """Assert on the distance from ``target`` forward to the subject."""
        return self._assert(target, "after", because, because_args)

    def _assert(self, target: datetime, direction: str, because: str, because_args: tuple[Any, ...]) -> AndConstraint:
        subject = self.parent.subject
        scope = self.parent._execute(because, because_args)

        if subject is None:
            scope.fail_with(
                "Expected {context:date and/or time} to be "
                + self.condition
                + " {0} "
                + direction
                + " {1}{reason}, but found a <null> datetime.",
                self.time_span,
                target,
            )
            return AndConstraint(self.parent)

        actual = target - subject if direction == "before" else subject - target
        holds = _TIME_SPAN_CONDITIONS[self.condition](actual, self.time_span)
        scope.for_condition(holds).fail_with(
            "Expected {context:date and/or time} {0} to be "
            + self.condition
            + " {1} "
            + direction
            + " {2}{reason}, but it differs {3}.",
            subject,
            self.time_span,
            target,
            actual,
        )
        return AndConstraint(self.parent)
