"""Tests for affirm.primitives.datetimes."""

from datetime import date, datetime, timedelta

import pytest

from affirm import AssertionFailedError, AssertionScope, DateTimeAssertions, should


def failure_of(assertion) -> str:
    with pytest.raises(AssertionFailedError) as exc_info:
        assertion()
    return str(exc_info.value)


def test_should_dispatches_on_dates():
    assert isinstance(should(datetime(2024, 1, 1)), DateTimeAssertions)
    assert isinstance(should(date(2024, 1, 1)), DateTimeAssertions)


class TestEquality:
    def test_be_with_reason(self):
        message = failure_of(
            lambda: should(datetime(2012, 3, 10)).be(
                datetime(2012, 3, 11), "we want to test the failure {0}", "message"
            )
        )

        assert message == (
            "Expected date and time to be <2012-03-11> because we want to test the failure message, "
            "but found <2012-03-10>."
        )

    def test_be_passes_for_equal_values(self):
        should(datetime(2012, 3, 10, 8)).be(datetime(2012, 3, 10, 8))

    def test_none_subject(self):
        message = failure_of(lambda: DateTimeAssertions(None).be(datetime(2012, 3, 11)))

        assert message == "Expected date and time to be <2012-03-11>, but found <null>."

    def test_not_be(self):
        message = failure_of(lambda: should(datetime(2012, 3, 11)).not_be(datetime(2012, 3, 11)))

        assert message == "Expected date and time not to be <2012-03-11>, but it is."

    def test_be_close_to(self):
        nearby = datetime(2012, 3, 13, 12, 15, 31)
        should(datetime(2012, 3, 13, 12, 15, 30, 980000)).be_close_to(nearby)

        message = failure_of(lambda: should(datetime(2012, 3, 13, 12, 15, 30, 979000)).be_close_to(nearby))

        assert message == (
            "Expected date and time to be within 20 ms from <2012-03-13 12:15:31>, "
            "but found <2012-03-13 12:15:30.979>."
        )

    def test_be_close_to_with_precision(self):
        should(datetime(2012, 3, 13, 12, 15, 32)).be_close_to(datetime(2012, 3, 13, 12, 15, 31), 1000)


class TestOrdering:
    def test_be_before(self):
        message = failure_of(lambda: should(datetime(2016, 6, 4)).be_before(datetime(2016, 6, 3)))

        assert message == "Expected a date and time before <2016-06-03>, but found <2016-06-04>."

    def test_boundaries(self):
        moment = datetime(2016, 6, 4)

        should(moment).be_on_or_before(moment).and_.be_on_or_after(moment)
        assert failure_of(lambda: should(moment).be_after(moment)) == (
            "Expected a date and time after <2016-06-04>, but found <2016-06-04>."
        )

    def test_chaining(self):
        should(datetime(2009, 10, 1)).be_after(datetime(2009, 9, 1)).and_.be_before(datetime(2009, 11, 1))

    def test_none_subject_is_not_before_anything(self):
        message = failure_of(lambda: DateTimeAssertions(None).be_on_or_after(datetime(2016, 6, 3)))

        assert message == "Expected a date and time on or after <2016-06-03>, but found <null>."


class TestParts:
    def test_have_year(self):
        message = failure_of(lambda: should(datetime(2009, 12, 31)).have_year(2008))

        assert message == "Expected year to be 2008, but found 2009."

    def test_parts_of_matching_value(self):
        should(datetime(2009, 12, 31, 23, 58, 57)).have_year(2009).and_.have_month(12).and_.have_day(31).and_.have_hour(
            23
        ).and_.have_minute(58).and_.have_second(57)

    def test_time_parts_of_a_date_are_midnight(self):
        should(date(2009, 12, 31)).have_hour(0).and_.have_minute(0)

    def test_none_subject(self):
        message = failure_of(lambda: DateTimeAssertions(None).have_month(1))

        assert message == "Expected month to be 1, but found a <null> datetime."


class TestRelativeTime:
    def test_more_than_before(self):
        message = failure_of(
            lambda: should(datetime(2009, 10, 1))
            .be_more_than(timedelta(days=1))
            .before(datetime(2009, 10, 2), "we like that")
        )

        assert message == (
            "Expected date and/or time <2009-10-01> to be more than 1d before <2009-10-02> because we like that, "
            "but it differs 1d."
        )

    def test_at_least_before(self):
        message = failure_of(
            lambda: should(datetime(2009, 10, 1, 1))
            .be_at_least(timedelta(days=1))
            .before(datetime(2009, 10, 2), "we like that")
        )

        assert message == (
            "Expected date and/or time <2009-10-01 01:00:00> to be at least 1d before <2009-10-02> "
            "because we like that, but it differs 23h."
        )

    def test_exactly_before(self):
        message = failure_of(
            lambda: should(datetime(1, 1, 1, 12, 36))
            .be_exactly(timedelta(minutes=20))
            .before(datetime(1, 1, 1, 12, 55), "{0} minutes is enough", 20)
        )

        assert message == (
            "Expected date and/or time <12:36:00> to be exactly 20m before <12:55:00> "
            "because 20 minutes is enough, but it differs 19m."
        )

    def test_within_before(self):
        message = failure_of(
            lambda: should(datetime(2010, 4, 8, 9, 59, 59))
            .be_within(timedelta(days=2, hours=2))
            .before(datetime(2010, 4, 10, 12, 0, 0), "50 hours is enough")
        )

        assert message == (
            "Expected date and/or time <2010-04-08 09:59:59> to be within 2d and 2h before "
            "<2010-04-10 12:00:00> because 50 hours is enough, but it differs 2d, 2h and 1s."
        )

    def test_less_than_after(self):
        message = failure_of(
            lambda: should(datetime(1, 1, 1, 12, 1, 0))
            .be_less_than(timedelta(seconds=30))
            .after(datetime(1, 1, 1, 12, 0, 30), "30s is the max")
        )

        assert message == (
            "Expected date and/or time <12:01:00> to be less than 30s after <12:00:30> "
            "because 30s is the max, but it differs 30s."
        )

    @pytest.mark.parametrize(
        ("method", "span"),
        [
            ("be_more_than", timedelta(hours=23)),
            ("be_at_least", timedelta(days=1)),
            ("be_exactly", timedelta(days=1)),
            ("be_within", timedelta(days=1)),
            ("be_less_than", timedelta(days=2)),
        ],
    )
    def test_passing_conditions(self, method, span):
        subject = datetime(2009, 10, 1)

        getattr(should(subject), method)(span).before(datetime(2009, 10, 2))
        getattr(should(subject), method)(span).after(datetime(2009, 9, 30))

    def test_none_subject(self):
        message = failure_of(
            lambda: DateTimeAssertions(None).be_at_least(timedelta(days=1)).before(datetime(2009, 10, 2))
        )

        assert message == "Expected date and/or time to be at least 1d before <2009-10-02>, but found a <null> datetime."


def test_failures_are_collected_in_scope():
    with pytest.raises(AssertionFailedError) as exc_info:
        with AssertionScope():
            should(datetime(2009, 12, 31)).have_year(2008)
            should(datetime(2009, 12, 31)).have_month(11)

    assert exc_info.value.failures == [
        "Expected year to be 2008, but found 2009.",
        "Expected month to be 11, but found 12.",
    ]
