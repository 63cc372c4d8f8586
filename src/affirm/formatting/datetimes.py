"""Formatters for dates, times and durations."""

from __future__ import annotations

import time as _time
from datetime import date, datetime, time, timedelta
from typing import Any

from affirm.config import get_settings
from affirm.formatting.formatter import FormattingContext, ValueFormatter


_MIN_DATE = date(1, 1, 1)


def local_base_offset() -> timedelta:
    """The UTC offset considered local, ignoring daylight saving time."""
    minutes = get_settings().timezone_offset_minutes
    if minutes is not None:
        return timedelta(minutes=minutes)
    return timedelta(seconds=-_time.timezone)


class DateTimeValueFormatter(ValueFormatter):
    """Formats ``datetime``, ``date`` and ``time`` values as ``<yyyy-mm-dd HH:MM:SS.fff UTC+h>``.

    Parts that carry no information are left out: the date for 0001-01-01, the
    time for midnight, the fraction when it is zero, and the offset when it
    equals ``timezone_offset``. A naive value is taken to be in
    ``timezone_offset``.

    Parameters
    ----------
    timezone_offset : timedelta or None
        Offset treated as local. ``None`` follows the settings and the machine.
    """

    def __init__(self, timezone_offset: timedelta | None = None):
        self._timezone_offset = timezone_offset

    @property
    def timezone_offset(self) -> timedelta:
        if self._timezone_offset is None:
            return local_base_offset()
        return self._timezone_offset

    @timezone_offset.setter
    def timezone_offset(self, value: timedelta | None) -> None:
        self._timezone_offset = value

    def can_handle(self, value: Any) -> bool:
        return isinstance(value, (datetime, date, time))

    def to_string(self, value: Any, context: FormattingContext | None = None) -> str:
        moment, offset = self._normalize(value)

        parts: list[str] = []
        if moment.date() != _MIN_DATE:
            parts.append(f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}")

        if moment.time() != time(0, 0):
            text = f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
            if moment.microsecond % 1000 == 0 and moment.microsecond:
                text += f".{moment.microsecond // 1000:03d}"
            elif moment.microsecond:
                text += f".{moment.microsecond:06d}"
            parts.append(text)

        if not parts:
            parts.append(f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}")

        if offset != self.timezone_offset:
            parts.append(_format_offset(offset))

        return "<" + " ".join(parts) + ">"

    def _normalize(self, value: date | time) -> tuple[datetime, timedelta]:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime(value.year, value.month, value.day)
        else:
            moment = datetime.combine(_MIN_DATE, value)

        offset = moment.utcoffset()
        if offset is None:
            offset = self.timezone_offset
        return moment, offset


class TimeDeltaValueFormatter(ValueFormatter):
    """Formats durations as ``2d, 2h and 1s``."""

    def can_handle(self, value: Any) -> bool:
        return isinstance(value, timedelta)

    def to_string(self, value: Any, context: FormattingContext | None = None) -> str:
        return format_timedelta(value)


def format_timedelta(value: timedelta) -> str:
    sign = "-" if value < timedelta(0) else ""
    remaining = abs(value)

    hours, rest = divmod(remaining.seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    milliseconds, microseconds = divmod(remaining.microseconds, 1000)

    units = [
        (remaining.days, "d"),
        (hours, "h"),
        (minutes, "m"),
        (seconds, "s"),
        (milliseconds, "ms"),
        (microseconds, "µs"),
    ]
    parts = [f"{amount}{unit}" for amount, unit in units if amount]

    if not parts:
        return "0s"
    if len(parts) == 1:
        return sign + parts[0]
    return sign + ", ".join(parts[:-1]) + " and " + parts[-1]


def _format_offset(offset: timedelta) -> str:
    if offset == timedelta(0):
        return "UTC"

    sign = "-" if offset < timedelta(0) else "+"
    total_minutes = int(abs(offset).total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)
    if minutes:
        return f"UTC{sign}{hours}:{minutes:02d}"
    return f"UTC{sign}{hours}"
