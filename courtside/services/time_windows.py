"""
Time intervals and weekly recurring availability windows.

Intervals are half-open ``[start, end)`` and always carried as UTC-aware
datetimes. Weekly windows are expressed in minutes of the club's local day,
with day 0 being Sunday.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import pytz

from courtside.core.exceptions import RejectionReason, ValidationException

MINUTES_PER_DAY = 1440
_SECONDS_PER_HOUR = Decimal(3600)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


@dataclass(frozen=True)
class Interval:
    """A half-open time range ``[start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start >= self.end:
            raise ValidationException(
                RejectionReason.INVALID_INTERVAL,
                "Start time must be before end time",
                {"start_time": self.start.isoformat(), "end_time": self.end.isoformat()},
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def hours(self) -> Decimal:
        return Decimal(int(self.duration.total_seconds())) / _SECONDS_PER_HOUR

    def overlaps(self, other: "Interval") -> bool:
        return overlaps(self, other)


def overlaps(a: Interval, b: Interval) -> bool:
    """True iff the intervals share at least one instant; touching ends do not."""
    return a.start < b.end and b.start < a.end


def weekday_index(value: datetime) -> int:
    """Day of week with Sunday as 0."""
    return (value.weekday() + 1) % 7


def time_of_day(value: datetime) -> timedelta:
    """Offset of ``value`` from its own wall-clock midnight, to the microsecond."""
    return timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )


@dataclass(frozen=True)
class WeeklyWindow:
    """A recurring ``[start_minute, end_minute)`` range on one weekday."""

    day: int
    start_minute: int
    end_minute: int

    def __post_init__(self):
        if not 0 <= self.day <= 6:
            raise ValidationException(
                RejectionReason.INVALID_INTERVAL,
                "Window day must be between 0 (Sunday) and 6 (Saturday)",
                {"day": self.day},
            )
        if not 0 <= self.start_minute < self.end_minute <= MINUTES_PER_DAY:
            raise ValidationException(
                RejectionReason.INVALID_INTERVAL,
                "Window minutes must satisfy 0 <= start < end <= 1440",
                {"start_minute": self.start_minute, "end_minute": self.end_minute},
            )

    def covers(self, day: int, start: timedelta, end: timedelta) -> bool:
        """True iff ``[start, end)`` on ``day`` lies inside this window."""
        return (
            self.day == day
            and timedelta(minutes=self.start_minute) <= start
            and end <= timedelta(minutes=self.end_minute)
        )


def fits_within_weekly_window(
    interval: Interval,
    windows: Iterable[WeeklyWindow],
    tz: Optional[str] = None,
) -> bool:
    """
    Check that an interval lies entirely inside one weekly window.

    The interval is evaluated on the wall clock of ``tz`` (UTC when omitted).
    Comparison is exact to the microsecond. An interval ending at the
    following local midnight ends at minute 1440 of its start day; any other
    interval crossing a local midnight never fits, even when the next day
    has an adjoining window.
    """
    zone = pytz.timezone(tz) if tz else pytz.UTC
    local_start = interval.start.astimezone(zone)
    local_end = interval.end.astimezone(zone)

    start = time_of_day(local_start)
    end = time_of_day(local_end)
    if local_end.date() != local_start.date():
        if local_end.date() != local_start.date() + timedelta(days=1) or end != timedelta(0):
            return False
        end = timedelta(minutes=MINUTES_PER_DAY)

    day = weekday_index(local_start)
    return any(window.covers(day, start, end) for window in windows)
