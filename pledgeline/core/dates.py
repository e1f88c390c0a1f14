"""
Local calendar-day helpers.

Every goal and check-in date is a timezone-naive "local day". Strings are
built from their year/month/day components, never through an epoch parse,
so a date can never slide one day east or west of what the user picked.
Sub-day precision only enters through `now`, which is a naive local
wall-clock datetime.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from pledgeline.core.errors import InvalidDateError

DateLike = Union[date, datetime]

ONE_DAY = timedelta(days=1)
ONE_HOUR = timedelta(hours=1)

_ISO_DAY = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_local_date(raw: str) -> date:
    """Parse `YYYY-MM-DD` into a local calendar date."""
    match = _ISO_DAY.match(raw.strip()) if isinstance(raw, str) else None
    if match is None:
        raise InvalidDateError(str(raw))
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateError(raw) from None


def as_datetime(value: DateLike) -> datetime:
    """
    Lift a calendar date to local midnight. Datetimes pass through; aware
    ones are converted to local wall-clock time and stripped of tzinfo.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return as_datetime(value).date()
    return value


def days_between(start: DateLike, end: DateLike) -> float:
    """Signed fractional days from `start` to `end`."""
    return (as_datetime(end) - as_datetime(start)) / ONE_DAY


def iter_days(start: DateLike, end: DateLike) -> Iterator[date]:
    """Every calendar day in [start, end], inclusive. Empty when start > end."""
    current = as_date(start)
    last = as_date(end)
    while current <= last:
        yield current
        current += ONE_DAY


def now_local() -> datetime:
    return datetime.now()


def today_local(timezone: Optional[str] = None) -> date:
    """Today's calendar date in an IANA zone, or in the host zone."""
    if timezone:
        return datetime.now(tz=ZoneInfo(timezone)).date()
    return date.today()
