"""
Auto-Fill Engine: the pessimistic reading of a goal's check-ins.

Any day without a recorded entry is assumed to contribute zero progress.
The safety calculator reads `current_value` straight from the entry list;
`generate_filled_data` walks the calendar to give charts the "flatlining"
step function where missing days hold the cumulative total level.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from itertools import accumulate
from typing import Iterable, Optional, Union

from pledgeline.core.dates import ONE_DAY, DateLike, as_datetime, iter_days, now_local
from pledgeline.models import AggregationMethod, Entry
from pledgeline.services.aggregator import group_by_day, resolve_method

FILL_METHODS = (AggregationMethod.sum, AggregationMethod.last)


@dataclass(frozen=True)
class FilledDataPoint:
    date: date
    value: float
    is_actual: bool  # False when the day was auto-filled with zero
    cumulative_value: float


def current_value(entries: Iterable[Entry]) -> float:
    return sum((e.effective_value for e in entries if e.is_success), 0.0)


def last_check_in_date(entries: Iterable[Entry]) -> Optional[date]:
    return max((e.date for e in entries if e.is_success), default=None)


def days_since_last_check_in(
    entries: Iterable[Entry],
    now: Optional[datetime] = None,
) -> float:
    last = last_check_in_date(entries)
    if last is None:
        return math.inf
    now = as_datetime(now) if now is not None else now_local()
    return float(math.floor((now - as_datetime(last)) / ONE_DAY))


def generate_filled_data(
    entries: Iterable[Entry],
    start: DateLike,
    end: DateLike,
    method: Union[AggregationMethod, str] = AggregationMethod.sum,
) -> list[FilledDataPoint]:
    """
    One point per day in [start, end]. Days with check-ins carry their
    `method`-aggregated value; the rest carry 0 and are marked not actual.
    """
    method = resolve_method(method, FILL_METHODS)
    actual = {
        day: (
            sum(e.effective_value for e in day_entries)
            if method == AggregationMethod.sum
            else day_entries[-1].effective_value
        )
        for day, day_entries in group_by_day(entries).items()
    }

    days = list(iter_days(start, end))
    values = [actual.get(day, 0.0) for day in days]
    return [
        FilledDataPoint(
            date=day,
            value=value,
            is_actual=day in actual,
            cumulative_value=total,
        )
        for day, value, total in zip(days, values, accumulate(values))
    ]
