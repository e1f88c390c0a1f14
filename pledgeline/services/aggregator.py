"""
Aggregator: one value per calendar day, for charts and day-level views.

Public API
----------
aggregate_by_day(entries, method="sum")   -> list[AggregatedEntry]
cumulative_values(entries)                -> list[CumulativePoint]
fill_missing_days(entries, start, end)    -> list[FilledDay]

Only `success` entries participate. Same-day entries are grouped in input
order, so "first" / "last" mean first / last as handed in: check-ins carry
no time of day to order them by.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from itertools import accumulate
from typing import Callable, Iterable, NamedTuple, Sequence, Union

from pledgeline.core.dates import DateLike, iter_days
from pledgeline.core.errors import UnknownAggregationMethodError
from pledgeline.models import AggregationMethod, Entry


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregatedEntry:
    date: date
    value: float
    count: int
    source_entries: tuple[Entry, ...]


class CumulativePoint(NamedTuple):
    date: date
    cumulative_value: float


class FilledDay(NamedTuple):
    date: date
    value: float
    is_filled: bool


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

_REDUCERS: dict[AggregationMethod, Callable[[Sequence[float]], float]] = {
    AggregationMethod.sum: lambda values: sum(values),
    AggregationMethod.max: max,
    AggregationMethod.min: min,
    AggregationMethod.last: lambda values: values[-1],
    AggregationMethod.first: lambda values: values[0],
    AggregationMethod.average: lambda values: sum(values) / len(values),
}


def resolve_method(
    method: Union[AggregationMethod, str],
    allowed: Iterable[AggregationMethod] = tuple(AggregationMethod),
) -> AggregationMethod:
    allowed = tuple(allowed)
    try:
        resolved = AggregationMethod(method)
    except ValueError:
        resolved = None
    if resolved not in allowed:
        raise UnknownAggregationMethodError(method, [m.value for m in allowed])
    return resolved


def group_by_day(entries: Iterable[Entry]) -> dict[date, list[Entry]]:
    """Successful entries keyed by day, in input order within each day."""
    grouped: dict[date, list[Entry]] = {}
    for entry in entries:
        if entry.is_success:
            grouped.setdefault(entry.date, []).append(entry)
    return grouped


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def aggregate_by_day(
    entries: Iterable[Entry],
    method: Union[AggregationMethod, str] = AggregationMethod.sum,
) -> list[AggregatedEntry]:
    reduce = _REDUCERS[resolve_method(method)]
    grouped = group_by_day(entries)
    return [
        AggregatedEntry(
            date=day,
            value=reduce([e.effective_value for e in day_entries]),
            count=len(day_entries),
            source_entries=tuple(day_entries),
        )
        for day, day_entries in sorted(grouped.items())
    ]


def cumulative_values(entries: Iterable[Entry]) -> list[CumulativePoint]:
    daily = aggregate_by_day(entries, AggregationMethod.sum)
    totals = accumulate(item.value for item in daily)
    return [CumulativePoint(item.date, total) for item, total in zip(daily, totals)]


def fill_missing_days(
    entries: Iterable[Entry],
    start: DateLike,
    end: DateLike,
) -> list[FilledDay]:
    """Every day in [start, end] with its summed value; absent days are 0."""
    by_day = {item.date: item.value for item in aggregate_by_day(entries)}
    return [
        FilledDay(day, by_day.get(day, 0.0), day not in by_day)
        for day in iter_days(start, end)
    ]
