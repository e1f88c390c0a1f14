"""
Series router: chart data for the commitment line and progress.

POST /series/trajectory   sampled commitment line
POST /series/aggregate    one value per day under a strategy
POST /series/cumulative   running total per check-in day
POST /series/fill         every day in a range, gaps marked
POST /series/auto-fill    pessimistic step function (gaps hold flat)
POST /series/recency      current value and time since last check-in
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Union

from fastapi import APIRouter

from pledgeline.core.config import settings
from pledgeline.core.dates import as_date, days_between
from pledgeline.core.errors import SeriesRangeTooLargeError
from pledgeline.core.logging import get_logger
from pledgeline.models import AggregationMethod
from pledgeline.schemas.common import ERROR_RESPONSES, finite_or_none
from pledgeline.schemas.goal import GoalConfigIn, entries_to_domain
from pledgeline.schemas.series import (
    AggregateRequest,
    AggregatedEntryOut,
    AutoFillRequest,
    CumulativePointOut,
    EntriesRequest,
    FillRequest,
    FilledDataPointOut,
    FilledDayOut,
    RecencyRequest,
    RecencyResponse,
    TrajectoryPointOut,
    TrajectoryRequest,
)
from pledgeline.services import aggregator, auto_fill
from pledgeline.services.safety import SafetyCalculator

router = APIRouter(prefix="/series", tags=["series"], responses=ERROR_RESPONSES)

logger = get_logger(__name__)


def _check_range(start: date, end: date) -> None:
    requested = int(days_between(as_date(start), as_date(end))) + 1
    if requested > settings.MAX_SERIES_DAYS:
        logger.warning("Rejected %d-day series (max %d)", requested, settings.MAX_SERIES_DAYS)
        raise SeriesRangeTooLargeError(settings.MAX_SERIES_DAYS, requested)


def _check_points(requested: int) -> None:
    if requested > settings.MAX_SERIES_POINTS:
        logger.warning(
            "Rejected %d-point series (max %d)", requested, settings.MAX_SERIES_POINTS
        )
        raise SeriesRangeTooLargeError(settings.MAX_SERIES_POINTS, requested, unit="points")


def _method_for(
    requested: Optional[str],
    goal: Optional[GoalConfigIn],
    allowed: Iterable[AggregationMethod] = tuple(AggregationMethod),
) -> Union[AggregationMethod, str]:
    """An explicit method wins; otherwise the goal's own, if allowed here; else sum."""
    if requested is not None:
        return requested
    if goal is not None and goal.aggregation_method in tuple(allowed):
        return goal.aggregation_method
    return AggregationMethod.sum


# ---------------------------------------------------------------------------
# Commitment line
# ---------------------------------------------------------------------------

@router.post(
    "/trajectory",
    response_model=list[TrajectoryPointOut],
    summary="Sampled commitment line",
)
def trajectory(body: TrajectoryRequest):
    """Required value at uniform steps between `start` and `end`."""
    goal = body.goal.to_domain()
    start = body.start or goal.start_date
    end = body.end or goal.end_date
    _check_range(start, end)

    line = SafetyCalculator(goal).trajectory
    points = line.trajectory_points(
        start, end, body.points_per_day or settings.DEFAULT_POINTS_PER_DAY
    )
    _check_points(len(points))
    return [TrajectoryPointOut(at=p.date.isoformat(), value=p.value) for p in points]


# ---------------------------------------------------------------------------
# Day-level aggregation
# ---------------------------------------------------------------------------

@router.post(
    "/aggregate",
    response_model=list[AggregatedEntryOut],
    summary="Collapse same-day check-ins",
)
def aggregate(body: AggregateRequest):
    items = aggregator.aggregate_by_day(
        entries_to_domain(body.entries), _method_for(body.method, body.goal)
    )
    return [
        AggregatedEntryOut(day=str(i.date), value=i.value, count=i.count)
        for i in items
    ]


@router.post(
    "/cumulative",
    response_model=list[CumulativePointOut],
    summary="Running total of daily sums",
)
def cumulative(body: EntriesRequest):
    points = aggregator.cumulative_values(entries_to_domain(body.entries))
    return [
        CumulativePointOut(day=str(p.date), cumulative_value=p.cumulative_value)
        for p in points
    ]


@router.post(
    "/fill",
    response_model=list[FilledDayOut],
    summary="Every day in range with gaps marked",
)
def fill(body: FillRequest):
    _check_range(body.start, body.end)
    days = aggregator.fill_missing_days(entries_to_domain(body.entries), body.start, body.end)
    return [FilledDayOut(day=str(d.date), value=d.value, is_filled=d.is_filled) for d in days]


# ---------------------------------------------------------------------------
# Auto-fill
# ---------------------------------------------------------------------------

@router.post(
    "/auto-fill",
    response_model=list[FilledDataPointOut],
    summary="Pessimistic progress step function",
)
def auto_fill_series(body: AutoFillRequest):
    """
    Days without a check-in are filled with zero, so the cumulative line
    flatlines until the next real entry.
    """
    _check_range(body.start, body.end)
    points = auto_fill.generate_filled_data(
        entries_to_domain(body.entries),
        body.start,
        body.end,
        _method_for(body.method, body.goal, auto_fill.FILL_METHODS),
    )
    return [
        FilledDataPointOut(
            day=str(p.date),
            value=p.value,
            is_actual=p.is_actual,
            cumulative_value=p.cumulative_value,
        )
        for p in points
    ]


@router.post(
    "/recency",
    response_model=RecencyResponse,
    summary="Current value and days since the last check-in",
)
def recency(body: RecencyRequest):
    entries = entries_to_domain(body.entries)
    last = auto_fill.last_check_in_date(entries)
    return RecencyResponse(
        current_value=auto_fill.current_value(entries),
        last_check_in_date=str(last) if last else None,
        days_since_last_check_in=finite_or_none(
            auto_fill.days_since_last_check_in(entries, now=body.now)
        ),
    )
