"""
Trajectory Engine: the commitment line a goal's progress must stay above.

Model
-----
The line is a list of piecewise-linear segments ordered by start_date.
Each segment stores its own `rate` (units per calendar day) instead of
deriving it from the endpoints, so a historical edit keeps the slope it was
created with.

  required_value(t) = segment.start_value + days(segment.start_date, t) * rate

Days are fractional: a 6 a.m. `now` sits a quarter of a day past midnight,
so the buffer shrinks smoothly through the day instead of once per date.

Queries
-------
required_value(date)                     -> float
buffer_days(current_value, at_date)      -> float   (+inf on a flat segment)
intersection_date(current_value, from)   -> datetime
trajectory_points(start, end, per_day)   -> TrajectoryPoints (lazy, restartable)

A date outside every segment is answered by the last segment, so `now`
before the start or after the end still gets a defined value.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator, NamedTuple, Optional

from pledgeline.core.dates import ONE_DAY, DateLike, as_datetime, days_between
from pledgeline.core.errors import InvalidSamplingRateError, SegmentOverlapError
from pledgeline.core.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrajectorySegment:
    start_date: datetime
    end_date: datetime
    start_value: float
    end_value: float
    rate: float  # units per day

    def __post_init__(self) -> None:
        # Accept plain calendar dates; store local-midnight datetimes.
        object.__setattr__(self, "start_date", as_datetime(self.start_date))
        object.__setattr__(self, "end_date", as_datetime(self.end_date))

    def covers(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date

    def value_at(self, moment: DateLike) -> float:
        return self.start_value + days_between(self.start_date, moment) * self.rate


class TrajectoryPoint(NamedTuple):
    date: datetime
    value: float


class TrajectoryPoints:
    """
    Uniformly spaced samples of the commitment line in [start, end].

    Iterating twice walks the line twice; nothing is materialized.
    """

    def __init__(
        self,
        trajectory: "Trajectory",
        start: datetime,
        end: datetime,
        step: timedelta,
    ):
        self._trajectory = trajectory
        self._start = start
        self._end = end
        self._step = step

    def __iter__(self) -> Iterator[TrajectoryPoint]:
        for i in range(len(self)):
            moment = self._start + self._step * i
            yield TrajectoryPoint(moment, self._trajectory.required_value(moment))

    def __len__(self) -> int:
        if self._end < self._start:
            return 0
        return math.floor((self._end - self._start) / self._step) + 1


def _sampling_step(points_per_day: float) -> timedelta:
    """Spacing between samples; must be a positive, representable timedelta."""
    try:
        step = ONE_DAY / points_per_day if points_per_day > 0 else None
    except (OverflowError, ValueError):
        step = None
    if not step:
        logger.warning("Rejected sampling density points_per_day=%s", points_per_day)
        raise InvalidSamplingRateError(points_per_day)
    return step


# ---------------------------------------------------------------------------
# Trajectory
# ---------------------------------------------------------------------------

class Trajectory:
    """A goal's commitment line, built as a single segment."""

    def __init__(
        self,
        start_date: DateLike,
        end_date: DateLike,
        start_value: float,
        target_value: float,
        rate: float,
        initial_buffer_days: int = 0,
    ):
        buffer_value = initial_buffer_days * rate
        self._segments: list[TrajectorySegment] = [
            TrajectorySegment(
                start_date=start_date,
                end_date=end_date,
                start_value=start_value + buffer_value,
                end_value=target_value + buffer_value,
                rate=rate,
            )
        ]

    @property
    def segments(self) -> tuple[TrajectorySegment, ...]:
        return tuple(self._segments)

    @property
    def end_date(self) -> datetime:
        return self._segments[-1].end_date

    def segment_at(self, moment: DateLike) -> TrajectorySegment:
        """The segment covering `moment`, else the last segment."""
        moment = as_datetime(moment)
        for segment in self._segments:
            if segment.covers(moment):
                return segment
        return self._segments[-1]

    # -- point queries -------------------------------------------------------

    def required_value(self, moment: DateLike) -> float:
        return self.segment_at(moment).value_at(moment)

    def buffer_days(self, current_value: float, at_date: DateLike) -> float:
        """
        Signed days of slack: positive when ahead of the line, negative
        when behind. A flat segment can never be fallen behind by schedule.
        """
        segment = self.segment_at(at_date)
        if segment.rate == 0:
            return math.inf
        return (current_value - segment.value_at(at_date)) / segment.rate

    def intersection_date(self, current_value: float, from_date: DateLike) -> datetime:
        """
        First moment a flat line at `current_value` meets the rising
        commitment line. Falls back to the end of the last segment when no
        segment produces a crossing (the goal expires safe).
        """
        moment = as_datetime(from_date)
        for segment in self._segments:
            if segment.end_date < moment:
                continue

            if segment.rate == 0:
                if current_value < segment.value_at(max(segment.start_date, moment)):
                    return moment
                continue

            days = (current_value - segment.start_value) / segment.rate
            if 0 <= days <= days_between(segment.start_date, segment.end_date):
                return segment.start_date + timedelta(days=days)

        return self.end_date

    def trajectory_points(
        self,
        start: DateLike,
        end: DateLike,
        points_per_day: float = 1,
    ) -> TrajectoryPoints:
        step = _sampling_step(points_per_day)
        return TrajectoryPoints(self, as_datetime(start), as_datetime(end), step)

    # -- editing -------------------------------------------------------------

    def add_segment(self, segment: TrajectorySegment) -> None:
        """
        Append a segment and keep the list ordered by start_date.

        Segments may touch at a boundary but must not share any interior
        span, and a segment may not end before it starts.
        """
        if segment.end_date < segment.start_date:
            logger.warning(
                "Rejected segment %s -> %s: ends before it starts",
                segment.start_date, segment.end_date,
            )
            raise SegmentOverlapError(
                "Segment ends before it starts.",
                segment.start_date, segment.end_date,
            )

        clash = self._overlapping(segment)
        if clash is not None:
            logger.warning(
                "Rejected segment %s -> %s: overlaps %s -> %s",
                segment.start_date, segment.end_date,
                clash.start_date, clash.end_date,
            )
            raise SegmentOverlapError(
                f"Segment overlaps the existing segment "
                f"{clash.start_date.date()} -> {clash.end_date.date()}.",
                segment.start_date, segment.end_date,
            )

        self._segments.append(segment)
        self._segments.sort(key=lambda s: s.start_date)
        logger.debug(
            "Added segment %s -> %s at rate %s (%d segments)",
            segment.start_date, segment.end_date, segment.rate, len(self._segments),
        )

    def _overlapping(self, candidate: TrajectorySegment) -> Optional[TrajectorySegment]:
        for existing in self._segments:
            if (
                candidate.start_date < existing.end_date
                and existing.start_date < candidate.end_date
            ):
                return existing
        return None
