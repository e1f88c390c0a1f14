"""
Safety Calculator: turns a goal and its check-ins into an urgency level.

Pipeline (pure; evaluated on every UI refresh or fresh check-in)
-----------------------------------------------------------------
  1. current  = auto_fill.current_value(entries)
  2. buffer   = trajectory.buffer_days(current, now)
  3. deadline = trajectory.intersection_date(current, now)
  4. hours    = (deadline - now) in hours;  overdue = hours < 0

Classification (first match wins)
---------------------------------
  overdue   hours < 0     "OVERDUE! Pay $<stake>"
  critical  hours < 24    "Add data in <h>h or pay $<stake>"
  urgent    buffer < 1    "Add data today or pay $<stake>"
  soon      buffer < 2    "<buffer*24> hours of buffer"
  safe      buffer < 7    "<buffer> days of buffer"
  buffer    otherwise     "<buffer> days of buffer"

`overdue` is the state an automated penalty trigger forfeits the stake on.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from pledgeline.core.dates import (
    ONE_DAY,
    ONE_HOUR,
    DateLike,
    as_datetime,
    days_between,
    now_local,
)
from pledgeline.core.logging import get_logger
from pledgeline.models import CheckInFrequency, Entry, GoalConfig
from pledgeline.services import auto_fill
from pledgeline.services.trajectory import Trajectory

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

class SafetyLevel(str, enum.Enum):
    overdue = "overdue"
    critical = "critical"
    urgent = "urgent"
    soon = "soon"
    safe = "safe"
    buffer = "buffer"


# (text color, background color) tokens for the presentation layer
LEVEL_COLORS: dict[SafetyLevel, tuple[str, str]] = {
    SafetyLevel.overdue:  ("text-black", "bg-black"),
    SafetyLevel.critical: ("text-red-600", "bg-red-500"),
    SafetyLevel.urgent:   ("text-orange-600", "bg-orange-500"),
    SafetyLevel.soon:     ("text-blue-600", "bg-blue-500"),
    SafetyLevel.safe:     ("text-green-600", "bg-green-500"),
    SafetyLevel.buffer:   ("text-green-700", "bg-green-400"),
}

_CRITICAL_HOURS = 24
_URGENT_DAYS = 1
_SOON_DAYS = 2
_SAFE_DAYS = 7


@dataclass(frozen=True)
class SafetyStatus:
    level: SafetyLevel
    days_of_buffer: float
    hours_until_deadline: float
    is_overdue: bool
    message: str
    color: str
    background_color: str
    deadline: datetime


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _money(amount: Decimal) -> str:
    amount = Decimal(str(amount))
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount)


def _whole(value: float) -> str:
    # A flat commitment line leaves an unbounded buffer.
    if math.isinf(value):
        return "∞"
    return str(math.floor(value))


def classify(
    buffer: float,
    hours_until: float,
    stake_amount: Decimal,
) -> tuple[SafetyLevel, str]:
    stake = _money(stake_amount)
    if hours_until < 0:
        return SafetyLevel.overdue, f"OVERDUE! Pay ${stake}"
    if hours_until < _CRITICAL_HOURS:
        return SafetyLevel.critical, f"Add data in {_whole(hours_until)}h or pay ${stake}"
    if buffer < _URGENT_DAYS:
        return SafetyLevel.urgent, f"Add data today or pay ${stake}"
    if buffer < _SOON_DAYS:
        return SafetyLevel.soon, f"{_whole(buffer * 24)} hours of buffer"
    if buffer < _SAFE_DAYS:
        return SafetyLevel.safe, f"{_whole(buffer)} days of buffer"
    return SafetyLevel.buffer, f"{_whole(buffer)} days of buffer"


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class SafetyCalculator:
    """
    Built once per goal configuration; `calculate_safety_status` is then a
    pure function of (entries, now) and may be called from anywhere.
    """

    def __init__(self, goal: GoalConfig):
        self._goal = goal
        self.rate_per_day = goal.rate_per_day
        total_days = days_between(goal.start_date, goal.end_date)
        self._trajectory = Trajectory(
            start_date=goal.start_date,
            end_date=goal.end_date,
            start_value=0.0,
            target_value=self.rate_per_day * total_days,
            rate=self.rate_per_day,
            initial_buffer_days=goal.initial_buffer_days,
        )

    @property
    def goal(self) -> GoalConfig:
        return self._goal

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    def required_value(self, moment: DateLike) -> float:
        return self._trajectory.required_value(moment)

    def calculate_deadline(
        self,
        current_value: float,
        now: Optional[DateLike] = None,
    ) -> datetime:
        """When `current_value`, left flat, meets the commitment line."""
        now = as_datetime(now) if now is not None else now_local()
        return self._trajectory.intersection_date(current_value, now)

    def calculate_safety_status(
        self,
        entries: Iterable[Entry],
        now: Optional[DateLike] = None,
    ) -> SafetyStatus:
        now = as_datetime(now) if now is not None else now_local()

        current = auto_fill.current_value(entries)
        buffer = self._trajectory.buffer_days(current, now)
        deadline = self._trajectory.intersection_date(current, now)
        hours_until = (deadline - now) / ONE_HOUR

        level, message = classify(buffer, hours_until, self._goal.stake_amount)
        color, background = LEVEL_COLORS[level]
        logger.debug(
            "Safety %s: current=%s buffer=%.3f days deadline=%s",
            level.value, current, buffer, deadline.isoformat(),
        )
        return SafetyStatus(
            level=level,
            days_of_buffer=buffer,
            hours_until_deadline=hours_until,
            is_overdue=hours_until < 0,
            message=message,
            color=color,
            background_color=background,
            deadline=deadline,
        )


# ---------------------------------------------------------------------------
# Closed-form estimate
# ---------------------------------------------------------------------------

def calculate_derailment_time(
    current_value: float,
    target_value: float,
    check_in_frequency: CheckInFrequency,
    start_date: DateLike,
    end_date: DateLike,
    initial_buffer_days: int = 0,
    now: Optional[DateLike] = None,
) -> datetime:
    """
    Single-line derailment estimate without building a Trajectory.

    Returns `now` once the line has been crossed; otherwise the estimate
    is capped at `end_date`.
    """
    now = as_datetime(now) if now is not None else now_local()
    start = as_datetime(start_date)
    end = as_datetime(end_date)

    rate = CheckInFrequency(check_in_frequency).units_per_day
    daily_increase = rate * target_value
    if daily_increase == 0:
        return end

    initial_buffer_value = initial_buffer_days * daily_increase
    days_until_derail = (current_value - initial_buffer_value) / daily_increase
    if days_until_derail <= days_between(start, now):
        return now
    if days_until_derail > days_between(start, end):
        return end
    return start + ONE_DAY * days_until_derail
