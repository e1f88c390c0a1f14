"""
Chart series schemas.

POST /series/trajectory  → TrajectoryRequest → list[TrajectoryPointOut]
POST /series/aggregate   → AggregateRequest  → list[AggregatedEntryOut]
POST /series/cumulative  → EntriesRequest    → list[CumulativePointOut]
POST /series/fill        → FillRequest       → list[FilledDayOut]
POST /series/auto-fill   → AutoFillRequest   → list[FilledDataPointOut]
POST /series/recency     → RecencyRequest    → RecencyResponse
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from pledgeline.schemas.goal import EntryIn, GoalConfigIn


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class EntriesRequest(BaseModel):
    entries: list[EntryIn] = Field(default_factory=list)


class TrajectoryRequest(BaseModel):
    goal: GoalConfigIn
    start: Optional[datetime] = Field(
        default=None, description="First sample. Defaults to the goal start."
    )
    end: Optional[datetime] = Field(
        default=None, description="Last sample bound. Defaults to the goal end."
    )
    points_per_day: Optional[Annotated[float, Field(ge=0.01, le=1440)]] = Field(
        default=None,
        description=(
            "Samples per day, from one per 100 days up to one per minute. "
            "Defaults to DEFAULT_POINTS_PER_DAY."
        ),
    )


class AggregateRequest(EntriesRequest):
    goal: Optional[GoalConfigIn] = Field(
        default=None, description="Supplies the default method when `method` is omitted."
    )
    method: Optional[str] = Field(
        default=None,
        description=(
            '"sum" | "max" | "min" | "last" | "first" | "average". '
            "Defaults to the goal's aggregation_method, else sum."
        ),
    )


class FillRequest(EntriesRequest):
    start: date
    end: date


class AutoFillRequest(FillRequest):
    goal: Optional[GoalConfigIn] = None
    method: Optional[str] = Field(
        default=None,
        description=(
            '"sum" | "last". Defaults to the goal\'s aggregation_method when it is '
            "one of those, else sum."
        ),
    )


class RecencyRequest(EntriesRequest):
    now: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class TrajectoryPointOut(BaseModel):
    at: str
    value: float


class AggregatedEntryOut(BaseModel):
    day: str
    value: float
    count: int = Field(description="Check-ins collapsed into this day.")


class CumulativePointOut(BaseModel):
    day: str
    cumulative_value: float


class FilledDayOut(BaseModel):
    day: str
    value: float
    is_filled: bool = Field(description="True when no check-in existed for the day.")


class FilledDataPointOut(BaseModel):
    day: str
    value: float
    is_actual: bool
    cumulative_value: float


class RecencyResponse(BaseModel):
    current_value: float
    last_check_in_date: Optional[str] = None
    days_since_last_check_in: Optional[float] = Field(
        default=None, description="null when there has never been a successful check-in."
    )
