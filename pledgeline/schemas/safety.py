"""
Safety schemas.

POST /safety/status      → SafetyStatusRequest → SafetyStatusResponse
POST /safety/derailment  → DerailmentRequest   → DerailmentResponse
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from pledgeline.schemas.goal import EntryIn, GoalConfigIn


class SafetyStatusRequest(BaseModel):
    goal: GoalConfigIn
    entries: list[EntryIn] = Field(default_factory=list)
    now: Optional[datetime] = Field(
        default=None,
        description="Local wall-clock time to evaluate at. Defaults to the server clock.",
        examples=["2025-01-11T09:30:00"],
    )


class SafetyStatusResponse(BaseModel):
    """Urgency of a goal at `evaluated_at`."""
    level: str = Field(
        description='"overdue" | "critical" | "urgent" | "soon" | "safe" | "buffer"'
    )
    days_of_buffer: Optional[float] = Field(
        description="Signed days ahead of the commitment line. null when unbounded."
    )
    hours_until_deadline: float
    is_overdue: bool
    message: str
    color: str
    background_color: str
    deadline: str = Field(description="When current progress, left flat, meets the line.")
    current_value: float
    evaluated_at: str


class DerailmentRequest(BaseModel):
    goal: GoalConfigIn
    current_value: Annotated[float, Field(ge=0)]
    now: Optional[datetime] = None


class DerailmentResponse(BaseModel):
    derailment_time: str
