"""
Goal and check-in payloads shared by every compute endpoint.

Dates are plain `YYYY-MM-DD` calendar days. They are never shifted through
UTC, matching how goals and check-ins are stored.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pledgeline.models import (
    AggregationMethod,
    CheckInFrequency,
    Entry,
    EntryStatus,
    GoalConfig,
)


class GoalConfigIn(BaseModel):
    """Configuration of a single goal, as stored by the goals service."""
    model_config = ConfigDict(from_attributes=True)

    start_date: date = Field(description="First day of the goal.", examples=["2025-01-01"])
    end_date: date = Field(description="Last day of the goal.", examples=["2025-12-31"])
    check_in_frequency: CheckInFrequency = Field(
        description='"daily" | "weekly" | "biweekly" | "monthly"',
        examples=["daily"],
    )
    target_value: Annotated[float, Field(
        ge=0,
        description="Units owed per check-in period. 0 gives a flat, non-derailing line.",
    )] = 1.0
    initial_buffer_days: Annotated[int, Field(ge=0)] = 0
    stake_amount: Annotated[Decimal, Field(
        gt=0,
        description="Amount pledged. Only used in status messages.",
        examples=[50],
    )]
    aggregation_method: AggregationMethod = AggregationMethod.sum

    @model_validator(mode="after")
    def check_window(self) -> "GoalConfigIn":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def to_domain(self) -> GoalConfig:
        return GoalConfig(
            start_date=self.start_date,
            end_date=self.end_date,
            check_in_frequency=self.check_in_frequency,
            target_value=self.target_value,
            stake_amount=self.stake_amount,
            initial_buffer_days=self.initial_buffer_days,
            aggregation_method=self.aggregation_method,
        )


class EntryIn(BaseModel):
    """A single check-in record."""
    check_in_date: date = Field(examples=["2025-01-05"])
    value: Optional[Annotated[float, Field(ge=0)]] = Field(
        default=None,
        description="Quantity logged. Omitted or null counts as 1.",
    )
    status: EntryStatus = EntryStatus.success

    def to_domain(self) -> Entry:
        return Entry(date=self.check_in_date, value=self.value, status=self.status)


def entries_to_domain(items: list[EntryIn]) -> list[Entry]:
    return [item.to_domain() for item in items]
