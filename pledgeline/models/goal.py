from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping

from pledgeline.core.dates import parse_local_date


class CheckInFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"

    @property
    def units_per_day(self) -> float:
        return _UNITS_PER_DAY[self]


_UNITS_PER_DAY = {
    CheckInFrequency.daily: 1.0,
    CheckInFrequency.weekly: 1 / 7,
    CheckInFrequency.biweekly: 1 / 14,
    CheckInFrequency.monthly: 1 / 30,
}


class AggregationMethod(str, enum.Enum):
    sum = "sum"
    max = "max"
    min = "min"
    last = "last"
    first = "first"
    average = "average"


@dataclass(frozen=True)
class GoalConfig:
    """
    Everything the safety engine needs to know about a goal.

    `target_value` is the amount owed per check-in period. A zero target
    yields a flat commitment line that can never derail.
    `stake_amount` only ever appears in status messages.
    """
    start_date: date
    end_date: date
    check_in_frequency: CheckInFrequency
    target_value: float
    stake_amount: Decimal
    initial_buffer_days: int = 0
    aggregation_method: AggregationMethod = AggregationMethod.sum

    @property
    def rate_per_day(self) -> float:
        return self.check_in_frequency.units_per_day * self.target_value

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "GoalConfig":
        """Build from a persisted goal row whose dates are YYYY-MM-DD strings."""
        return cls(
            start_date=_local_day(record["start_date"]),
            end_date=_local_day(record["end_date"]),
            check_in_frequency=CheckInFrequency(record["check_in_frequency"]),
            target_value=float(_default(record.get("target_value"), 1)),
            stake_amount=Decimal(str(_default(record.get("stake_amount"), 0))),
            initial_buffer_days=int(_default(record.get("initial_buffer_days"), 0)),
            aggregation_method=AggregationMethod(
                record.get("aggregation_method") or AggregationMethod.sum
            ),
        )


def _local_day(value: Any) -> date:
    return value if isinstance(value, date) else parse_local_date(value)


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value
