from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from pledgeline.core.dates import parse_local_date


class EntryStatus(str, enum.Enum):
    success = "success"
    missed = "missed"
    pending = "pending"


DEFAULT_ENTRY_VALUE = 1.0


@dataclass(frozen=True)
class Entry:
    """A single check-in. Only `success` entries count toward progress."""
    date: date
    value: Optional[float] = None
    status: EntryStatus = EntryStatus.success

    @property
    def is_success(self) -> bool:
        return self.status == EntryStatus.success

    @property
    def effective_value(self) -> float:
        # A check-in without a quantity counts as one unit.
        return DEFAULT_ENTRY_VALUE if self.value is None else float(self.value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Entry":
        """Build from a persisted check-in row (`check_in_date` as YYYY-MM-DD)."""
        raw_day = record.get("check_in_date", record.get("date"))
        day = raw_day if isinstance(raw_day, date) else parse_local_date(raw_day)
        return cls(
            date=day,
            value=record.get("value"),
            status=EntryStatus(record.get("status") or EntryStatus.success),
        )
