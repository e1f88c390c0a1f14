from .entry import DEFAULT_ENTRY_VALUE, Entry, EntryStatus
from .goal import AggregationMethod, CheckInFrequency, GoalConfig

__all__ = [
    "DEFAULT_ENTRY_VALUE",
    "Entry",
    "EntryStatus",
    "AggregationMethod",
    "CheckInFrequency",
    "GoalConfig",
]
