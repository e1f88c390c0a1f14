"""
Shared pytest fixtures and builders.

The engine is pure, so no database or clock is involved: every
time-dependent test passes an explicit `now`.
"""
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pledgeline.main import app
from pledgeline.models import CheckInFrequency, Entry, EntryStatus, GoalConfig


def make_goal(**overrides) -> GoalConfig:
    fields = dict(
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
        check_in_frequency=CheckInFrequency.daily,
        target_value=1.0,
        stake_amount=Decimal("50"),
        initial_buffer_days=0,
    )
    fields.update(overrides)
    return GoalConfig(**fields)


def make_entry(day: str, value=None, status=EntryStatus.success) -> Entry:
    return Entry(date=date.fromisoformat(day), value=value, status=status)


def goal_payload(**overrides) -> dict:
    payload = {
        "start_date": "2025-01-01",
        "end_date": "2025-12-31",
        "check_in_frequency": "daily",
        "target_value": 1,
        "initial_buffer_days": 0,
        "stake_amount": 50,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
