"""
Safety router: urgency of a goal given its check-ins.

POST /safety/status       level, buffer and countdown for one goal
POST /safety/derailment   closed-form derailment estimate
"""
from __future__ import annotations

from fastapi import APIRouter

from pledgeline.core.dates import as_datetime, now_local
from pledgeline.schemas.common import ERROR_RESPONSES, finite_or_none
from pledgeline.schemas.goal import entries_to_domain
from pledgeline.schemas.safety import (
    DerailmentRequest,
    DerailmentResponse,
    SafetyStatusRequest,
    SafetyStatusResponse,
)
from pledgeline.services import auto_fill
from pledgeline.services.safety import SafetyCalculator, calculate_derailment_time

router = APIRouter(prefix="/safety", tags=["safety"], responses=ERROR_RESPONSES)


# ---------------------------------------------------------------------------
# POST /safety/status
# ---------------------------------------------------------------------------

@router.post(
    "/status",
    response_model=SafetyStatusResponse,
    summary="Safety status of a goal",
    responses={
        200: {"description": "Urgency level, buffer and deadline for the goal."},
    },
)
def safety_status(body: SafetyStatusRequest):
    """
    Evaluate how close a goal is to derailing.

    Only `success` check-ins count. Days without a check-in are assumed to
    contribute nothing, so the buffer only grows when data is added.

    ### Levels (first match wins)
    | Level | Trigger |
    |---|---|
    | `overdue`  | deadline already passed (stake is forfeit) |
    | `critical` | under 24h until the deadline |
    | `urgent`   | under 1 day of buffer |
    | `soon`     | under 2 days of buffer |
    | `safe`     | under 7 days of buffer |
    | `buffer`   | 7 days or more |
    """
    now = as_datetime(body.now) if body.now is not None else now_local()
    entries = entries_to_domain(body.entries)

    calculator = SafetyCalculator(body.goal.to_domain())
    status = calculator.calculate_safety_status(entries, now=now)
    return SafetyStatusResponse(
        level=status.level.value,
        days_of_buffer=finite_or_none(status.days_of_buffer),
        hours_until_deadline=status.hours_until_deadline,
        is_overdue=status.is_overdue,
        message=status.message,
        color=status.color,
        background_color=status.background_color,
        deadline=status.deadline.isoformat(),
        current_value=auto_fill.current_value(entries),
        evaluated_at=now.isoformat(),
    )


# ---------------------------------------------------------------------------
# POST /safety/derailment
# ---------------------------------------------------------------------------

@router.post(
    "/derailment",
    response_model=DerailmentResponse,
    summary="Closed-form derailment time",
)
def derailment(body: DerailmentRequest):
    """
    Estimate when `current_value` would fall onto the commitment line if no
    more data is added. Returns `now` if that has already happened and is
    capped at the goal's end date.
    """
    goal = body.goal
    moment = calculate_derailment_time(
        current_value=body.current_value,
        target_value=goal.target_value,
        check_in_frequency=goal.check_in_frequency,
        start_date=goal.start_date,
        end_date=goal.end_date,
        initial_buffer_days=goal.initial_buffer_days,
        now=body.now,
    )
    return DerailmentResponse(derailment_time=moment.isoformat())
