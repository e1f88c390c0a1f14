"""
Custom exception hierarchy for Pledgeline.

The trajectory math is total over its input domain, so these errors only
cover structurally invalid input handed in by a caller: malformed dates,
overlapping trajectory segments, nonsense sampling densities, unknown
aggregation strategies and oversized series requests.

Rule: every error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from pledgeline.schemas.common import ErrorDetail


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class PledgelineException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidDateError(PledgelineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE"

    def __init__(self, raw: str):
        super().__init__(
            message=f"'{raw}' is not a YYYY-MM-DD calendar date.",
            details={"raw": raw},
        )


class SegmentOverlapError(PledgelineException):
    http_status = status.HTTP_409_CONFLICT
    code = "SEGMENT_OVERLAP"

    def __init__(self, message: str, start_date: Any, end_date: Any):
        super().__init__(
            message=message,
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )


class InvalidSamplingRateError(PledgelineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_SAMPLING_RATE"

    def __init__(self, points_per_day: float):
        super().__init__(
            message=f"points_per_day={points_per_day} does not give a positive, representable sample spacing.",
            details={"points_per_day": points_per_day},
        )


class UnknownAggregationMethodError(PledgelineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNKNOWN_AGGREGATION_METHOD"

    def __init__(self, method: Any, allowed: list[str]):
        super().__init__(
            message=f"Unknown aggregation method '{method}'. Allowed: {', '.join(allowed)}.",
            details={"method": str(method), "allowed": allowed},
        )


class SeriesRangeTooLargeError(PledgelineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "SERIES_RANGE_TOO_LARGE"

    def __init__(self, limit: int, requested: int, unit: str = "days"):
        super().__init__(
            message=f"Series exceeds maximum of {limit} {unit}. Requested {requested}.",
            details={"limit": limit, "requested": requested, "unit": unit},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def pledgeline_exception_handler(
    request: Request, exc: PledgelineException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append(ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
