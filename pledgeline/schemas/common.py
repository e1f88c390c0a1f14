"""
Shared schema primitives used across the API.
"""
import math
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One field rejected by request validation."""
    field: str = Field(description='Dotted path into the body, e.g. "goal.stake_amount".')
    message: str
    type: str = Field(description="pydantic error type, e.g. \"greater_than\".")


class ErrorResponse(BaseModel):
    """The `{code, message, details}` envelope every 4xx/5xx response carries."""
    code: str = Field(examples=["SERIES_RANGE_TOO_LARGE"])
    message: str
    details: Optional[dict[str, Any]] = None


# Error statuses the compute endpoints can answer with, for OpenAPI.
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    422: {"model": ErrorResponse, "description": "Invalid input (validation or domain rule)."},
    500: {"model": ErrorResponse, "description": "Unexpected failure."},
}


def finite_or_none(value: float) -> Optional[float]:
    """JSON has no infinity; unbounded quantities go out as null."""
    return None if math.isinf(value) else value
