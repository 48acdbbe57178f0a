"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


def money(value: float) -> float:
    """Currency amounts leave the API rounded to cents."""
    return round(float(value), 2)


def pct(value: float) -> float:
    return round(float(value), 2)
