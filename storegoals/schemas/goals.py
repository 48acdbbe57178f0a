"""
Goal schemas.

POST /goals                         → GoalCreate → GoalOut
GET  /goals                         → GoalListResponse
POST /goals/daily-weights/preview   → DailyWeightsPreviewRequest → DailyWeightsPreviewResponse
"""
from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storegoals.models.goal import GoalType


def _check_month_ref(v: str) -> str:
    if len(v) != 6 or not (v.isascii() and v.isdigit()):
        raise ValueError("month_ref must be YYYYMM")
    if not 1 <= int(v[4:]) <= 12:
        raise ValueError("month_ref month must be between 01 and 12")
    return v


class GoalCreate(BaseModel):
    """A monthly goal (month_ref + optional daily weights) or a weekly bonus goal (week_ref)."""
    model_config = ConfigDict(use_enum_values=True)

    goal_type: GoalType = Field(default=GoalType.monthly, examples=["monthly", "weekly_bonus"])
    store_id: Annotated[str, Field(min_length=1, max_length=64, examples=["loja-centro"])]
    owner_id: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Collaborator the goal belongs to. Omit for a store-wide goal.",
    )
    month_ref: Optional[str] = Field(
        default=None,
        description="YYYYMM. Required for monthly goals; weekly goals default to the month of their Monday.",
        examples=["202510"],
    )
    week_ref: Optional[str] = Field(
        default=None,
        description="WWYYYY, stored as sent. Weekly bonus goals need this or `week` + `year`.",
        examples=["422025"],
    )
    week: Optional[int] = Field(default=None, ge=1, le=53, description="Week number; use with `year`.")
    year: Optional[int] = Field(default=None, ge=2000, le=2100)
    target_amount: Decimal = Field(ge=0, description="Amount that meets the goal.")
    stretch_amount: Optional[Decimal] = Field(
        default=None, ge=0, description="Super-goal amount; must be >= target_amount."
    )
    daily_weights: dict[str, float] = Field(
        default_factory=dict,
        description='Monthly goals only: {"YYYY-MM-DD": percentage}, intended to sum to 100.',
    )

    @field_validator("month_ref")
    @classmethod
    def month_ref_format(cls, v: Optional[str]) -> Optional[str]:
        return _check_month_ref(v) if v is not None else v

    @field_validator("daily_weights")
    @classmethod
    def weights_are_dated_and_non_negative(cls, v: dict[str, float]) -> dict[str, float]:
        for key, weight in v.items():
            try:
                date.fromisoformat(key)
            except ValueError:
                raise ValueError(f"daily_weights key {key!r} is not a YYYY-MM-DD date")
            if not math.isfinite(weight):
                raise ValueError(f"daily_weights[{key}] must be a finite number")
            if weight < 0:
                raise ValueError(f"daily_weights[{key}] must not be negative")
        return v

    @model_validator(mode="after")
    def check_goal_shape(self) -> "GoalCreate":
        if self.stretch_amount is not None and self.stretch_amount < self.target_amount:
            raise ValueError("stretch_amount must be greater than or equal to target_amount")
        if self.goal_type == GoalType.monthly.value and not self.month_ref:
            raise ValueError("month_ref is required for monthly goals")
        if (self.week is None) != (self.year is None):
            raise ValueError("week and year must be sent together")
        if self.goal_type == GoalType.weekly_bonus.value and not (self.week_ref or self.week is not None):
            raise ValueError("week_ref, or week and year, is required for weekly bonus goals")
        return self


class GoalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    goal_type: str
    store_id: str
    owner_id: Optional[str]
    month_ref: str
    week_ref: Optional[str]
    target_amount: str
    stretch_amount: Optional[str]
    daily_weights: dict[str, float]
    is_active: bool
    created_at: str


class GoalListResponse(BaseModel):
    total: int
    items: list[GoalOut]


class DailyWeightsPreviewRequest(BaseModel):
    year: int = Field(ge=2000, le=2100, examples=[2025])
    month: int = Field(ge=1, le=12, examples=[10])
    weekday_factors: Optional[dict[int, float]] = Field(
        default=None,
        description="Relative factor per weekday (0=Monday .. 6=Sunday). Defaults to the store profile.",
        examples=[{0: 1.0, 1: 1.0, 2: 1.0, 3: 1.0, 4: 1.5, 5: 2.0, 6: 1.2}],
    )

    @field_validator("weekday_factors")
    @classmethod
    def factors_valid(cls, v: Optional[dict[int, float]]) -> Optional[dict[int, float]]:
        if v is None:
            return v
        for weekday, factor in v.items():
            if not 0 <= weekday <= 6:
                raise ValueError("weekday keys must be between 0 (Monday) and 6 (Sunday)")
            if not math.isfinite(factor):
                raise ValueError("weekday factors must be finite numbers")
            if factor < 0:
                raise ValueError("weekday factors must not be negative")
        return v


class DailyWeightsPreviewResponse(BaseModel):
    month_ref: str
    total: float = Field(description="Sum of the generated weights (100 up to rounding).")
    daily_weights: dict[str, float]
