"""
Progress schemas.

GET /progress/week-reference        → WeekReferenceResponse
GET /progress/week-range/{week_ref} → WeekReferenceResponse
GET /progress/weekly                → WeeklyProgressResponse
GET /progress/monthly               → MonthlyProgressResponse
GET /progress/daily-target          → DailyTargetResponse

Amounts are rounded to cents, percentages to two decimals.
"""
from typing import Optional
from pydantic import BaseModel, Field


class WeekReferenceResponse(BaseModel):
    week_ref: str = Field(description="Canonical WWYYYY encoding.", examples=["422025"])
    week: int
    year: int
    start: str = Field(description="Monday (inclusive).")
    end: str = Field(description="Sunday (inclusive).")


class WeeklyProgressResponse(BaseModel):
    """Week-to-date performance against the pro-rated monthly goal and any weekly bonus goal."""
    week_ref: str
    week_start: str
    week_end: str
    today: str

    required_weekly_target: float = Field(description="Monthly target distributed over the week.")
    stretch_weekly_target: float
    bonus_weekly_target: Optional[float] = Field(
        default=None, description="Weekly bonus goal target, when one is configured."
    )
    bonus_stretch_target: Optional[float] = None
    effective_target: float = Field(description="Larger of the weekly and bonus targets.")
    effective_stretch: float

    realized: float
    progress_pct: float
    stretch_progress_pct: float

    days_elapsed: int
    days_remaining: int
    daily_average: float
    projected_end_of_week: float
    expected_by_today: float

    status: str = Field(description='Projection vs effective target: "ahead" | "on-track" | "behind".')
    status_by_today: str = Field(description='Realized vs expected by today: "ahead" | "on-track" | "behind".')

    deficit: float
    surplus: float
    required_daily_pace: float = Field(description="Daily sales needed over the remaining days to close the deficit.")


class MonthlyProgressResponse(BaseModel):
    """Month-to-date performance with a catch-up daily target."""
    month_start: str
    month_end: str
    today: str

    target: float
    stretch: float
    realized: float
    progress_pct: float

    sold_today: float
    sold_before_today: float
    expected_to_date: float
    deficit: float = Field(description="Expected through today minus sold before today; negative when ahead.")

    daily_target_standard: float
    daily_target_adjusted: float
    stretch_daily_standard: float
    stretch_daily_adjusted: float
    today_pct: float
    stretch_today_pct: float

    days_remaining: int
    business_days_remaining: int
    required_daily_pace: float
    stretch_required_daily_pace: float
    projected_end_of_month: float

    status: str


class DailyTargetResponse(BaseModel):
    day: str
    target: float
    stretch: float
