"""
Progress router: goal progress reports.

GET /progress/week-reference          canonical reference of the week containing a day
GET /progress/week-range/{week_ref}   Monday..Sunday range of a stored week reference
GET /progress/weekly                  week-to-date progress report
GET /progress/monthly                 month-to-date progress with catch-up daily target
GET /progress/daily-target            one day's share of the monthly goal

`today` / `day` default to the current date in STORE_TIMEZONE.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storegoals.core.config import settings
from storegoals.core.errors import InvalidFormatError
from storegoals.db.base import get_db
from storegoals.schemas.common import ErrorResponse, money, pct
from storegoals.schemas.progress import (
    DailyTargetResponse,
    MonthlyProgressResponse,
    WeekReferenceResponse,
    WeeklyProgressResponse,
)
from storegoals.services import ledger
from storegoals.services.monthly import MonthlyProgress
from storegoals.services.progress import ProgressReport
from storegoals.services.weeks import (
    WeekReference,
    read_week_reference,
    week_of,
    week_range_for,
    week_reference_from_parts,
)

router = APIRouter(prefix="/progress", tags=["progress"])

_INVALID_REF = {422: {"model": ErrorResponse, "description": "Malformed week reference."}}


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _week_to_response(ref: WeekReference) -> WeekReferenceResponse:
    rng = week_range_for(ref)
    return WeekReferenceResponse(
        week_ref=ref.encode(),
        week=ref.week,
        year=ref.year,
        start=str(rng.start),
        end=str(rng.end),
    )


def _report_to_response(r: ProgressReport, today: date) -> WeeklyProgressResponse:
    return WeeklyProgressResponse(
        week_ref=r.week_ref,
        week_start=str(r.week_start),
        week_end=str(r.week_end),
        today=str(today),
        required_weekly_target=money(r.required_weekly_target),
        stretch_weekly_target=money(r.stretch_weekly_target),
        bonus_weekly_target=money(r.bonus_weekly_target) if r.bonus_weekly_target is not None else None,
        bonus_stretch_target=money(r.bonus_stretch_target) if r.bonus_stretch_target is not None else None,
        effective_target=money(r.effective_target),
        effective_stretch=money(r.effective_stretch),
        realized=money(r.realized),
        progress_pct=pct(r.progress_pct),
        stretch_progress_pct=pct(r.stretch_progress_pct),
        days_elapsed=r.days_elapsed,
        days_remaining=r.days_remaining,
        daily_average=money(r.daily_average),
        projected_end_of_week=money(r.projected_end_of_week),
        expected_by_today=money(r.expected_by_today),
        status=r.status.value,
        status_by_today=r.status_by_today.value,
        deficit=money(r.deficit),
        surplus=money(r.surplus),
        required_daily_pace=money(r.required_daily_pace),
    )


def _monthly_to_response(m: MonthlyProgress) -> MonthlyProgressResponse:
    return MonthlyProgressResponse(
        month_start=str(m.month_start),
        month_end=str(m.month_end),
        today=str(m.today),
        target=money(m.target),
        stretch=money(m.stretch),
        realized=money(m.realized),
        progress_pct=pct(m.progress_pct),
        sold_today=money(m.sold_today),
        sold_before_today=money(m.sold_before_today),
        expected_to_date=money(m.expected_to_date),
        deficit=money(m.deficit),
        daily_target_standard=money(m.daily_target_standard),
        daily_target_adjusted=money(m.daily_target_adjusted),
        stretch_daily_standard=money(m.stretch_daily_standard),
        stretch_daily_adjusted=money(m.stretch_daily_adjusted),
        today_pct=pct(m.today_pct),
        stretch_today_pct=pct(m.stretch_today_pct),
        days_remaining=m.days_remaining,
        business_days_remaining=m.business_days_remaining,
        required_daily_pace=money(m.required_daily_pace),
        stretch_required_daily_pace=money(m.stretch_required_daily_pace),
        projected_end_of_month=money(m.projected_end_of_month),
        status=m.status.value,
    )


# ---------------------------------------------------------------------------
# Week references
# ---------------------------------------------------------------------------

@router.get(
    "/week-reference",
    response_model=WeekReferenceResponse,
    summary="Week reference for a day",
)
def week_reference(
    today: Optional[date] = Query(
        default=None,
        description="Any day of the week. Defaults to today (store timezone).",
        examples=["2024-12-30"],
    ),
):
    """
    Return the `WWYYYY` reference of the Monday-based week containing `today`.
    Week 1 is the week containing Jan 1, so the last days of December can
    belong to week 1 of the next year.
    """
    return _week_to_response(week_of(today or settings.store_today()))


@router.get(
    "/week-range/{week_ref}",
    response_model=WeekReferenceResponse,
    summary="Resolve a week reference to its dates",
    responses=_INVALID_REF,
)
def week_range(week_ref: str):
    """
    Accepts `WWYYYY` and the legacy `YYYYWW`; the response is always canonical.
    A string that is a valid `WWYYYY` is read that way, so any `week_ref`
    returned by `/progress/week-reference` resolves back to its own week.
    """
    return _week_to_response(read_week_reference(week_ref))


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@router.get(
    "/weekly",
    response_model=WeeklyProgressResponse,
    summary="Week-to-date goal progress",
    responses=_INVALID_REF,
)
def weekly_progress(
    store_id: str = Query(..., min_length=1),
    owner_id: Optional[str] = Query(
        default=None, description="Collaborator. Omit for the store-wide goal and all sales."
    ),
    week_ref: Optional[str] = Query(
        default=None, description="WWYYYY. Defaults to the week containing `today`.", examples=["422025"]
    ),
    week: Optional[int] = Query(
        default=None, ge=1, le=53, description="Week number; use with `year` instead of `week_ref`."
    ),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    today: Optional[date] = Query(default=None, description="Defaults to today (store timezone)."),
    db: Session = Depends(get_db),
):
    """
    Compare week-to-date sales with the monthly goal pro-rated over the week
    (using the goal's daily weights) and with the weekly bonus goal, if any.
    The larger of the two targets drives `status` and the deficit figures.

    Missing goals never fail the request; the report carries zero targets and
    `on-track` statuses instead.
    """
    today = today or settings.store_today()
    if week is not None or year is not None:
        if week is None or year is None:
            raise InvalidFormatError("week and year must be sent together", value=week_ref)
        week_ref = week_reference_from_parts(week, year)
    report = ledger.build_weekly_report(db, store_id=store_id, owner_id=owner_id, today=today, week_ref=week_ref)
    return _report_to_response(report, today)


@router.get(
    "/monthly",
    response_model=MonthlyProgressResponse,
    summary="Month-to-date goal progress",
)
def monthly_progress(
    store_id: str = Query(..., min_length=1),
    owner_id: Optional[str] = Query(default=None),
    today: Optional[date] = Query(default=None, description="Defaults to today (store timezone)."),
    db: Session = Depends(get_db),
):
    """
    Month-to-date totals, projection, and today's target adjusted to recover
    any shortfall over the remaining business days.
    """
    today = today or settings.store_today()
    return _monthly_to_response(
        ledger.build_monthly_report(db, store_id=store_id, owner_id=owner_id, today=today)
    )


@router.get(
    "/daily-target",
    response_model=DailyTargetResponse,
    summary="One day's share of the monthly goal",
)
def daily_target(
    store_id: str = Query(..., min_length=1),
    owner_id: Optional[str] = Query(default=None),
    day: Optional[date] = Query(default=None, description="Defaults to today (store timezone)."),
    db: Session = Depends(get_db),
):
    day = day or settings.store_today()
    target, stretch = ledger.daily_targets_for(db, store_id=store_id, owner_id=owner_id, day=day)
    return DailyTargetResponse(day=str(day), target=money(target), stretch=money(stretch))
