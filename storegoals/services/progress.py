"""
Weekly goal progress.

Given a monthly goal (with its daily weights), an optional weekly bonus goal,
the sales already filtered to one owner/store and week, the week's date range
and "today", produce a ProgressReport:

  required_weekly     monthly target distributed over the week
  effective_target    max(required_weekly, weekly bonus target); never summed
  expected_by_today   monthly target distributed over [week start, today]
  projected           (realized / days elapsed) * 7

Two independent classifications, both at ±10% bands:
  status_by_today     realized  vs expected_by_today
  status              projected vs effective_target

Missing configuration never raises: absent goals count as 0 and an
unclassifiable comparison reports "on-track".
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from storegoals.services.distribution import DailyWeightMap, distribute
from storegoals.services.weeks import WeekRange, as_date, week_of

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7
AHEAD_FACTOR = Decimal("1.1")
BEHIND_FACTOR = Decimal("0.9")


class ProgressStatus(str, enum.Enum):
    ahead = "ahead"
    on_track = "on-track"
    behind = "behind"


# ---------------------------------------------------------------------------
# Input types
# ---------------------------------------------------------------------------

@dataclass
class MonthlyGoal:
    target_amount: float
    stretch_amount: Optional[float] = None
    daily_weights: DailyWeightMap = field(default_factory=dict)


@dataclass
class WeeklyBonusGoal:
    target_amount: float
    stretch_amount: Optional[float] = None


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class ProgressReport:
    week_ref: str
    week_start: date
    week_end: date

    required_weekly_target: float
    stretch_weekly_target: float
    bonus_weekly_target: Optional[float]
    bonus_stretch_target: Optional[float]
    effective_target: float
    effective_stretch: float

    realized: float
    progress_pct: float
    stretch_progress_pct: float

    days_elapsed: int
    days_remaining: int
    daily_average: float
    projected_end_of_week: float
    expected_by_today: float

    status: ProgressStatus
    status_by_today: ProgressStatus

    deficit: float
    surplus: float
    required_daily_pace: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _dec(value: float) -> Decimal:
    return Decimal(repr(float(value)))


def classify(actual: float, expected: float) -> ProgressStatus:
    """ahead at >= 110% of expected, behind below 90%; on-track otherwise or when expected <= 0."""
    # NaN and infinities cannot be ranked.
    if not (math.isfinite(actual) and math.isfinite(expected)):
        return ProgressStatus.on_track
    if expected <= 0:
        return ProgressStatus.on_track
    # Decimal bands: 1000 * 1.1 is exactly 1100.
    actual_d, expected_d = _dec(actual), _dec(expected)
    if actual_d >= expected_d * AHEAD_FACTOR:
        return ProgressStatus.ahead
    if actual_d < expected_d * BEHIND_FACTOR:
        return ProgressStatus.behind
    return ProgressStatus.on_track


def percent_of(value: float, of: float) -> float:
    return value / of * 100 if of > 0 else 0.0


def days_elapsed_in_week(week_range: WeekRange, today: date) -> int:
    """1 on the Monday, 7 on the Sunday; clamped to [0, 7] outside the week."""
    elapsed = (as_date(today) - week_range.start).days + 1
    return max(0, min(DAYS_IN_WEEK, elapsed))


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def evaluate_progress(
    monthly_goal: Optional[MonthlyGoal],
    weekly_bonus_goal: Optional[WeeklyBonusGoal],
    sales: Iterable[float],
    week_range: WeekRange,
    today: date,
    week_ref: Optional[str] = None,
) -> ProgressReport:
    today = as_date(today)
    days_elapsed = days_elapsed_in_week(week_range, today)
    days_remaining = DAYS_IN_WEEK - days_elapsed

    weights = monthly_goal.daily_weights if monthly_goal else {}
    target_amount = float(monthly_goal.target_amount or 0) if monthly_goal else 0.0
    stretch_amount = float(monthly_goal.stretch_amount or 0) if monthly_goal else 0.0

    if monthly_goal is not None:
        required_weekly = distribute(target_amount, weights, week_range.start, week_range.end)
        stretch_weekly = distribute(stretch_amount, weights, week_range.start, week_range.end)
    else:
        required_weekly = stretch_weekly = 0.0

    bonus_target = bonus_stretch = None
    if weekly_bonus_goal is not None:
        bonus_target = float(weekly_bonus_goal.target_amount or 0)
        bonus_stretch = float(weekly_bonus_goal.stretch_amount or 0)

    effective_target = max(required_weekly, bonus_target or 0.0)
    effective_stretch = max(stretch_weekly, bonus_stretch or 0.0)

    realized = float(sum(float(amount) for amount in sales))

    if monthly_goal is not None:
        through = min(today, week_range.end)
        expected_by_today = distribute(target_amount, weights, week_range.start, through)
    else:
        expected_by_today = 0.0

    daily_average = realized / days_elapsed if days_elapsed > 0 else 0.0
    projected = daily_average * DAYS_IN_WEEK

    deficit = max(0.0, effective_target - realized)
    surplus = max(0.0, realized - effective_target)
    required_daily_pace = deficit / days_remaining if days_remaining > 0 else 0.0

    if monthly_goal is None and weekly_bonus_goal is None:
        logger.debug("No goals configured for week starting %s; report carries zero targets", week_range.start)

    return ProgressReport(
        week_ref=week_ref or week_of(week_range.start).encode(),
        week_start=week_range.start,
        week_end=week_range.end,
        required_weekly_target=required_weekly,
        stretch_weekly_target=stretch_weekly,
        bonus_weekly_target=bonus_target,
        bonus_stretch_target=bonus_stretch,
        effective_target=effective_target,
        effective_stretch=effective_stretch,
        realized=realized,
        progress_pct=percent_of(realized, required_weekly),
        stretch_progress_pct=percent_of(realized, stretch_weekly),
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        daily_average=daily_average,
        projected_end_of_week=projected,
        expected_by_today=expected_by_today,
        status=classify(projected, effective_target),
        status_by_today=classify(realized, expected_by_today),
        deficit=deficit,
        surplus=surplus,
        required_daily_pace=required_daily_pace,
    )
