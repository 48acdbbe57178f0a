"""
Month-to-date goal progress with a catch-up daily target.

The standard daily target is today's share of the monthly goal. When sales
before today fall short of what the weights expected through today, the
shortfall is spread over the business days (Mon-Fri) left in the month and
added to today's target. Being ahead never lowers the target.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from storegoals.services.distribution import daily_target, distribute
from storegoals.services.progress import MonthlyGoal, ProgressStatus, percent_of
from storegoals.services.weeks import as_date, days_in_month, iter_days, month_range

logger = logging.getLogger(__name__)

# Ahead when the savings exceed this many standard days.
AHEAD_DAYS_OF_SAVINGS = 2


@dataclass(frozen=True)
class SaleRecord:
    amount: float
    occurred_at: date | datetime
    owner_id: Optional[str] = None

    @property
    def day(self) -> date:
        return as_date(self.occurred_at)


@dataclass
class MonthlyProgress:
    month_start: date
    month_end: date
    today: date

    target: float
    stretch: float
    realized: float
    progress_pct: float

    sold_today: float
    sold_before_today: float
    expected_to_date: float
    deficit: float           # negative when ahead of the weights

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

    status: ProgressStatus


def business_days_after(today: date, until: date) -> int:
    """Mon-Fri days strictly after `today` up to and including `until`."""
    return sum(1 for d in iter_days(today + timedelta(days=1), until) if d.weekday() < 5)


def _adjusted(standard: float, shortfall: float, business_days: int) -> float:
    if business_days > 0 and shortfall > 0:
        return standard + shortfall / business_days
    return standard


def _pace(remaining: float, business_days: int) -> float:
    return max(0.0, remaining) / business_days if business_days > 0 else 0.0


def evaluate_monthly_progress(
    monthly_goal: Optional[MonthlyGoal],
    sales: Iterable[SaleRecord],
    today: date,
) -> MonthlyProgress:
    today = as_date(today)
    month_start, month_end = month_range(today)
    total_days = days_in_month(today.year, today.month)

    target = float(monthly_goal.target_amount or 0) if monthly_goal else 0.0
    stretch = float(monthly_goal.stretch_amount or 0) if monthly_goal else 0.0
    weights = monthly_goal.daily_weights if monthly_goal else {}

    realized = sold_today = sold_before_today = 0.0
    for sale in sales:
        if not month_start <= sale.day <= month_end:
            continue
        amount = float(sale.amount)
        realized += amount
        if sale.day == today:
            sold_today += amount
        elif sale.day < today:
            sold_before_today += amount

    days_remaining = total_days - today.day
    business_days = business_days_after(today, month_end)

    standard = daily_target(target, weights, today)
    stretch_standard = daily_target(stretch, weights, today)

    expected_to_date = distribute(target, weights, month_start, today)
    stretch_expected = distribute(stretch, weights, month_start, today)
    deficit = expected_to_date - sold_before_today
    stretch_deficit = stretch_expected - sold_before_today

    adjusted = _adjusted(standard, deficit, business_days)
    stretch_adjusted = _adjusted(stretch_standard, stretch_deficit, business_days)

    if target <= 0:
        status = ProgressStatus.on_track
    elif deficit > 0:
        status = ProgressStatus.behind
    elif deficit < -standard * AHEAD_DAYS_OF_SAVINGS:
        status = ProgressStatus.ahead
    else:
        status = ProgressStatus.on_track

    logger.debug(
        "Monthly progress %s: realized=%.2f expected=%.2f deficit=%.2f status=%s",
        today, realized, expected_to_date, deficit, status.value,
    )

    return MonthlyProgress(
        month_start=month_start,
        month_end=month_end,
        today=today,
        target=target,
        stretch=stretch,
        realized=realized,
        progress_pct=percent_of(realized, target),
        sold_today=sold_today,
        sold_before_today=sold_before_today,
        expected_to_date=expected_to_date,
        deficit=deficit,
        daily_target_standard=standard,
        daily_target_adjusted=adjusted,
        stretch_daily_standard=stretch_standard,
        stretch_daily_adjusted=stretch_adjusted,
        today_pct=percent_of(sold_today, adjusted),
        stretch_today_pct=percent_of(sold_today, stretch_adjusted),
        days_remaining=days_remaining,
        business_days_remaining=business_days,
        required_daily_pace=_pace(target - realized, business_days),
        stretch_required_daily_pace=_pace(stretch - realized, business_days),
        projected_end_of_month=realized / today.day * total_days,
        status=status,
    )
