"""
Weighted target distribution.

A monthly amount is spread across days by a DailyWeightMap
({"YYYY-MM-DD": percentage of the month}). An empty map means a uniform
split over the days of the month.

Public API
----------
distribute(amount, weights, start, end)        -> float
daily_target(amount, weights, day)             -> float
build_daily_weights(year, month, factors)      -> dict[str, float]
weights_total(weights, year, month)            -> float
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from storegoals.services.weeks import days_in_month, iter_days

logger = logging.getLogger(__name__)

DailyWeightMap = Mapping[str, float]

# Monday=0 .. Sunday=6, same numbering as date.weekday().
DEFAULT_WEEKDAY_FACTORS: dict[int, float] = {
    0: 1.0,
    1: 1.0,
    2: 1.0,
    3: 1.0,
    4: 1.5,
    5: 2.0,
    6: 1.2,
}


def distribute(
    amount: float,
    weights: Optional[DailyWeightMap],
    start: date,
    end: date,
) -> float:
    """
    Share of `amount` that falls on the days [start, end] inclusive.

    With a non-empty weight map every day contributes amount * weight / 100;
    days missing from the map contribute 0. With an empty map the daily share
    is amount / days_in_month(start's month) for every day in the range, even
    when the range runs into the next month.
    """
    if end < start:
        return 0.0
    amount = float(amount or 0)

    if weights:
        return sum(amount * float(weights.get(d.isoformat(), 0) or 0) / 100 for d in iter_days(start, end))

    n_days = (end - start).days + 1
    return amount / days_in_month(start.year, start.month) * n_days


def daily_target(amount: float, weights: Optional[DailyWeightMap], day: date) -> float:
    """One day's share of a monthly amount."""
    return distribute(amount, weights, day, day)


def weights_total(weights: Optional[DailyWeightMap], year: int, month: int) -> float:
    """Sum of the weights that fall inside the given month."""
    if not weights:
        return 0.0
    prefix = f"{year:04d}-{month:02d}-"
    return sum(float(v or 0) for k, v in weights.items() if k.startswith(prefix))


def build_daily_weights(
    year: int,
    month: int,
    weekday_factors: Optional[Mapping[int, float]] = None,
) -> dict[str, float]:
    """
    Generate a weight map for a month from relative per-weekday factors.

    Each day gets factor(weekday) / sum(factors over the month) * 100, so the
    month always sums to 100. Missing weekdays default to a factor of 1.0.
    """
    factors = dict(DEFAULT_WEEKDAY_FACTORS if weekday_factors is None else weekday_factors)
    first = date(year, month, 1)
    last = date(year, month, days_in_month(year, month))
    per_day = {d: float(factors.get(d.weekday(), 1.0)) for d in iter_days(first, last)}

    total = sum(per_day.values())
    if total <= 0:
        logger.warning(
            "Weekday factors for %04d-%02d sum to %s; falling back to a uniform split",
            year, month, total,
        )
        uniform = 100 / len(per_day)
        return {d.isoformat(): uniform for d in per_day}

    return {d.isoformat(): factor / total * 100 for d, factor in per_day.items()}
