"""
Ledger service: goal and sales persistence, and the report builders that
feed stored rows into the pure evaluators.

Public API
----------
record_sale(db, ...)                                  -> Sale
list_sales(db, store_id, owner_id, start, end)        -> list[Sale]
sales_amounts(db, store_id, owner_id, start, end)     -> list[Decimal]
create_goal(db, ...)                                  -> Goal
list_goals(db, store_id, ...)                         -> list[Goal]
get_goal(db, goal_id)                                 -> Goal        (GoalNotFoundError)
deactivate_goal(db, goal_id)                          -> Goal
find_monthly_goal(db, store_id, owner_id, y, m)       -> Goal | None
find_weekly_bonus_goal(db, store_id, owner_id, ref)   -> Goal | None
build_weekly_report(db, store_id, owner_id, today, week_ref)  -> ProgressReport
build_monthly_report(db, store_id, owner_id, today)           -> MonthlyProgress
daily_targets_for(db, store_id, owner_id, day)                -> (target, stretch)
"""
from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from storegoals.core.config import settings
from storegoals.core.errors import GoalNotFoundError
from storegoals.models.goal import Goal, GoalType
from storegoals.models.sale import Sale
from storegoals.services.distribution import daily_target, weights_total
from storegoals.services.monthly import MonthlyProgress, SaleRecord, evaluate_monthly_progress
from storegoals.services.progress import (
    MonthlyGoal,
    ProgressReport,
    WeeklyBonusGoal,
    evaluate_progress,
)
from storegoals.services.weeks import (
    WeekReference,
    month_range,
    read_week_reference,
    week_of,
    week_reference_from_parts,
    week_range_for,
)

logger = logging.getLogger(__name__)

WEIGHTS_TOLERANCE = 0.01


def enum_value(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def month_ref_for(day: date) -> str:
    return f"{day.year:04d}{day.month:02d}"


# ---------------------------------------------------------------------------
# Row → domain conversion
# ---------------------------------------------------------------------------

def load_weights(raw: Optional[str]) -> dict[str, float]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Unreadable daily_weights payload; treating as uniform: %r", raw[:80])
        return {}
    if not isinstance(data, dict):
        return {}
    weights = {}
    for key, value in data.items():
        if value is None:
            continue
        value = float(value)
        if not math.isfinite(value):
            logger.warning("Dropping non-finite daily weight %s=%r", key, value)
            continue
        weights[str(key)] = value
    return weights


def to_monthly_goal(goal: Goal) -> MonthlyGoal:
    return MonthlyGoal(
        target_amount=float(goal.target_amount),
        stretch_amount=float(goal.stretch_amount) if goal.stretch_amount is not None else None,
        daily_weights=load_weights(goal.daily_weights),
    )


def to_weekly_bonus_goal(goal: Goal) -> WeeklyBonusGoal:
    return WeeklyBonusGoal(
        target_amount=float(goal.target_amount),
        stretch_amount=float(goal.stretch_amount) if goal.stretch_amount is not None else None,
    )


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

def _store_day(occurred_at: datetime) -> date:
    if occurred_at.tzinfo is None:
        return occurred_at.date()
    return occurred_at.astimezone(ZoneInfo(settings.STORE_TIMEZONE)).date()


def record_sale(
    db: Session,
    store_id: str,
    amount: Decimal,
    occurred_at: datetime,
    owner_id: Optional[str] = None,
) -> Sale:
    sale = Sale(
        store_id=store_id,
        owner_id=owner_id,
        amount=amount,
        occurred_at=occurred_at,
        day=_store_day(occurred_at),
    )
    db.add(sale)
    db.commit()
    db.refresh(sale)
    logger.info("Recorded sale %s store=%s owner=%s amount=%s", sale.id, store_id, owner_id, amount)
    return sale


def list_sales(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    start: date,
    end: date,
) -> list[Sale]:
    """Sales for a store in [start, end]; all owners when owner_id is None."""
    q = db.query(Sale).filter(Sale.store_id == store_id, Sale.day >= start, Sale.day <= end)
    if owner_id is not None:
        q = q.filter(Sale.owner_id == owner_id)
    return q.order_by(Sale.occurred_at.asc()).all()


def sales_amounts(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    start: date,
    end: date,
) -> list[Decimal]:
    return [s.amount for s in list_sales(db, store_id, owner_id, start, end)]


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

def create_goal(
    db: Session,
    goal_type: str,
    store_id: str,
    target_amount: Decimal,
    stretch_amount: Optional[Decimal] = None,
    owner_id: Optional[str] = None,
    month_ref: Optional[str] = None,
    week_ref: Optional[str] = None,
    daily_weights: Optional[dict[str, float]] = None,
    week: Optional[int] = None,
    year: Optional[int] = None,
) -> Goal:
    """
    Persist a goal. A weekly goal is named either by `week` + `year`, stored
    as WWYYYY, or by a `week_ref` string, stored exactly as sent. A weekly goal
    without month_ref takes the month of its Monday.
    """
    goal_type = GoalType(enum_value(goal_type))

    if goal_type is GoalType.weekly_bonus:
        if week is not None and year is not None:
            ref = week_reference_from_parts(week, year)
            week_ref = ref.encode()
        else:
            ref = read_week_reference(week_ref)
        month_ref = month_ref or month_ref_for(week_range_for(ref).start)
        daily_weights = None

    if daily_weights:
        year, month = int(month_ref[:4]), int(month_ref[4:])
        total = weights_total(daily_weights, year, month)
        if abs(total - 100) > WEIGHTS_TOLERANCE:
            logger.warning(
                "Daily weights for store=%s month=%s sum to %.4f, not 100",
                store_id, month_ref, total,
            )

    goal = Goal(
        goal_type=goal_type,
        store_id=store_id,
        owner_id=owner_id,
        month_ref=month_ref,
        week_ref=week_ref,
        target_amount=target_amount,
        stretch_amount=stretch_amount,
        daily_weights=json.dumps(daily_weights) if daily_weights else None,
        is_active=True,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("Created %s goal %s for store=%s owner=%s", goal_type.value, goal.id, store_id, owner_id)
    return goal


def list_goals(
    db: Session,
    store_id: str,
    owner_id: Optional[str] = None,
    goal_type: Optional[str] = None,
    include_inactive: bool = False,
) -> list[Goal]:
    q = db.query(Goal).filter(Goal.store_id == store_id)
    if owner_id is not None:
        q = q.filter(Goal.owner_id == owner_id)
    if goal_type:
        q = q.filter(Goal.goal_type == GoalType(enum_value(goal_type)))
    if not include_inactive:
        q = q.filter(Goal.is_active.is_(True))
    return q.order_by(Goal.month_ref.desc(), Goal.id.desc()).all()


def get_goal(db: Session, goal_id: int) -> Goal:
    goal = db.get(Goal, goal_id)
    if goal is None:
        raise GoalNotFoundError(goal_id)
    return goal


def deactivate_goal(db: Session, goal_id: int) -> Goal:
    goal = get_goal(db, goal_id)
    goal.is_active = False
    db.commit()
    db.refresh(goal)
    logger.info("Deactivated goal %s", goal_id)
    return goal


def _owner_filter(q, owner_id: Optional[str]):
    if owner_id is None:
        return q.filter(Goal.owner_id.is_(None))
    return q.filter(Goal.owner_id == owner_id)


def find_monthly_goal(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    year: int,
    month: int,
) -> Optional[Goal]:
    q = db.query(Goal).filter(
        Goal.store_id == store_id,
        Goal.goal_type == GoalType.monthly,
        Goal.month_ref == f"{year:04d}{month:02d}",
        Goal.is_active.is_(True),
    )
    return _owner_filter(q, owner_id).order_by(Goal.id.desc()).first()


def find_weekly_bonus_goal(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    week_ref: WeekReference,
) -> Optional[Goal]:
    """Matches rows stored in either the current or the legacy encoding."""
    q = db.query(Goal).filter(
        Goal.store_id == store_id,
        Goal.goal_type == GoalType.weekly_bonus,
        Goal.week_ref.in_([week_ref.encode(), week_ref.encode_legacy()]),
        Goal.is_active.is_(True),
    )
    return _owner_filter(q, owner_id).order_by(Goal.id.desc()).first()


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def build_weekly_report(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    today: date,
    week_ref: str | WeekReference | None = None,
) -> ProgressReport:
    """
    Weekly progress for `week_ref` (default: the week containing `today`).
    A string reference is read as a client reference (WWYYYY first).
    The monthly goal used is the one for the month of the week's Monday.
    """
    if isinstance(week_ref, WeekReference):
        ref = week_ref
    elif week_ref:
        ref = read_week_reference(week_ref)
    else:
        ref = week_of(today)
    week_range = week_range_for(ref)

    monthly = find_monthly_goal(db, store_id, owner_id, week_range.start.year, week_range.start.month)
    bonus = find_weekly_bonus_goal(db, store_id, owner_id, ref)
    sales = sales_amounts(db, store_id, owner_id, week_range.start, week_range.end)

    return evaluate_progress(
        monthly_goal=to_monthly_goal(monthly) if monthly else None,
        weekly_bonus_goal=to_weekly_bonus_goal(bonus) if bonus else None,
        sales=sales,
        week_range=week_range,
        today=today,
        week_ref=ref.encode(),
    )


def build_monthly_report(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    today: date,
) -> MonthlyProgress:
    start, end = month_range(today)
    monthly = find_monthly_goal(db, store_id, owner_id, today.year, today.month)
    sales = [
        SaleRecord(amount=float(s.amount), occurred_at=s.day, owner_id=s.owner_id)
        for s in list_sales(db, store_id, owner_id, start, end)
    ]
    return evaluate_monthly_progress(
        monthly_goal=to_monthly_goal(monthly) if monthly else None,
        sales=sales,
        today=today,
    )


def daily_targets_for(
    db: Session,
    store_id: str,
    owner_id: Optional[str],
    day: date,
) -> tuple[float, float]:
    """(target, stretch) share of the monthly goal for one day; zeros when unset."""
    monthly = find_monthly_goal(db, store_id, owner_id, day.year, day.month)
    if monthly is None:
        return 0.0, 0.0
    goal = to_monthly_goal(monthly)
    return (
        daily_target(goal.target_amount, goal.daily_weights, day),
        daily_target(goal.stretch_amount or 0, goal.daily_weights, day),
    )
