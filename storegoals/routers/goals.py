"""
Goals router.

POST   /goals                          create a monthly or weekly bonus goal
GET    /goals                          list a store's goals
GET    /goals/{goal_id}                single goal
DELETE /goals/{goal_id}                deactivate a goal
POST   /goals/daily-weights/preview    generate a month's weight map from weekday factors
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storegoals.db.base import get_db
from storegoals.models.goal import Goal, GoalType
from storegoals.schemas.common import ErrorResponse
from storegoals.schemas.goals import (
    DailyWeightsPreviewRequest,
    DailyWeightsPreviewResponse,
    GoalCreate,
    GoalListResponse,
    GoalOut,
)
from storegoals.services import ledger
from storegoals.services.distribution import build_daily_weights, weights_total

router = APIRouter(prefix="/goals", tags=["goals"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _goal_to_response(goal: Goal) -> GoalOut:
    return GoalOut(
        id=goal.id,
        goal_type=ledger.enum_value(goal.goal_type),
        store_id=goal.store_id,
        owner_id=goal.owner_id,
        month_ref=goal.month_ref,
        week_ref=goal.week_ref,
        target_amount=str(goal.target_amount),
        stretch_amount=str(goal.stretch_amount) if goal.stretch_amount is not None else None,
        daily_weights=ledger.load_weights(goal.daily_weights),
        is_active=goal.is_active,
        created_at=goal.created_at.isoformat() if goal.created_at else "",
    )


# ---------------------------------------------------------------------------
# POST /goals
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=GoalOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a goal",
    responses={
        422: {"model": ErrorResponse, "description": "Validation error or malformed week reference."},
    },
)
def create_goal(payload: GoalCreate, db: Session = Depends(get_db)):
    """
    Create a **monthly** goal (`month_ref`, optional `daily_weights`) or a
    **weekly bonus** goal (`week` + `year`, or a `week_ref` string).

    A `week_ref` is stored exactly as sent and read as `WWYYYY` when it is a
    valid one; otherwise the legacy `YYYYWW` reading applies.
    """
    goal = ledger.create_goal(
        db,
        goal_type=payload.goal_type,
        store_id=payload.store_id,
        owner_id=payload.owner_id,
        month_ref=payload.month_ref,
        week_ref=payload.week_ref,
        target_amount=payload.target_amount,
        stretch_amount=payload.stretch_amount,
        daily_weights=payload.daily_weights,
        week=payload.week,
        year=payload.year,
    )
    return _goal_to_response(goal)


# ---------------------------------------------------------------------------
# GET /goals
# ---------------------------------------------------------------------------

@router.get("", response_model=GoalListResponse, summary="List goals for a store")
def list_goals(
    store_id: str = Query(..., min_length=1),
    owner_id: Optional[str] = Query(default=None),
    goal_type: Optional[GoalType] = Query(default=None),
    include_inactive: bool = Query(default=False),
    db: Session = Depends(get_db),
):
    goals = ledger.list_goals(
        db,
        store_id=store_id,
        owner_id=owner_id,
        goal_type=goal_type,
        include_inactive=include_inactive,
    )
    return GoalListResponse(total=len(goals), items=[_goal_to_response(g) for g in goals])


# ---------------------------------------------------------------------------
# /goals/{goal_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{goal_id}",
    response_model=GoalOut,
    summary="Get a goal",
    responses={404: {"model": ErrorResponse, "description": "Goal does not exist."}},
)
def get_goal(goal_id: int, db: Session = Depends(get_db)):
    return _goal_to_response(ledger.get_goal(db, goal_id))


@router.delete(
    "/{goal_id}",
    response_model=GoalOut,
    summary="Deactivate a goal",
    responses={404: {"model": ErrorResponse, "description": "Goal does not exist."}},
)
def delete_goal(goal_id: int, db: Session = Depends(get_db)):
    """Goals are never hard-deleted; a deactivated goal stops feeding progress reports."""
    return _goal_to_response(ledger.deactivate_goal(db, goal_id))


# ---------------------------------------------------------------------------
# POST /goals/daily-weights/preview
# ---------------------------------------------------------------------------

@router.post(
    "/daily-weights/preview",
    response_model=DailyWeightsPreviewResponse,
    summary="Generate a daily weight map from weekday factors",
)
def preview_daily_weights(payload: DailyWeightsPreviewRequest):
    """
    Turn relative weekday factors (e.g. Saturday counts double) into a
    `{"YYYY-MM-DD": percentage}` map for the month, normalised to sum to 100.
    Nothing is stored; send the result back as `daily_weights` on `POST /goals`.
    """
    weights = build_daily_weights(payload.year, payload.month, payload.weekday_factors)
    return DailyWeightsPreviewResponse(
        month_ref=f"{payload.year:04d}{payload.month:02d}",
        total=round(weights_total(weights, payload.year, payload.month), 6),
        daily_weights=weights,
    )
