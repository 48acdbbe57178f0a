"""
Goal: sales targets configured by store admins.

goal_type values:
  "monthly"       target for a calendar month (`month_ref` = "YYYYMM"),
                  optionally split across days by `daily_weights`
  "weekly_bonus"  supplementary target for one week (`week_ref` = "WWYYYY");
                  entered directly, never derived

owner_id is NULL for a store-wide goal and set for an individual goal.
daily_weights: JSON-encoded {"YYYY-MM-DD": percentage} stored as Text.
"""
from datetime import datetime
from decimal import Decimal
import enum

from sqlalchemy import Boolean, Integer, String, Text, Numeric, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from storegoals.db.base import Base


class GoalType(str, enum.Enum):
    monthly = "monthly"
    weekly_bonus = "weekly_bonus"


class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    goal_type: Mapped[str] = mapped_column(
        Enum(GoalType, name="goal_type_enum"),
        nullable=False,
        default=GoalType.monthly,
    )
    store_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    month_ref: Mapped[str] = mapped_column(String(6), nullable=False, index=True)
    week_ref: Mapped[str | None] = mapped_column(String(6), nullable=True, index=True)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    stretch_amount: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    daily_weights: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment='JSON-encoded {"YYYY-MM-DD": percentage}',
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
