"""initial schema: goals and sales

Revision ID: 0001
Revises:
Create Date: 2025-10-20 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    goal_type_enum = sa.Enum("monthly", "weekly_bonus", name="goal_type_enum")
    goal_type_enum.create(op.get_bind(), checkfirst=True)

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("goal_type", sa.Enum(
            "monthly", "weekly_bonus", name="goal_type_enum", create_type=False,
        ), nullable=False),
        sa.Column("store_id", sa.String(64), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("month_ref", sa.String(6), nullable=False),
        sa.Column("week_ref", sa.String(6), nullable=True),
        sa.Column("target_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("stretch_amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("daily_weights", sa.Text(), nullable=True,
                  comment='JSON-encoded {"YYYY-MM-DD": percentage}'),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_id", "goals", ["id"])
    op.create_index("ix_goals_store_id", "goals", ["store_id"])
    op.create_index("ix_goals_owner_id", "goals", ["owner_id"])
    op.create_index("ix_goals_month_ref", "goals", ["month_ref"])
    op.create_index("ix_goals_week_ref", "goals", ["week_ref"])

    # --- sales ---
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("store_id", sa.String(64), nullable=False),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_id", "sales", ["id"])
    op.create_index("ix_sales_store_id", "sales", ["store_id"])
    op.create_index("ix_sales_owner_id", "sales", ["owner_id"])
    op.create_index("ix_sales_day", "sales", ["day"])


def downgrade() -> None:
    op.drop_index("ix_sales_day", table_name="sales")
    op.drop_index("ix_sales_owner_id", table_name="sales")
    op.drop_index("ix_sales_store_id", table_name="sales")
    op.drop_index("ix_sales_id", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_goals_week_ref", table_name="goals")
    op.drop_index("ix_goals_month_ref", table_name="goals")
    op.drop_index("ix_goals_owner_id", table_name="goals")
    op.drop_index("ix_goals_store_id", table_name="goals")
    op.drop_index("ix_goals_id", table_name="goals")
    op.drop_table("goals")

    sa.Enum(name="goal_type_enum").drop(op.get_bind(), checkfirst=True)
