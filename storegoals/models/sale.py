from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import Integer, String, Numeric, DateTime, Date, func
from sqlalchemy.orm import Mapped, mapped_column

from storegoals.db.base import Base


class Sale(Base):
    """Immutable sales fact. Progress reports only ever sum these."""
    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    store_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    owner_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
