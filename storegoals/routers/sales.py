"""
Sales router.

POST /sales   record a sale
GET  /sales   list a store's sales in a date range
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storegoals.db.base import get_db
from storegoals.models.sale import Sale
from storegoals.schemas.sales import SaleCreate, SaleListResponse, SaleOut
from storegoals.services import ledger

router = APIRouter(prefix="/sales", tags=["sales"])


def _sale_to_response(sale: Sale) -> SaleOut:
    return SaleOut(
        id=sale.id,
        store_id=sale.store_id,
        owner_id=sale.owner_id,
        amount=str(sale.amount),
        occurred_at=sale.occurred_at.isoformat(),
        day=str(sale.day),
    )


@router.post(
    "",
    response_model=SaleOut,
    status_code=status.HTTP_201_CREATED,
    summary="Record a sale",
)
def create_sale(payload: SaleCreate, db: Session = Depends(get_db)):
    sale = ledger.record_sale(
        db,
        store_id=payload.store_id,
        owner_id=payload.owner_id,
        amount=payload.amount,
        occurred_at=payload.occurred_at,
    )
    return _sale_to_response(sale)


@router.get("", response_model=SaleListResponse, summary="List sales in a date range")
def list_sales(
    store_id: str = Query(..., min_length=1),
    start: date = Query(..., description="First day (inclusive).", examples=["2025-10-13"]),
    end: date = Query(..., description="Last day (inclusive).", examples=["2025-10-19"]),
    owner_id: Optional[str] = Query(default=None, description="Omit for every collaborator of the store."),
    db: Session = Depends(get_db),
):
    sales = ledger.list_sales(db, store_id=store_id, owner_id=owner_id, start=start, end=end)
    total_amount = sum((Decimal(s.amount) for s in sales), Decimal("0"))
    return SaleListResponse(
        total=len(sales),
        total_amount=str(total_amount),
        items=[_sale_to_response(s) for s in sales],
    )
