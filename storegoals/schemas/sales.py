from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field


class SaleCreate(BaseModel):
    store_id: Annotated[str, Field(min_length=1, max_length=64)]
    owner_id: Optional[str] = Field(default=None, max_length=64)
    amount: Decimal = Field(ge=0, examples=["349.90"])
    occurred_at: datetime = Field(
        description="When the sale happened. Timezone-aware values are bucketed by store-local day.",
        examples=["2025-10-14T15:32:00-03:00"],
    )


class SaleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: str
    owner_id: Optional[str]
    amount: str
    occurred_at: str
    day: str


class SaleListResponse(BaseModel):
    total: int
    total_amount: str
    items: list[SaleOut]

