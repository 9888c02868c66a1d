"""Line item schemas shared by quotes and sales orders."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class LineItemIn(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)


class LineItemRead(BaseModel):
    id: UUID
    position: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal
    total: Decimal

    model_config = {"from_attributes": True}
