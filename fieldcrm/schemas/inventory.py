"""Pydantic schemas for inventory items and serial numbers."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import SerialNumberStatus, StockStatus


class ItemCreate(BaseModel):
    """Request to create an item. ``item_code`` must be unused in the organization."""
    item_code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    unit: str = Field("Unit", min_length=1, max_length=20)
    selling_price: Decimal = Field(..., ge=0)
    cost_price: Decimal | None = Field(None, ge=0)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    stock_on_hand: int = Field(0, ge=0)
    reorder_level: int | None = Field(None, ge=0)
    track_serial_number: bool = False


class ItemRead(BaseModel):
    id: UUID
    item_code: str
    name: str
    category: str | None
    description: str | None
    unit: str
    selling_price: Decimal
    cost_price: Decimal | None
    tax_rate: Decimal
    stock_on_hand: int
    reorder_level: int | None
    stock_status: StockStatus
    track_serial_number: bool
    is_active: bool
    serial_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ItemListResponse(BaseModel):
    """Paginated item list."""
    items: list[ItemRead]
    total: int
    page: int
    per_page: int
    pages: int


class SerialNumberCreate(BaseModel):
    item_id: UUID
    serial_number: str = Field(..., min_length=1, max_length=100)
    status: SerialNumberStatus = SerialNumberStatus.AVAILABLE


class ItemSummary(BaseModel):
    id: UUID
    item_code: str
    name: str

    model_config = {"from_attributes": True}


class SerialNumberRead(BaseModel):
    id: UUID
    item_id: UUID
    item: ItemSummary
    serial_number: str
    status: SerialNumberStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class SerialNumberListResponse(BaseModel):
    """Paginated serial number list."""
    items: list[SerialNumberRead]
    total: int
    page: int
    per_page: int
    pages: int
