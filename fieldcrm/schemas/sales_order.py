"""Pydantic schemas for sales orders."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import SalesOrderStatus
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary
from fieldcrm.schemas.line_item import LineItemIn, LineItemRead


class SalesOrderCreate(BaseModel):
    """
    Request to create a sales order.

    With ``quote_id`` and no ``items`` the quote's items are copied.
    ``account_id`` defaults to the quote's account.
    """
    account_id: UUID | None = None
    contact_id: UUID | None = None
    quote_id: UUID | None = None
    tax: Decimal = Field(Decimal("0"), ge=0)
    notes: str | None = None
    items: list[LineItemIn] | None = None


class SalesOrderUpdate(BaseModel):
    """Request to update a sales order (partial). ``items`` replaces the list."""
    status: str | None = None
    contact_id: UUID | None = None
    tax: Decimal | None = Field(None, ge=0)
    notes: str | None = None
    items: list[LineItemIn] | None = None


class SalesOrderRead(BaseModel):
    """Full sales order response."""
    id: UUID
    sales_order_number: str
    status: SalesOrderStatus
    account_id: UUID
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    quote_id: UUID | None
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    notes: str | None
    items: list[LineItemRead]
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SalesOrderListResponse(BaseModel):
    """Paginated sales order list."""
    items: list[SalesOrderRead]
    total: int
    page: int
    per_page: int
    pages: int
