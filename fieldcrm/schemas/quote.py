"""Pydantic schemas for quotes."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import QuoteStatus
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary
from fieldcrm.schemas.line_item import LineItemIn, LineItemRead


class QuoteCreate(BaseModel):
    """Request to create a quote. Number and totals are computed."""
    account_id: UUID
    contact_id: UUID | None = None
    deal_id: UUID | None = None
    valid_until: date | None = None
    notes: str | None = None
    items: list[LineItemIn] = Field(default_factory=list)


class QuoteUpdate(BaseModel):
    """
    Request to update a quote (partial).

    ``items``, when present, replaces the whole item list.
    """
    status: str | None = None
    contact_id: UUID | None = None
    deal_id: UUID | None = None
    valid_until: date | None = None
    notes: str | None = None
    items: list[LineItemIn] | None = None


class QuoteRead(BaseModel):
    """Full quote response."""
    id: UUID
    quote_number: str
    status: QuoteStatus
    account_id: UUID
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    deal_id: UUID | None
    valid_until: date | None
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    notes: str | None
    items: list[LineItemRead]
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class QuoteListResponse(BaseModel):
    """Paginated quote list."""
    items: list[QuoteRead]
    total: int
    page: int
    per_page: int
    pages: int
