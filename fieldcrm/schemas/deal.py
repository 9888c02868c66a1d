"""Pydantic schemas for deals."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import DealStage
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary


class DealCreate(BaseModel):
    """Request to create a deal."""
    name: str = Field(..., min_length=1, max_length=255)
    stage: DealStage = DealStage.PROSPECTING
    amount: Decimal | None = Field(None, ge=0)
    expected_close_date: date | None = None
    account_id: UUID | None = None
    contact_id: UUID | None = None


class DealUpdate(BaseModel):
    """
    Request to update a deal (partial).

    ``stage`` is validated by the workflow engine, not here, so an unknown
    stage yields an ``invalid_status`` error.
    """
    name: str | None = Field(None, min_length=1, max_length=255)
    stage: str | None = None
    amount: Decimal | None = Field(None, ge=0)
    expected_close_date: date | None = None
    account_id: UUID | None = None
    contact_id: UUID | None = None


class DealSummary(BaseModel):
    id: UUID
    name: str
    stage: str

    model_config = {"from_attributes": True}


class DealRead(BaseModel):
    """Full deal response."""
    id: UUID
    name: str
    stage: DealStage
    amount: Decimal | None
    expected_close_date: date | None
    account_id: UUID | None
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DealListResponse(BaseModel):
    """Paginated deal list."""
    items: list[DealRead]
    total: int
    page: int
    per_page: int
    pages: int
