"""Pydantic schemas for installations (work orders)."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import InstallationStatus
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary


class InstallationCreate(BaseModel):
    """Request to create a work order. The work order number is generated."""
    account_id: UUID
    contact_id: UUID | None = None
    sales_order_id: UUID | None = None
    dispatch_date: date | None = None
    engineer_team: list[str] = Field(default_factory=list)
    notes: str | None = None


class InstallationUpdate(BaseModel):
    """Request to update a work order (partial)."""
    status: str | None = None
    contact_id: UUID | None = None
    sales_order_id: UUID | None = None
    dispatch_date: date | None = None
    engineer_team: list[str] | None = None
    notes: str | None = None


class InstallationRead(BaseModel):
    """Full work order response."""
    id: UUID
    work_order_number: str
    status: InstallationStatus
    account_id: UUID
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    sales_order_id: UUID | None
    dispatch_date: date | None
    engineer_team: list[str]
    notes: str | None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class InstallationListResponse(BaseModel):
    """Paginated work order list."""
    items: list[InstallationRead]
    total: int
    page: int
    per_page: int
    pages: int
