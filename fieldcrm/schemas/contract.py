"""Pydantic schemas for contracts."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import ContractStatus
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary


class ContractCreate(BaseModel):
    """Request to create a contract. The contract number is generated."""
    name: str = Field(..., min_length=1, max_length=255)
    contract_type: str | None = Field(None, max_length=50)
    account_id: UUID
    contact_id: UUID | None = None
    deal_id: UUID | None = None
    effective_date: date | None = None
    end_date: date | None = None
    value: Decimal | None = Field(None, ge=0)
    terms: str | None = None


class ContractUpdate(BaseModel):
    """Request to update a contract (partial)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    contract_type: str | None = Field(None, max_length=50)
    status: str | None = None
    contact_id: UUID | None = None
    deal_id: UUID | None = None
    effective_date: date | None = None
    end_date: date | None = None
    value: Decimal | None = Field(None, ge=0)
    terms: str | None = None


class ContractRead(BaseModel):
    """Full contract response."""
    id: UUID
    contract_number: str
    name: str
    contract_type: str | None
    status: ContractStatus
    account_id: UUID
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    deal_id: UUID | None
    effective_date: date | None
    end_date: date | None
    value: Decimal | None
    terms: str | None
    renewal_reminder_sent_at: datetime | None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ContractListResponse(BaseModel):
    """Paginated contract list."""
    items: list[ContractRead]
    total: int
    page: int
    per_page: int
    pages: int


class RenewalReminderResponse(BaseModel):
    contracts_checked: int
    reminders_sent: int
    skipped_no_phone: int
