"""Pydantic schemas for accounts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import AccountType


class AccountCreate(BaseModel):
    """Request to create an account."""
    name: str = Field(..., min_length=1, max_length=255)
    account_type: AccountType = AccountType.PROSPECT
    industry: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)


class AccountUpdate(BaseModel):
    """Request to update an account (partial)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    account_type: AccountType | None = None
    industry: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)


class AccountSummary(BaseModel):
    """Account reference embedded in other responses."""
    id: UUID
    name: str
    phone: str | None = None

    model_config = {"from_attributes": True}


class AccountRead(BaseModel):
    """Full account response."""
    id: UUID
    name: str
    account_type: AccountType
    industry: str | None
    phone: str | None
    email: str | None
    city: str | None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountListResponse(BaseModel):
    """Paginated account list."""
    items: list[AccountRead]
    total: int
    page: int
    per_page: int
    pages: int
