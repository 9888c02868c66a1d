"""Pydantic schemas for contacts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.schemas.account import AccountSummary


class ContactCreate(BaseModel):
    """Request to create a contact."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    account_id: UUID | None = None


class ContactUpdate(BaseModel):
    """Request to update a contact (partial)."""
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    account_id: UUID | None = None


class ContactSummary(BaseModel):
    """Contact reference embedded in other responses."""
    id: UUID
    full_name: str
    phone: str | None = None
    email: str | None = None

    model_config = {"from_attributes": True}


class ContactRead(BaseModel):
    """Full contact response."""
    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: str | None
    phone: str | None
    account_id: UUID | None
    account: AccountSummary | None = None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ContactListResponse(BaseModel):
    """Paginated contact list."""
    items: list[ContactRead]
    total: int
    page: int
    per_page: int
    pages: int
