"""Pydantic schemas for leads."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import LeadStatus
from fieldcrm.schemas.service_request import AssigneeSummary


class LeadCreate(BaseModel):
    """Request to create a lead. New leads start as NEW."""
    name: str = Field(..., min_length=1, max_length=255)
    company: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    source: str | None = Field(None, max_length=50)
    value: Decimal | None = Field(None, ge=0)
    notes: str | None = None
    assigned_to_user_id: UUID | None = None


class LeadUpdate(BaseModel):
    """
    Request to update a lead (partial).

    ``status`` goes through the workflow engine, so an unknown value yields
    ``invalid_status``.
    """
    name: str | None = Field(None, min_length=1, max_length=255)
    company: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    source: str | None = Field(None, max_length=50)
    status: str | None = None
    value: Decimal | None = Field(None, ge=0)
    notes: str | None = None
    assigned_to_user_id: UUID | None = None


class LeadRead(BaseModel):
    id: UUID
    name: str
    company: str | None
    position: str | None
    email: str | None
    phone: str | None
    source: str | None
    status: LeadStatus
    value: Decimal | None
    notes: str | None
    assigned_to_user_id: UUID | None
    assigned_to: AssigneeSummary | None = None
    created_by_user_id: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeadListResponse(BaseModel):
    """Paginated lead list."""
    items: list[LeadRead]
    total: int
    page: int
    per_page: int
    pages: int
