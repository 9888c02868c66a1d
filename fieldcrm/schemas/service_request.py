"""Pydantic schemas for service requests."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import ServiceRequestPriority, ServiceRequestStatus
from fieldcrm.schemas.account import AccountSummary
from fieldcrm.schemas.contact import ContactSummary


class ServiceRequestCreate(BaseModel):
    """Request to open a service request. The ticket number is generated."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    priority: ServiceRequestPriority = ServiceRequestPriority.MEDIUM
    account_id: UUID
    contact_id: UUID | None = None
    assigned_to_user_id: UUID | None = None


class ServiceRequestUpdate(BaseModel):
    """Request to update a service request (partial)."""
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    priority: ServiceRequestPriority | None = None
    status: str | None = None
    contact_id: UUID | None = None
    assigned_to_user_id: UUID | None = None


class AssigneeSummary(BaseModel):
    id: UUID
    display_name: str
    email: str

    model_config = {"from_attributes": True}


class ServiceRequestRead(BaseModel):
    """Full service request response."""
    id: UUID
    ticket_number: str
    title: str
    description: str | None
    priority: ServiceRequestPriority
    status: ServiceRequestStatus
    account_id: UUID
    account: AccountSummary | None = None
    contact_id: UUID | None
    contact: ContactSummary | None = None
    assigned_to_user_id: UUID | None
    assigned_to: AssigneeSummary | None = None
    created_by_user_id: UUID | None
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ServiceRequestListResponse(BaseModel):
    """Paginated service request list."""
    items: list[ServiceRequestRead]
    total: int
    page: int
    per_page: int
    pages: int
