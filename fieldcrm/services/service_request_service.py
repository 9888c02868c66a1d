"""Service request service - ticket CRUD, status workflow and customer updates."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.document_types import SERVICE_REQUEST
from fieldcrm.db.enums import ServiceRequestStatus
from fieldcrm.db.models import ServiceRequest, utcnow
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.service_request import ServiceRequestCreate, ServiceRequestUpdate
from fieldcrm.services import document_service, notification_service, reference_service
from fieldcrm.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)


def create_service_request(
    db: Session,
    session: UserSession,
    data: ServiceRequestCreate,
    now: datetime | None = None,
) -> ServiceRequest:
    """Open a ticket; the number is SR-<today>-<NNNN> for the caller's organization."""
    reference_service.check_references(
        db,
        session.org_id,
        data.model_dump(include={"account_id", "contact_id", "assigned_to_user_id"}),
    )

    def build(code: str) -> ServiceRequest:
        return ServiceRequest(
            ticket_number=code,
            title=data.title,
            description=data.description,
            priority=data.priority.value,
            status=SERVICE_REQUEST.workflow.initial.value,
            account_id=data.account_id,
            contact_id=data.contact_id,
            assigned_to_user_id=data.assigned_to_user_id,
        )

    return document_service.create_document(
        db,
        session,
        SERVICE_REQUEST,
        build,
        now=now,
        description=f'Service request "{data.title}" was created',
    )


def get_service_request(db: Session, org_id: UUID, service_request_id: UUID) -> ServiceRequest:
    return document_service.require_document(db, org_id, SERVICE_REQUEST, service_request_id)


def list_service_requests(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    priority: str | None = None,
    account_id: UUID | None = None,
    contact_id: UUID | None = None,
    assigned_to_user_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[ServiceRequest], int]:
    return document_service.list_documents(
        db,
        org_id,
        SERVICE_REQUEST,
        pagination,
        status=status,
        q=q,
        filters={
            "priority": priority,
            "account_id": account_id,
            "contact_id": contact_id,
            "assigned_to_user_id": assigned_to_user_id,
        },
    )


def update_service_request(
    db: Session,
    session: UserSession,
    service_request_id: UUID,
    data: ServiceRequestUpdate,
) -> ServiceRequest:
    """
    Apply a partial update.

    A status change is logged with the field updates in one commit; entering
    RESOLVED stamps resolved_at. The linked contact is notified afterwards.
    """
    record = get_service_request(db, session.org_id, service_request_id)
    values = data.model_dump(exclude_unset=True)
    new_status = values.pop("status", None)
    if new_status is not None:
        document_service.check_status(SERVICE_REQUEST, record, new_status)

    reference_service.check_references(db, session.org_id, values)
    document_service.apply_changes(record, values)

    change = None
    if new_status is not None:
        change = document_service.change_status(db, session, SERVICE_REQUEST, record, new_status)
        if change.changed and change.new == ServiceRequestStatus.RESOLVED.value:
            record.resolved_at = utcnow()

    db.commit()
    db.refresh(record)

    if change is not None and change.changed:
        notification_service.notify_service_request_status(db, record)
    return record


def delete_service_request(db: Session, session: UserSession, service_request_id: UUID) -> None:
    document_service.delete_document(db, session, SERVICE_REQUEST, service_request_id)
