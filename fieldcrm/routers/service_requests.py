"""Service requests router - ticket endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.core.document_types import SERVICE_REQUEST
from fieldcrm.db.enums import Role, ServiceRequestPriority
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.service_request import (
    ServiceRequestCreate,
    ServiceRequestListResponse,
    ServiceRequestRead,
    ServiceRequestUpdate,
)
from fieldcrm.services import document_service, service_request_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=ServiceRequestListResponse)
def list_service_requests(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: str | None = None,
    priority: ServiceRequestPriority | None = None,
    account_id: UUID | None = None,
    contact_id: UUID | None = None,
    assigned_to_user_id: UUID | None = None,
    q: str | None = Query(None, description="Search in ticket number and title"),
):
    """List service requests, newest first."""
    items, total = service_request_service.list_service_requests(
        db,
        session.org_id,
        pagination,
        status=status,
        priority=priority.value if priority else None,
        account_id=account_id,
        contact_id=contact_id,
        assigned_to_user_id=assigned_to_user_id,
        q=q,
    )
    return ServiceRequestListResponse(
        items=[ServiceRequestRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=ServiceRequestRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_service_request(
    data: ServiceRequestCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Open a service request. The ticket number is generated."""
    record = service_request_service.create_service_request(db, session, data)
    return ServiceRequestRead.model_validate(record)


@router.get("/{service_request_id}", response_model=ServiceRequestRead)
def get_service_request(
    service_request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = service_request_service.get_service_request(db, session.org_id, service_request_id)
    return ServiceRequestRead.model_validate(record)


@router.patch(
    "/{service_request_id}",
    response_model=ServiceRequestRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_service_request(
    service_request_id: UUID,
    data: ServiceRequestUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Update a service request. A status change is recorded in its activity log."""
    record = service_request_service.update_service_request(db, session, service_request_id, data)
    return ServiceRequestRead.model_validate(record)


@router.delete(
    "/{service_request_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_service_request(
    service_request_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    service_request_service.delete_service_request(db, session, service_request_id)
    return Response(status_code=204)


@router.get("/{service_request_id}/activities", response_model=ActivityListResponse)
def list_service_request_activities(
    service_request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = document_service.list_document_activity(
        db, session.org_id, SERVICE_REQUEST, service_request_id
    )
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{service_request_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_service_request_comment(
    service_request_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = document_service.add_comment(db, session, SERVICE_REQUEST, service_request_id, data.body)
    return ActivityRead.model_validate(entry)
