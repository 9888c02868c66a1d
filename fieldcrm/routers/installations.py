"""Installations router - work order endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.core.document_types import INSTALLATION
from fieldcrm.db.enums import Role
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.installation import (
    InstallationCreate,
    InstallationListResponse,
    InstallationRead,
    InstallationUpdate,
)
from fieldcrm.services import document_service, installation_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=InstallationListResponse)
def list_installations(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: str | None = None,
    account_id: UUID | None = None,
    sales_order_id: UUID | None = None,
    q: str | None = Query(None, description="Search in work order number and notes"),
):
    items, total = installation_service.list_installations(
        db, session.org_id, pagination,
        status=status, account_id=account_id, sales_order_id=sales_order_id, q=q,
    )
    return InstallationListResponse(
        items=[InstallationRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=InstallationRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_installation(
    data: InstallationCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Create a work order in PLANNING."""
    record = installation_service.create_installation(db, session, data)
    return InstallationRead.model_validate(record)


@router.get("/{installation_id}", response_model=InstallationRead)
def get_installation(
    installation_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = installation_service.get_installation(db, session.org_id, installation_id)
    return InstallationRead.model_validate(record)


@router.patch(
    "/{installation_id}",
    response_model=InstallationRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_installation(
    installation_id: UUID,
    data: InstallationUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = installation_service.update_installation(db, session, installation_id, data)
    return InstallationRead.model_validate(record)


@router.delete(
    "/{installation_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_installation(
    installation_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    installation_service.delete_installation(db, session, installation_id)
    return Response(status_code=204)


@router.get("/{installation_id}/activities", response_model=ActivityListResponse)
def list_installation_activities(
    installation_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = document_service.list_document_activity(db, session.org_id, INSTALLATION, installation_id)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{installation_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_installation_comment(
    installation_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = document_service.add_comment(db, session, INSTALLATION, installation_id, data.body)
    return ActivityRead.model_validate(entry)
