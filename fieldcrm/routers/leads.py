"""Leads router - prospects before they become accounts and deals."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.db.enums import LeadStatus, Role
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.lead import LeadCreate, LeadListResponse, LeadRead, LeadUpdate
from fieldcrm.services import lead_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=LeadListResponse)
def list_leads(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: LeadStatus | None = None,
    source: str | None = None,
    assigned_to_user_id: UUID | None = None,
    q: str | None = Query(None, description="Search in name, company and email"),
):
    items, total = lead_service.list_leads(
        db, session.org_id, pagination,
        status=status.value if status else None,
        source=source,
        assigned_to_user_id=assigned_to_user_id,
        q=q,
    )
    return LeadListResponse(
        items=[LeadRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=LeadRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_lead(
    data: LeadCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return LeadRead.model_validate(lead_service.create_lead(db, session, data))


@router.get("/{lead_id}", response_model=LeadRead)
def get_lead(
    lead_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return LeadRead.model_validate(lead_service.get_lead(db, session.org_id, lead_id))


@router.patch(
    "/{lead_id}",
    response_model=LeadRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_lead(
    lead_id: UUID,
    data: LeadUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Update a lead. Status changes are recorded in the activity log."""
    return LeadRead.model_validate(lead_service.update_lead(db, session, lead_id, data))


@router.delete(
    "/{lead_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_lead(
    lead_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    lead_service.delete_lead(db, session, lead_id)
    return Response(status_code=204)


@router.get("/{lead_id}/activities", response_model=ActivityListResponse)
def list_lead_activities(
    lead_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = lead_service.list_lead_activity(db, session.org_id, lead_id)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{lead_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_lead_comment(
    lead_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = lead_service.add_lead_comment(db, session, lead_id, data.body)
    return ActivityRead.model_validate(entry)
