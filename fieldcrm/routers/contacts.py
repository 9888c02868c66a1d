"""Contacts router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.db.enums import Role
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.contact import ContactCreate, ContactListResponse, ContactRead, ContactUpdate
from fieldcrm.services import contact_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=ContactListResponse)
def list_contacts(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    q: str | None = Query(None, description="Search in name and email"),
    account_id: UUID | None = None,
):
    items, total = contact_service.list_contacts(
        db, session.org_id, pagination, q=q, account_id=account_id
    )
    return ContactListResponse(
        items=[ContactRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=ContactRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_contact(
    data: ContactCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return ContactRead.model_validate(contact_service.create_contact(db, session, data))


@router.get("/{contact_id}", response_model=ContactRead)
def get_contact(
    contact_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return ContactRead.model_validate(contact_service.get_contact(db, session.org_id, contact_id))


@router.patch(
    "/{contact_id}",
    response_model=ContactRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_contact(
    contact_id: UUID,
    data: ContactUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return ContactRead.model_validate(contact_service.update_contact(db, session, contact_id, data))


@router.delete(
    "/{contact_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_contact(
    contact_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    contact_service.delete_contact(db, session, contact_id)
    return Response(status_code=204)
