"""Accounts router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.db.enums import AccountType, Role
from fieldcrm.schemas.account import AccountCreate, AccountListResponse, AccountRead, AccountUpdate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.services import account_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=AccountListResponse)
def list_accounts(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    q: str | None = Query(None, description="Search in account name"),
    account_type: AccountType | None = None,
):
    items, total = account_service.list_accounts(
        db, session.org_id, pagination,
        q=q, account_type=account_type.value if account_type else None,
    )
    return AccountListResponse(
        items=[AccountRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=AccountRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_account(
    data: AccountCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return AccountRead.model_validate(account_service.create_account(db, session, data))


@router.get("/{account_id}", response_model=AccountRead)
def get_account(
    account_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return AccountRead.model_validate(account_service.get_account(db, session.org_id, account_id))


@router.patch(
    "/{account_id}",
    response_model=AccountRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_account(
    account_id: UUID,
    data: AccountUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return AccountRead.model_validate(account_service.update_account(db, session, account_id, data))


@router.delete(
    "/{account_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_account(
    account_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    """Delete an account. Refused (409) while documents reference it."""
    account_service.delete_account(db, session, account_id)
    return Response(status_code=204)
