"""Contracts router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.core.document_types import CONTRACT
from fieldcrm.db.enums import Role
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.contract import (
    ContractCreate,
    ContractListResponse,
    ContractRead,
    ContractUpdate,
)
from fieldcrm.services import contract_service, document_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=ContractListResponse)
def list_contracts(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: str | None = None,
    account_id: UUID | None = None,
    deal_id: UUID | None = None,
    q: str | None = Query(None, description="Search in contract number and name"),
):
    items, total = contract_service.list_contracts(
        db, session.org_id, pagination,
        status=status, account_id=account_id, deal_id=deal_id, q=q,
    )
    return ContractListResponse(
        items=[ContractRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=ContractRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_contract(
    data: ContractCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = contract_service.create_contract(db, session, data)
    return ContractRead.model_validate(record)


@router.get("/{contract_id}", response_model=ContractRead)
def get_contract(
    contract_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return ContractRead.model_validate(contract_service.get_contract(db, session.org_id, contract_id))


@router.patch(
    "/{contract_id}",
    response_model=ContractRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_contract(
    contract_id: UUID,
    data: ContractUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = contract_service.update_contract(db, session, contract_id, data)
    return ContractRead.model_validate(record)


@router.delete(
    "/{contract_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_contract(
    contract_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    contract_service.delete_contract(db, session, contract_id)
    return Response(status_code=204)


@router.get("/{contract_id}/activities", response_model=ActivityListResponse)
def list_contract_activities(
    contract_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = document_service.list_document_activity(db, session.org_id, CONTRACT, contract_id)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{contract_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_contract_comment(
    contract_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = document_service.add_comment(db, session, CONTRACT, contract_id, data.body)
    return ActivityRead.model_validate(entry)
