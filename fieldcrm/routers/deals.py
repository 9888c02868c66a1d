"""Deals router - sales pipeline."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.db.enums import DealStage, Role
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.deal import DealCreate, DealListResponse, DealRead, DealUpdate
from fieldcrm.services import deal_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=DealListResponse)
def list_deals(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    stage: DealStage | None = None,
    account_id: UUID | None = None,
    q: str | None = Query(None, description="Search in deal name"),
):
    items, total = deal_service.list_deals(
        db, session.org_id, pagination,
        stage=stage.value if stage else None, account_id=account_id, q=q,
    )
    return DealListResponse(
        items=[DealRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=DealRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_deal(
    data: DealCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return DealRead.model_validate(deal_service.create_deal(db, session, data))


@router.get("/{deal_id}", response_model=DealRead)
def get_deal(
    deal_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return DealRead.model_validate(deal_service.get_deal(db, session.org_id, deal_id))


@router.patch(
    "/{deal_id}",
    response_model=DealRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_deal(
    deal_id: UUID,
    data: DealUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Update a deal. Stage changes are recorded in the activity log."""
    return DealRead.model_validate(deal_service.update_deal(db, session, deal_id, data))


@router.delete(
    "/{deal_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_deal(
    deal_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    deal_service.delete_deal(db, session, deal_id)
    return Response(status_code=204)
