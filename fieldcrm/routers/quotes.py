"""Quotes router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.core.document_types import QUOTE
from fieldcrm.db.enums import Role
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.quote import QuoteCreate, QuoteListResponse, QuoteRead, QuoteUpdate
from fieldcrm.services import document_service, quote_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=QuoteListResponse)
def list_quotes(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: str | None = None,
    account_id: UUID | None = None,
    deal_id: UUID | None = None,
    q: str | None = Query(None, description="Search in quote number and notes"),
):
    items, total = quote_service.list_quotes(
        db, session.org_id, pagination,
        status=status, account_id=account_id, deal_id=deal_id, q=q,
    )
    return QuoteListResponse(
        items=[QuoteRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=QuoteRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_quote(
    data: QuoteCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Create a quote. Line totals and document totals are computed server-side."""
    return QuoteRead.model_validate(quote_service.create_quote(db, session, data))


@router.get("/{quote_id}", response_model=QuoteRead)
def get_quote(
    quote_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return QuoteRead.model_validate(quote_service.get_quote(db, session.org_id, quote_id))


@router.patch(
    "/{quote_id}",
    response_model=QuoteRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_quote(
    quote_id: UUID,
    data: QuoteUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return QuoteRead.model_validate(quote_service.update_quote(db, session, quote_id, data))


@router.delete(
    "/{quote_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_quote(
    quote_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    quote_service.delete_quote(db, session, quote_id)
    return Response(status_code=204)


@router.get("/{quote_id}/activities", response_model=ActivityListResponse)
def list_quote_activities(
    quote_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = document_service.list_document_activity(db, session.org_id, QUOTE, quote_id)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{quote_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_quote_comment(
    quote_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = document_service.add_comment(db, session, QUOTE, quote_id, data.body)
    return ActivityRead.model_validate(entry)
