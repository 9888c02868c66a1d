"""Sales orders router."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from fieldcrm.core.document_types import SALES_ORDER
from fieldcrm.db.enums import Role
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead, CommentCreate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.sales_order import (
    SalesOrderCreate,
    SalesOrderListResponse,
    SalesOrderRead,
    SalesOrderUpdate,
)
from fieldcrm.services import document_service, sales_order_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


@router.get("", response_model=SalesOrderListResponse)
def list_sales_orders(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    status: str | None = None,
    account_id: UUID | None = None,
    quote_id: UUID | None = None,
    q: str | None = Query(None, description="Search in order number and notes"),
):
    items, total = sales_order_service.list_sales_orders(
        db, session.org_id, pagination,
        status=status, account_id=account_id, quote_id=quote_id, q=q,
    )
    return SalesOrderListResponse(
        items=[SalesOrderRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "",
    response_model=SalesOrderRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_sales_order(
    data: SalesOrderCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Create a sales order, optionally converting a quote."""
    return SalesOrderRead.model_validate(sales_order_service.create_sales_order(db, session, data))


@router.get("/{sales_order_id}", response_model=SalesOrderRead)
def get_sales_order(
    sales_order_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = sales_order_service.get_sales_order(db, session.org_id, sales_order_id)
    return SalesOrderRead.model_validate(record)


@router.patch(
    "/{sales_order_id}",
    response_model=SalesOrderRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_sales_order(
    sales_order_id: UUID,
    data: SalesOrderUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    record = sales_order_service.update_sales_order(db, session, sales_order_id, data)
    return SalesOrderRead.model_validate(record)


@router.delete(
    "/{sales_order_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_sales_order(
    sales_order_id: UUID,
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    sales_order_service.delete_sales_order(db, session, sales_order_id)
    return Response(status_code=204)


@router.get("/{sales_order_id}/activities", response_model=ActivityListResponse)
def list_sales_order_activities(
    sales_order_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entries = document_service.list_document_activity(db, session.org_id, SALES_ORDER, sales_order_id)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])


@router.post(
    "/{sales_order_id}/comments",
    response_model=ActivityRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_sales_order_comment(
    sales_order_id: UUID,
    data: CommentCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    entry = document_service.add_comment(db, session, SALES_ORDER, sales_order_id, data.body)
    return ActivityRead.model_validate(entry)
