"""Inventory router - items and serial numbers."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db, require_csrf_header
from fieldcrm.db.enums import SerialNumberStatus
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.inventory import (
    ItemCreate,
    ItemListResponse,
    ItemRead,
    SerialNumberCreate,
    SerialNumberListResponse,
    SerialNumberRead,
)
from fieldcrm.services import inventory_service
from fieldcrm.utils.pagination import PaginationParams, get_pagination

router = APIRouter()


def _item_read(item, serial_count: int = 0) -> ItemRead:
    return ItemRead.model_validate(item).model_copy(update={"serial_count": serial_count})


@router.get("/items", response_model=ItemListResponse)
def list_items(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    category: str | None = None,
):
    """Active items ordered by name, optionally restricted to one category."""
    items, total = inventory_service.list_items(db, session.org_id, pagination, category=category)
    counts = inventory_service.serial_counts(db, session.org_id, [item.id for item in items])
    return ItemListResponse(
        items=[_item_read(item, counts.get(item.id, 0)) for item in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "/items",
    response_model=ItemRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_item(
    data: ItemCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return _item_read(inventory_service.create_item(db, session, data))


@router.get("/items/{item_id}", response_model=ItemRead)
def get_item(
    item_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    item = inventory_service.get_item(db, session.org_id, item_id)
    counts = inventory_service.serial_counts(db, session.org_id, [item.id])
    return _item_read(item, counts.get(item.id, 0))


@router.get("/serial-numbers", response_model=SerialNumberListResponse)
def list_serial_numbers(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    pagination: PaginationParams = Depends(get_pagination),
    item_id: UUID | None = None,
    status: SerialNumberStatus | None = None,
):
    records, total = inventory_service.list_serial_numbers(
        db, session.org_id, pagination,
        item_id=item_id, status=status.value if status else None,
    )
    return SerialNumberListResponse(
        items=[SerialNumberRead.model_validate(r) for r in records],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages(total),
    )


@router.post(
    "/serial-numbers",
    response_model=SerialNumberRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_serial_number(
    data: SerialNumberCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return SerialNumberRead.model_validate(
        inventory_service.create_serial_number(db, session, data)
    )
