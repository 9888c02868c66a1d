"""Inventory service - stocked items and the serial numbers tracked against them."""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import AlreadyExistsError, NotFoundError
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.db.models import Item, SerialNumber
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.inventory import ItemCreate, SerialNumberCreate
from fieldcrm.services import reference_service
from fieldcrm.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)


# =============================================================================
# Items
# =============================================================================

def list_items(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    category: str | None = None,
) -> tuple[list[Item], int]:
    """Active items, ordered by name."""
    query = db.query(Item).filter(
        Item.organization_id == org_id,
        Item.is_active.is_(True),
    )
    if category:
        query = query.filter(Item.category == category)
    query = query.order_by(Item.name, Item.item_code)
    return paginate_query(query, pagination)


def serial_counts(db: Session, org_id: UUID, item_ids: list[UUID]) -> dict[UUID, int]:
    """Number of serial numbers per item id (items without any are omitted)."""
    if not item_ids:
        return {}
    rows = (
        db.query(SerialNumber.item_id, func.count(SerialNumber.id))
        .filter(
            SerialNumber.organization_id == org_id,
            SerialNumber.item_id.in_(item_ids),
        )
        .group_by(SerialNumber.item_id)
        .all()
    )
    return {item_id: count for item_id, count in rows}


def get_item(db: Session, org_id: UUID, item_id: UUID) -> Item:
    item = db.query(Item).filter(
        Item.id == item_id,
        Item.organization_id == org_id,
    ).first()
    if item is None:
        raise NotFoundError(resource="Item", resource_id=item_id)
    return item


def _item_code_taken(db: Session, org_id: UUID, item_code: str) -> bool:
    return db.query(Item.id).filter(
        Item.organization_id == org_id,
        Item.item_code == item_code,
    ).first() is not None


def create_item(db: Session, session: UserSession, data: ItemCreate) -> Item:
    """
    Create an item.

    Raises:
        AlreadyExistsError: the item code is already used in the organization
    """
    item_code = data.item_code.strip()
    if _item_code_taken(db, session.org_id, item_code):
        raise AlreadyExistsError(resource="Item", field="item_code", value=item_code)

    item = Item(organization_id=session.org_id, **data.model_dump(exclude={"item_code"}))
    item.item_code = item_code
    db.add(item)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same code
        db.rollback()
        raise AlreadyExistsError(resource="Item", field="item_code", value=item_code)
    db.refresh(item)
    logger.info(
        "item_created",
        extra=build_log_context(org_id=str(session.org_id), entity="item", entity_id=str(item.id)),
    )
    return item


# =============================================================================
# Serial numbers
# =============================================================================

def list_serial_numbers(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    item_id: UUID | None = None,
    status: str | None = None,
) -> tuple[list[SerialNumber], int]:
    """Serial numbers, newest first."""
    query = db.query(SerialNumber).filter(SerialNumber.organization_id == org_id)
    if item_id:
        query = query.filter(SerialNumber.item_id == item_id)
    if status:
        query = query.filter(SerialNumber.status == status)
    query = query.order_by(SerialNumber.created_at.desc(), SerialNumber.serial_number)
    return paginate_query(query, pagination)


def create_serial_number(db: Session, session: UserSession, data: SerialNumberCreate) -> SerialNumber:
    """
    Register a serial number against an item of the same organization.

    Raises:
        ReferentialIntegrityError: the item is unknown in this organization
        AlreadyExistsError: the serial number is already registered
    """
    reference_service.require_item(db, session.org_id, data.item_id)
    serial = data.serial_number.strip()
    taken = db.query(SerialNumber.id).filter(
        SerialNumber.organization_id == session.org_id,
        SerialNumber.serial_number == serial,
    ).first()
    if taken is not None:
        raise AlreadyExistsError(resource="Serial number", field="serial_number", value=serial)

    record = SerialNumber(
        organization_id=session.org_id,
        item_id=data.item_id,
        serial_number=serial,
        status=data.status.value,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExistsError(resource="Serial number", field="serial_number", value=serial)
    db.refresh(record)
    return record
