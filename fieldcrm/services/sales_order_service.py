"""Sales order service - confirmed orders, optionally converted from a quote."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.document_types import SALES_ORDER
from fieldcrm.core.exceptions import ReferentialIntegrityError
from fieldcrm.db.models import SalesOrder, SalesOrderItem
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.line_item import LineItemIn
from fieldcrm.schemas.sales_order import SalesOrderCreate, SalesOrderUpdate
from fieldcrm.services import document_service, reference_service
from fieldcrm.services.quote_service import build_items
from fieldcrm.utils.pagination import PaginationParams
from fieldcrm.utils.pricing import document_totals


def _apply_totals(order: SalesOrder) -> None:
    totals = document_totals(order.items, tax=order.tax)
    order.subtotal = totals.subtotal
    order.discount = totals.discount
    order.tax = totals.tax
    order.total = totals.total


def create_sales_order(
    db: Session,
    session: UserSession,
    data: SalesOrderCreate,
    now: datetime | None = None,
) -> SalesOrder:
    """
    Create a sales order.

    With a source quote, the account, contact and items default to the
    quote's.
    """
    account_id = data.account_id
    contact_id = data.contact_id
    items = data.items
    if data.quote_id is not None:
        quote = reference_service.require_quote(db, session.org_id, data.quote_id)
        account_id = account_id or quote.account_id
        contact_id = contact_id or quote.contact_id
        if items is None:
            items = [
                LineItemIn(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                )
                for item in quote.items
            ]
    if account_id is None:
        raise ReferentialIntegrityError(field="account_id", value=None)

    reference_service.check_references(
        db, session.org_id, {"account_id": account_id, "contact_id": contact_id}
    )

    def build(code: str) -> SalesOrder:
        order = SalesOrder(
            sales_order_number=code,
            status=SALES_ORDER.workflow.initial.value,
            account_id=account_id,
            contact_id=contact_id,
            quote_id=data.quote_id,
            tax=data.tax,
            notes=data.notes,
            items=build_items(SalesOrderItem, items or []),
        )
        _apply_totals(order)
        return order

    return document_service.create_document(db, session, SALES_ORDER, build, now=now)


def get_sales_order(db: Session, org_id: UUID, sales_order_id: UUID) -> SalesOrder:
    return document_service.require_document(db, org_id, SALES_ORDER, sales_order_id)


def list_sales_orders(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    account_id: UUID | None = None,
    quote_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[SalesOrder], int]:
    return document_service.list_documents(
        db, org_id, SALES_ORDER, pagination,
        status=status,
        q=q,
        filters={"account_id": account_id, "quote_id": quote_id},
    )


def update_sales_order(
    db: Session,
    session: UserSession,
    sales_order_id: UUID,
    data: SalesOrderUpdate,
) -> SalesOrder:
    order = get_sales_order(db, session.org_id, sales_order_id)
    values = data.model_dump(exclude_unset=True, exclude={"items"})
    new_status = values.pop("status", None)
    if new_status is not None:
        document_service.check_status(SALES_ORDER, order, new_status)
    if "tax" in values and values["tax"] is None:
        values.pop("tax")

    reference_service.check_references(db, session.org_id, values)
    document_service.apply_changes(order, values)

    if data.items is not None:
        order.items = build_items(SalesOrderItem, data.items)
    if data.items is not None or "tax" in values:
        _apply_totals(order)

    if new_status is not None:
        document_service.change_status(db, session, SALES_ORDER, order, new_status)

    db.commit()
    db.refresh(order)
    return order


def delete_sales_order(db: Session, session: UserSession, sales_order_id: UUID) -> None:
    document_service.delete_document(db, session, SALES_ORDER, sales_order_id)
