"""Quote service - priced offers with line items."""

from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.document_types import QUOTE
from fieldcrm.db.enums import QuoteStatus
from fieldcrm.db.models import Quote, QuoteItem
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.line_item import LineItemIn
from fieldcrm.schemas.quote import QuoteCreate, QuoteUpdate
from fieldcrm.services import document_service, notification_service, reference_service
from fieldcrm.utils.pagination import PaginationParams
from fieldcrm.utils.pricing import document_totals, line_total, money


def build_items(item_model: type, items: Iterable[LineItemIn]) -> list:
    """Line item rows in payload order, each with its computed total."""
    return [
        item_model(
            position=position,
            description=item.description,
            quantity=money(item.quantity),
            unit_price=money(item.unit_price),
            discount=money(item.discount),
            total=line_total(item.quantity, item.unit_price, item.discount),
        )
        for position, item in enumerate(items, start=1)
    ]


def _apply_totals(quote: Quote) -> None:
    totals = document_totals(quote.items)
    quote.subtotal = totals.subtotal
    quote.discount = totals.discount
    quote.total = totals.total


def create_quote(
    db: Session,
    session: UserSession,
    data: QuoteCreate,
    now: datetime | None = None,
) -> Quote:
    reference_service.check_references(
        db, session.org_id, data.model_dump(include={"account_id", "contact_id", "deal_id"})
    )

    def build(code: str) -> Quote:
        quote = Quote(
            quote_number=code,
            status=QUOTE.workflow.initial.value,
            account_id=data.account_id,
            contact_id=data.contact_id,
            deal_id=data.deal_id,
            valid_until=data.valid_until,
            notes=data.notes,
            items=build_items(QuoteItem, data.items),
        )
        _apply_totals(quote)
        return quote

    return document_service.create_document(db, session, QUOTE, build, now=now)


def get_quote(db: Session, org_id: UUID, quote_id: UUID) -> Quote:
    return document_service.require_document(db, org_id, QUOTE, quote_id)


def list_quotes(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    account_id: UUID | None = None,
    deal_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[Quote], int]:
    return document_service.list_documents(
        db, org_id, QUOTE, pagination,
        status=status,
        q=q,
        filters={"account_id": account_id, "deal_id": deal_id},
    )


def update_quote(
    db: Session,
    session: UserSession,
    quote_id: UUID,
    data: QuoteUpdate,
) -> Quote:
    """Partial update. Replacing items recomputes totals; entering SENT notifies the customer."""
    quote = get_quote(db, session.org_id, quote_id)
    values = data.model_dump(exclude_unset=True, exclude={"items"})
    new_status = values.pop("status", None)
    if new_status is not None:
        document_service.check_status(QUOTE, quote, new_status)

    reference_service.check_references(db, session.org_id, values)
    document_service.apply_changes(quote, values)

    if data.items is not None:
        quote.items = build_items(QuoteItem, data.items)
        _apply_totals(quote)

    change = None
    if new_status is not None:
        change = document_service.change_status(db, session, QUOTE, quote, new_status)

    db.commit()
    db.refresh(quote)

    if change is not None and change.changed and change.new == QuoteStatus.SENT.value:
        notification_service.notify_quote_sent(db, quote)
    return quote


def delete_quote(db: Session, session: UserSession, quote_id: UUID) -> None:
    document_service.delete_document(db, session, QUOTE, quote_id)
