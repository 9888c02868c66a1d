"""Organization-scoped lookups for records referenced by other records."""

from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import ReferentialIntegrityError
from fieldcrm.db.models import Account, Contact, Deal, Item, Membership, Quote, SalesOrder


def _require(db: Session, model: type, org_id: UUID, record_id: UUID, field: str):
    record = db.query(model).filter(
        model.id == record_id,
        model.organization_id == org_id,
    ).first()
    if record is None:
        raise ReferentialIntegrityError(field=field, value=record_id)
    return record


def require_account(db: Session, org_id: UUID, account_id: UUID) -> Account:
    return _require(db, Account, org_id, account_id, "account_id")


def require_contact(db: Session, org_id: UUID, contact_id: UUID) -> Contact:
    return _require(db, Contact, org_id, contact_id, "contact_id")


def require_deal(db: Session, org_id: UUID, deal_id: UUID) -> Deal:
    return _require(db, Deal, org_id, deal_id, "deal_id")


def require_quote(db: Session, org_id: UUID, quote_id: UUID) -> Quote:
    return _require(db, Quote, org_id, quote_id, "quote_id")


def require_sales_order(db: Session, org_id: UUID, sales_order_id: UUID) -> SalesOrder:
    return _require(db, SalesOrder, org_id, sales_order_id, "sales_order_id")


def require_item(db: Session, org_id: UUID, item_id: UUID) -> Item:
    return _require(db, Item, org_id, item_id, "item_id")


def require_member(db: Session, org_id: UUID, user_id: UUID, field: str = "assigned_to_user_id") -> Membership:
    """The user must be a member of the organization."""
    membership = db.query(Membership).filter(
        Membership.user_id == user_id,
        Membership.organization_id == org_id,
    ).first()
    if membership is None:
        raise ReferentialIntegrityError(field=field, value=user_id)
    return membership


def check_references(db: Session, org_id: UUID, values: dict) -> None:
    """Validate every known foreign-key field present (and not None) in ``values``."""
    checks = {
        "account_id": require_account,
        "contact_id": require_contact,
        "deal_id": require_deal,
        "quote_id": require_quote,
        "sales_order_id": require_sales_order,
        "item_id": require_item,
        "assigned_to_user_id": require_member,
    }
    for field, check in checks.items():
        value = values.get(field)
        if value is not None:
            check(db, org_id, value)
