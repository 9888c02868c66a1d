"""Contact service - people at customer accounts."""

from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import NotFoundError
from fieldcrm.db.models import Contact
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.contact import ContactCreate, ContactUpdate
from fieldcrm.services import reference_service
from fieldcrm.services.document_service import apply_changes
from fieldcrm.utils.pagination import PaginationParams, paginate_query


def create_contact(db: Session, session: UserSession, data: ContactCreate) -> Contact:
    reference_service.check_references(db, session.org_id, {"account_id": data.account_id})
    contact = Contact(organization_id=session.org_id, created_by_user_id=session.user_id)
    apply_changes(contact, data.model_dump())
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def get_contact(db: Session, org_id: UUID, contact_id: UUID) -> Contact:
    contact = db.query(Contact).filter(
        Contact.id == contact_id,
        Contact.organization_id == org_id,
    ).first()
    if contact is None:
        raise NotFoundError(resource="Contact", resource_id=contact_id)
    return contact


def list_contacts(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    q: str | None = None,
    account_id: UUID | None = None,
) -> tuple[list[Contact], int]:
    query = db.query(Contact).filter(Contact.organization_id == org_id)
    if account_id:
        query = query.filter(Contact.account_id == account_id)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(
            or_(
                Contact.first_name.ilike(pattern),
                Contact.last_name.ilike(pattern),
                Contact.email.ilike(pattern),
            )
        )
    query = query.order_by(Contact.created_at.desc(), Contact.last_name)
    return paginate_query(query, pagination)


def update_contact(db: Session, session: UserSession, contact_id: UUID, data: ContactUpdate) -> Contact:
    contact = get_contact(db, session.org_id, contact_id)
    values = data.model_dump(exclude_unset=True)
    reference_service.check_references(db, session.org_id, values)
    apply_changes(contact, values)
    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, session: UserSession, contact_id: UUID) -> None:
    """Documents linked to the contact keep their account and lose the contact link."""
    contact = get_contact(db, session.org_id, contact_id)
    db.delete(contact)
    db.commit()
