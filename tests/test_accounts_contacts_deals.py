import pytest

from fieldcrm.core.exceptions import NotFoundError, RecordInUseError, ReferentialIntegrityError
from fieldcrm.db.enums import ActivityType, SubjectKind
from fieldcrm.schemas.account import AccountCreate, AccountUpdate
from fieldcrm.schemas.contact import ContactCreate, ContactUpdate
from fieldcrm.schemas.deal import DealCreate, DealUpdate
from fieldcrm.schemas.service_request import ServiceRequestCreate
from fieldcrm.services import (
    account_service,
    activity_service,
    contact_service,
    deal_service,
    service_request_service,
)
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.utils.pagination import PaginationParams


# =============================================================================
# Accounts
# =============================================================================

def test_create_and_update_account(db, session):
    account = account_service.create_account(
        db, session, AccountCreate(name="Tata Solar", account_type="CUSTOMER", city="Pune")
    )
    assert account.organization_id == session.org_id
    assert account.account_type == "CUSTOMER"

    updated = account_service.update_account(
        db, session, account.id, AccountUpdate(phone="+91 11111 22222", name=None)
    )
    assert updated.phone == "+91 11111 22222"
    assert updated.name == "Tata Solar"


def test_accounts_are_listed_per_org(db, session, other_session, account, other_account):
    items, total = account_service.list_accounts(db, session.org_id, PaginationParams())
    assert total == 1
    assert [a.name for a in items] == ["Acme Industries"]

    items, total = account_service.list_accounts(db, other_session.org_id, PaginationParams())
    assert [a.name for a in items] == ["Globex"]


def test_account_from_other_org_is_not_found(db, session, other_account):
    with pytest.raises(NotFoundError):
        account_service.get_account(db, session.org_id, other_account.id)


def test_referenced_account_cannot_be_deleted(db, session, account):
    service_request_service.create_service_request(
        db, session, ServiceRequestCreate(title="Panel cracked", account_id=account.id)
    )

    with pytest.raises(RecordInUseError):
        account_service.delete_account(db, session, account.id)


def test_unreferenced_account_is_deleted(db, session):
    account = account_service.create_account(db, session, AccountCreate(name="Short-lived"))

    account_service.delete_account(db, session, account.id)

    with pytest.raises(NotFoundError):
        account_service.get_account(db, session.org_id, account.id)


# =============================================================================
# Contacts
# =============================================================================

def test_contact_rejects_account_from_other_org(db, session, other_account):
    with pytest.raises(ReferentialIntegrityError):
        contact_service.create_contact(
            db, session,
            ContactCreate(first_name="Ana", last_name="Lopez", account_id=other_account.id),
        )


def test_contact_search(db, session, contact):
    contact_service.create_contact(
        db, session, ContactCreate(first_name="Vikram", last_name="Rao", email="vikram@rao.in")
    )

    items, total = contact_service.list_contacts(db, session.org_id, PaginationParams(), q="sharma")
    assert total == 1
    assert items[0].id == contact.id

    items, total = contact_service.list_contacts(db, session.org_id, PaginationParams(), q="rao.in")
    assert [c.first_name for c in items] == ["Vikram"]


def test_contact_update_keeps_required_names(db, session, contact):
    updated = contact_service.update_contact(
        db, session, contact.id, ContactUpdate(first_name=None, email="priya@example.com")
    )
    assert updated.first_name == "Priya"
    assert updated.email == "priya@example.com"


# =============================================================================
# Deals
# =============================================================================

def test_deal_stage_change_is_logged(db, session, account):
    deal = deal_service.create_deal(db, session, DealCreate(name="Rooftop 50kW", account_id=account.id))
    assert deal.stage == "PROSPECTING"

    deal_service.update_deal(db, session, deal.id, DealUpdate(stage="PROPOSAL"))
    deal_service.update_deal(db, session, deal.id, DealUpdate(stage="PROPOSAL"))

    entries = activity_service.list_activities(
        db, session.org_id, ActivitySubject(kind=SubjectKind.DEAL, id=deal.id)
    )
    assert len(entries) == 1
    assert entries[0].activity_type == ActivityType.STATUS_CHANGED.value
    assert entries[0].title == "Status changed: PROSPECTING → PROPOSAL"


def test_deal_rejects_contact_from_other_org(db, session, other_session):
    foreign = contact_service.create_contact(
        db, other_session, ContactCreate(first_name="Hans", last_name="Gruber")
    )
    with pytest.raises(ReferentialIntegrityError):
        deal_service.create_deal(db, session, DealCreate(name="Bad link", contact_id=foreign.id))


def test_deal_list_filters_by_stage(db, session):
    deal_service.create_deal(db, session, DealCreate(name="A"))
    deal_service.create_deal(db, session, DealCreate(name="B", stage="NEGOTIATION"))

    items, total = deal_service.list_deals(db, session.org_id, PaginationParams(), stage="NEGOTIATION")
    assert total == 1
    assert items[0].name == "B"
