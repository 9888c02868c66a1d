from datetime import date, datetime, timedelta, timezone

import pytest

from fieldcrm.db.enums import ActivityType, SubjectKind
from fieldcrm.db.models import Contract
from fieldcrm.schemas.contract import ContractCreate, ContractUpdate
from fieldcrm.services import activity_service, contract_service, notification_service
from fieldcrm.services.activity_service import ActivitySubject


TODAY = date(2024, 3, 1)


class RecordingClient:
    def __init__(self):
        self.sent = []

    def send_text(self, to, body):
        self.sent.append((to, body))
        return True


@pytest.fixture
def whatsapp(monkeypatch):
    client = RecordingClient()
    monkeypatch.setattr(notification_service, "get_whatsapp_client", lambda: client)
    return client


def _create(db, session, account, **kwargs):
    data = ContractCreate(name="Annual maintenance", account_id=account.id, **kwargs)
    return contract_service.create_contract(
        db, session, data, now=datetime(2024, 1, 15, tzinfo=timezone.utc)
    )


def _titles(db, session, contract):
    subject = ActivitySubject(kind=SubjectKind.CONTRACT, id=contract.id)
    return [e.title for e in activity_service.list_activities(db, session.org_id, subject)]


def test_create_contract_numbering_and_initial_status(db, session, account):
    contract = _create(db, session, account)

    assert contract.contract_number == "CON-20240115-0001"
    assert contract.status == "DRAFT"
    assert _titles(db, session, contract) == ["Contract Created: CON-20240115-0001"]


def test_draft_active_draft_round_trip_is_logged(db, session, account):
    contract = _create(db, session, account)

    contract_service.update_contract(db, session, contract.id, ContractUpdate(status="ACTIVE"))
    contract_service.update_contract(db, session, contract.id, ContractUpdate(status="DRAFT"))

    titles = _titles(db, session, contract)
    assert "Status changed: DRAFT → ACTIVE" in titles
    assert "Status changed: ACTIVE → DRAFT" in titles
    assert len(titles) == 3
    assert db.get(Contract, contract.id).status == "DRAFT"


def test_contract_can_reference_deal_in_same_org_only(db, session, account, other_session):
    from fieldcrm.core.exceptions import ReferentialIntegrityError
    from fieldcrm.db.models import Deal

    foreign_deal = Deal(organization_id=other_session.org_id, name="Not ours")
    db.add(foreign_deal)
    db.commit()

    with pytest.raises(ReferentialIntegrityError):
        _create(db, session, account, deal_id=foreign_deal.id)


def _active_contract(db, session, account, contact=None, ends_in_days=10):
    contract = _create(
        db, session, account,
        contact_id=contact.id if contact else None,
        end_date=TODAY + timedelta(days=ends_in_days),
    )
    return contract_service.update_contract(db, session, contract.id, ContractUpdate(status="ACTIVE"))


def test_renewal_reminder_is_sent_once(db, session, account, contact, whatsapp):
    contract = _active_contract(db, session, account, contact, ends_in_days=10)

    first = contract_service.send_contract_renewal_reminders(db, today=TODAY)
    second = contract_service.send_contract_renewal_reminders(db, today=TODAY)

    assert first["reminders_sent"] == 1
    assert second["reminders_sent"] == 0
    assert whatsapp.sent == [
        ("+91-90000-11111", f"Reminder: Your contract {contract.contract_number} will expire in 10 days")
    ]
    db.refresh(contract)
    assert contract.renewal_reminder_sent_at is not None

    subject = ActivitySubject(kind=SubjectKind.CONTRACT, id=contract.id)
    types = [e.activity_type for e in activity_service.list_activities(db, session.org_id, subject)]
    assert types.count(ActivityType.NOTIFICATION_SENT.value) == 1


def test_renewal_reminder_window_and_status(db, session, account, whatsapp):
    _active_contract(db, session, account, ends_in_days=45)
    _create(db, session, account, end_date=TODAY + timedelta(days=5))  # still DRAFT
    due = _active_contract(db, session, account, ends_in_days=30)

    result = contract_service.send_contract_renewal_reminders(db, today=TODAY)

    assert result["contracts_checked"] == 1
    assert result["reminders_sent"] == 1
    # account phone is the fallback recipient
    assert whatsapp.sent[0][0] == "+91 98765 43210"
    assert due.contract_number in whatsapp.sent[0][1]


def test_renewal_reminder_skips_contracts_without_phone(db, session, test_org, whatsapp):
    from fieldcrm.db.models import Account

    silent = Account(organization_id=test_org.id, name="No Phone Ltd")
    db.add(silent)
    db.commit()
    _active_contract(db, session, silent, ends_in_days=3)

    result = contract_service.send_contract_renewal_reminders(db, today=TODAY)

    assert result == {"contracts_checked": 1, "reminders_sent": 0, "skipped_no_phone": 1}
    assert whatsapp.sent == []


def test_failed_reminder_is_retried_next_run(db, session, account, monkeypatch):
    class DownClient:
        def send_text(self, to, body):
            return False

    monkeypatch.setattr(notification_service, "get_whatsapp_client", DownClient)
    contract = _active_contract(db, session, account, ends_in_days=7)

    result = contract_service.send_contract_renewal_reminders(db, today=TODAY)

    assert result["reminders_sent"] == 0
    db.refresh(contract)
    assert contract.renewal_reminder_sent_at is None


def test_changing_end_date_rearms_reminder(db, session, account, whatsapp):
    contract = _active_contract(db, session, account, ends_in_days=10)
    contract_service.send_contract_renewal_reminders(db, today=TODAY)

    contract_service.update_contract(
        db, session, contract.id, ContractUpdate(end_date=TODAY + timedelta(days=20))
    )
    result = contract_service.send_contract_renewal_reminders(db, today=TODAY)

    assert result["reminders_sent"] == 1
    assert len(whatsapp.sent) == 2
