from datetime import date, datetime, timezone

import pytest

from fieldcrm.db.enums import ActivityType, SubjectKind
from fieldcrm.schemas.installation import InstallationCreate, InstallationUpdate
from fieldcrm.services import activity_service, installation_service, notification_service
from fieldcrm.services.activity_service import ActivitySubject


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


@pytest.fixture
def installation(db, session, account, contact):
    data = InstallationCreate(
        account_id=account.id,
        contact_id=contact.id,
        engineer_team=["Ravi", "Anil"],
    )
    return installation_service.create_installation(
        db, session, data, now=datetime(2024, 1, 20, tzinfo=timezone.utc)
    )


def _types(db, session, record):
    subject = ActivitySubject(kind=SubjectKind.INSTALLATION, id=record.id)
    return [e.activity_type for e in activity_service.list_activities(db, session.org_id, subject)]


def test_installation_starts_in_planning(installation):
    assert installation.work_order_number == "WO-20240120-0001"
    assert installation.status == "PLANNING"
    assert installation.engineer_team == ["Ravi", "Anil"]


def test_scheduling_with_dispatch_date_notifies(db, session, installation, whatsapp):
    installation_service.update_installation(
        db, session, installation.id,
        InstallationUpdate(status="SCHEDULED", dispatch_date=date(2024, 2, 1)),
    )

    assert whatsapp.sent == [
        ("+91-90000-11111", "Your installation WO-20240120-0001 has been scheduled for 2024-02-01")
    ]
    assert ActivityType.NOTIFICATION_SENT.value in _types(db, session, installation)


def test_scheduling_without_dispatch_date_is_silent(db, session, installation, whatsapp):
    updated = installation_service.update_installation(
        db, session, installation.id, InstallationUpdate(status="SCHEDULED")
    )

    assert updated.status == "SCHEDULED"
    assert whatsapp.sent == []
    assert ActivityType.NOTIFICATION_SENT.value not in _types(db, session, installation)


def test_engineer_team_update(db, session, installation):
    updated = installation_service.update_installation(
        db, session, installation.id, InstallationUpdate(engineer_team=["Meera"])
    )
    assert updated.engineer_team == ["Meera"]

    # explicit null leaves the team alone
    updated = installation_service.update_installation(
        db, session, installation.id, InstallationUpdate(engineer_team=None)
    )
    assert updated.engineer_team == ["Meera"]
