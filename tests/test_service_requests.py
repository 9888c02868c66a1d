import re
from datetime import datetime, timezone

import httpx
import pytest

from fieldcrm.core.document_types import SERVICE_REQUEST
from fieldcrm.core.exceptions import (
    DuplicateCodeError,
    InvalidStatusError,
    NotFoundError,
    ReferentialIntegrityError,
)
from fieldcrm.db.enums import ActivityType, SubjectKind
from fieldcrm.db.models import ActivityLog
from fieldcrm.schemas.service_request import ServiceRequestCreate, ServiceRequestUpdate
from fieldcrm.services import (
    activity_service,
    document_service,
    notification_service,
    numbering_service,
    service_request_service,
)
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.utils.pagination import PaginationParams


JAN_15 = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


def _create(db, session, account, title="AC not cooling", now=JAN_15, **kwargs):
    data = ServiceRequestCreate(title=title, account_id=account.id, **kwargs)
    return service_request_service.create_service_request(db, session, data, now=now)


def _activities(db, session, record):
    return activity_service.list_activities(
        db, session.org_id, ActivitySubject(kind=SubjectKind.SERVICE_REQUEST, id=record.id)
    )


def test_three_requests_on_one_day_are_numbered_in_order(db, session, account):
    codes = [_create(db, session, account, title=f"Issue {n}").ticket_number for n in range(3)]
    assert codes == ["SR-20240115-0001", "SR-20240115-0002", "SR-20240115-0003"]


def test_sequential_creation_yields_consecutive_suffixes(db, session, account):
    records = [_create(db, session, account, now=None) for _ in range(5)]

    suffixes = [r.ticket_number.rsplit("-", 1)[1] for r in records]
    assert suffixes == ["0001", "0002", "0003", "0004", "0005"]
    today = datetime.now(timezone.utc).strftime("%Y%m%d")
    assert all(re.fullmatch(rf"SR-{today}-\d{{4}}", r.ticket_number) for r in records)


def test_create_sets_initial_status_creator_and_logs(db, session, account, contact):
    record = _create(db, session, account, contact_id=contact.id, priority="HIGH")

    assert record.status == "OPEN"
    assert record.priority == "HIGH"
    assert record.organization_id == session.org_id
    assert record.created_by_user_id == session.user_id

    entries = _activities(db, session, record)
    assert len(entries) == 1
    assert entries[0].activity_type == ActivityType.RECORD_CREATED.value
    assert entries[0].title == "Service Request Created: SR-20240115-0001"
    assert entries[0].description == 'Service request "AC not cooling" was created'


def test_stale_count_is_retried_with_next_code(db, session, account, monkeypatch):
    for n in range(5):
        _create(db, session, account, title=f"Existing {n}")

    real_count = numbering_service.count_documents_for_day
    calls = []

    def stale_once(db_, org_id, doc_type, day):
        calls.append(day)
        if len(calls) == 1:
            return 4  # read before another creator committed -0005
        return real_count(db_, org_id, doc_type, day)

    monkeypatch.setattr(numbering_service, "count_documents_for_day", stale_once)
    record = _create(db, session, account, title="Racing request")

    assert record.ticket_number == "SR-20240115-0006"
    assert len(calls) == 2


def test_duplicate_code_after_max_attempts(db, session, account, monkeypatch):
    from fieldcrm.core.config import settings

    _create(db, session, account)
    monkeypatch.setattr(settings, "DOCUMENT_CODE_MAX_ATTEMPTS", 2)
    monkeypatch.setattr(numbering_service, "count_documents_for_day", lambda *args: 0)

    with pytest.raises(DuplicateCodeError) as exc_info:
        _create(db, session, account, title="Never numbered")

    assert exc_info.value.status_code == 409
    total = service_request_service.list_service_requests(db, session.org_id, PaginationParams())[1]
    assert total == 1


def test_create_rejects_account_from_other_org(db, session, other_account):
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        _create(db, session, other_account)
    assert exc_info.value.field == "account_id"


def test_create_rejects_assignee_outside_org(db, session, account, other_session):
    with pytest.raises(ReferentialIntegrityError):
        _create(db, session, account, assigned_to_user_id=other_session.user_id)


def test_other_org_cannot_read_update_or_delete(db, session, account, other_session):
    record = _create(db, session, account)

    with pytest.raises(NotFoundError):
        service_request_service.get_service_request(db, other_session.org_id, record.id)
    with pytest.raises(NotFoundError):
        service_request_service.update_service_request(
            db, other_session, record.id, ServiceRequestUpdate(status="CLOSED")
        )
    with pytest.raises(NotFoundError):
        service_request_service.delete_service_request(db, other_session, record.id)
    with pytest.raises(NotFoundError):
        document_service.add_comment(
            db, other_session, SERVICE_REQUEST, record.id, "hello"
        )

    db.refresh(record)
    assert record.status == "OPEN"
    items, total = service_request_service.list_service_requests(
        db, other_session.org_id, PaginationParams()
    )
    assert (items, total) == ([], 0)


def test_status_update_logs_once_and_stamps_resolved_at(db, session, account):
    record = _create(db, session, account)

    updated = service_request_service.update_service_request(
        db, session, record.id, ServiceRequestUpdate(status="RESOLVED")
    )
    assert updated.status == "RESOLVED"
    assert updated.resolved_at is not None

    service_request_service.update_service_request(
        db, session, record.id, ServiceRequestUpdate(status="RESOLVED")
    )
    transitions = [
        e for e in _activities(db, session, record)
        if e.activity_type == ActivityType.STATUS_CHANGED.value
    ]
    assert len(transitions) == 1
    assert transitions[0].title == "Status changed: OPEN → RESOLVED"


def test_invalid_status_update_is_rejected(db, session, account):
    record = _create(db, session, account)

    with pytest.raises(InvalidStatusError):
        service_request_service.update_service_request(
            db, session, record.id, ServiceRequestUpdate(status="DONE")
        )
    db.rollback()
    db.refresh(record)
    assert record.status == "OPEN"


def test_field_updates_without_status_log_nothing(db, session, account):
    record = _create(db, session, account)

    updated = service_request_service.update_service_request(
        db, session, record.id, ServiceRequestUpdate(title="AC leaking", priority="URGENT")
    )
    assert updated.title == "AC leaking"
    assert updated.priority == "URGENT"
    assert len(_activities(db, session, record)) == 1


def test_list_filters_and_search(db, session, account):
    _create(db, session, account, title="Compressor noise")
    second = _create(db, session, account, title="Filter replacement")
    service_request_service.update_service_request(
        db, session, second.id, ServiceRequestUpdate(status="IN_PROGRESS")
    )

    items, total = service_request_service.list_service_requests(
        db, session.org_id, PaginationParams(), q="compressor"
    )
    assert total == 1 and items[0].title == "Compressor noise"

    items, total = service_request_service.list_service_requests(
        db, session.org_id, PaginationParams(), q="20240115-0002"
    )
    assert [i.id for i in items] == [second.id]

    items, total = service_request_service.list_service_requests(
        db, session.org_id, PaginationParams(), status="IN_PROGRESS"
    )
    assert [i.id for i in items] == [second.id]


def test_list_is_newest_first_and_paginated(db, session, account):
    for n in range(3):
        _create(db, session, account, title=f"Issue {n}")

    items, total = service_request_service.list_service_requests(
        db, session.org_id, PaginationParams(page=1, per_page=2)
    )
    assert total == 3
    assert [i.ticket_number for i in items] == ["SR-20240115-0003", "SR-20240115-0002"]


def test_notification_failure_does_not_fail_update(db, session, account, contact, monkeypatch):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = notification_service.WhatsAppClient(
        phone_number_id="123", access_token="token", transport=httpx.MockTransport(refuse)
    )
    monkeypatch.setattr(notification_service, "get_whatsapp_client", lambda: client)
    record = _create(db, session, account, contact_id=contact.id)

    updated = service_request_service.update_service_request(
        db, session, record.id, ServiceRequestUpdate(status="IN_PROGRESS")
    )

    assert updated.status == "IN_PROGRESS"
    types = [e.activity_type for e in _activities(db, session, record)]
    assert ActivityType.NOTIFICATION_SENT.value not in types


def test_status_change_notifies_contact(db, session, account, contact, monkeypatch):
    sent = []

    class RecordingClient:
        def send_text(self, to, body):
            sent.append((to, body))
            return True

    monkeypatch.setattr(notification_service, "get_whatsapp_client", RecordingClient)
    record = _create(db, session, account, contact_id=contact.id)

    service_request_service.update_service_request(
        db, session, record.id, ServiceRequestUpdate(status="IN_PROGRESS")
    )

    assert sent == [
        ("+91-90000-11111", "Your service request SR-20240115-0001 has been updated. Status: IN_PROGRESS")
    ]
    types = [e.activity_type for e in _activities(db, session, record)]
    assert ActivityType.NOTIFICATION_SENT.value in types


def test_delete_keeps_activity_entries(db, session, account):
    record = _create(db, session, account)
    record_id = record.id

    service_request_service.delete_service_request(db, session, record_id)

    with pytest.raises(NotFoundError):
        service_request_service.get_service_request(db, session.org_id, record_id)
    remaining = db.query(ActivityLog).filter(ActivityLog.subject_id == record_id).count()
    assert remaining == 1


def test_comment_is_appended(db, session, account):
    record = _create(db, session, account)

    entry = document_service.add_comment(
        db, session, SERVICE_REQUEST, record.id, "Technician en route"
    )

    assert entry.activity_type == ActivityType.COMMENT.value
    assert entry.description == "Technician en route"
    assert entry.actor_user_id == session.user_id
