from datetime import date

import pytest

from fieldcrm.core.document_types import CONTRACT, SERVICE_REQUEST
from fieldcrm.db.models import ServiceRequest
from fieldcrm.services import numbering_service


DAY = date(2024, 1, 15)


def _seed_ticket(db, org_id, account_id, code):
    db.add(
        ServiceRequest(
            organization_id=org_id,
            ticket_number=code,
            title=f"Ticket {code}",
            account_id=account_id,
        )
    )
    db.commit()


def test_format_document_code_pads_sequence_to_four_digits():
    assert numbering_service.format_document_code("SR", DAY, 7) == "SR-20240115-0007"
    assert numbering_service.format_document_code("CON", date(2023, 12, 1), 1) == "CON-20231201-0001"


def test_format_document_code_widens_past_9999():
    assert numbering_service.format_document_code("WO", DAY, 12345) == "WO-20240115-12345"


def test_format_document_code_rejects_non_positive_sequence():
    with pytest.raises(ValueError):
        numbering_service.format_document_code("SR", DAY, 0)


def test_parse_document_code():
    parsed = numbering_service.parse_document_code("QT-20240115-0042")
    assert parsed.prefix == "QT"
    assert parsed.day == DAY
    assert parsed.sequence == 42


@pytest.mark.parametrize("code", ["SR-2024-0001", "sr-20240115-0001", "SR-20240115-01", ""])
def test_parse_document_code_rejects_malformed(code):
    with pytest.raises(ValueError):
        numbering_service.parse_document_code(code)


def test_first_code_of_the_day_is_0001(db, test_org):
    code = numbering_service.next_document_code(db, test_org.id, SERVICE_REQUEST, DAY)
    assert code == "SR-20240115-0001"


def test_next_code_follows_existing_count(db, test_org, account):
    for n in range(1, 4):
        _seed_ticket(db, test_org.id, account.id, f"SR-20240115-{n:04d}")

    code = numbering_service.next_document_code(db, test_org.id, SERVICE_REQUEST, DAY)
    assert code == "SR-20240115-0004"


def test_sequence_restarts_each_day(db, test_org, account):
    _seed_ticket(db, test_org.id, account.id, "SR-20240114-0001")
    _seed_ticket(db, test_org.id, account.id, "SR-20240114-0002")

    code = numbering_service.next_document_code(db, test_org.id, SERVICE_REQUEST, DAY)
    assert code == "SR-20240115-0001"


def test_sequence_is_per_organization(db, test_org, account, other_org, other_account):
    _seed_ticket(db, other_org.id, other_account.id, "SR-20240115-0001")
    _seed_ticket(db, other_org.id, other_account.id, "SR-20240115-0002")

    code = numbering_service.next_document_code(db, test_org.id, SERVICE_REQUEST, DAY)
    assert code == "SR-20240115-0001"


def test_sequence_is_per_document_type(db, test_org, account):
    _seed_ticket(db, test_org.id, account.id, "SR-20240115-0001")

    code = numbering_service.next_document_code(db, test_org.id, CONTRACT, DAY)
    assert code == "CON-20240115-0001"


def test_gap_after_delete_does_not_reissue_highest_code(db, test_org, account):
    for n in range(1, 4):
        _seed_ticket(db, test_org.id, account.id, f"SR-20240115-{n:04d}")
    second = db.query(ServiceRequest).filter(ServiceRequest.ticket_number == "SR-20240115-0002").one()
    db.delete(second)
    db.commit()

    code = numbering_service.next_document_code(db, test_org.id, SERVICE_REQUEST, DAY)
    assert code == "SR-20240115-0004"
