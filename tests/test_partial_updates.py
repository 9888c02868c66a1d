"""
Partial updates: explicit nulls and rejected status changes.

A null for a NOT NULL column means "leave as is". An invalid status must
fail before any other field in the same payload touches the record.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fieldcrm.core.exceptions import InvalidStatusError
from fieldcrm.db.models import Contract, Deal, Installation, Quote, SalesOrder, ServiceRequest
from fieldcrm.schemas.contract import ContractCreate, ContractUpdate
from fieldcrm.schemas.deal import DealCreate, DealUpdate
from fieldcrm.schemas.installation import InstallationCreate, InstallationUpdate
from fieldcrm.schemas.line_item import LineItemIn
from fieldcrm.schemas.quote import QuoteCreate, QuoteUpdate
from fieldcrm.schemas.sales_order import SalesOrderCreate, SalesOrderUpdate
from fieldcrm.schemas.service_request import ServiceRequestCreate, ServiceRequestUpdate
from fieldcrm.services import (
    contract_service,
    deal_service,
    installation_service,
    quote_service,
    sales_order_service,
    service_request_service,
)


NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)
ITEMS = [LineItemIn(description="Inverter 5kW", quantity=1, unit_price=100)]


# =============================================================================
# Explicit nulls
# =============================================================================

def test_service_request_null_title_keeps_title(db, session, account):
    record = service_request_service.create_service_request(
        db, session, ServiceRequestCreate(title="AC not cooling", account_id=account.id), now=NOW
    )

    updated = service_request_service.update_service_request(
        db, session, record.id,
        ServiceRequestUpdate.model_validate({"title": None, "priority": None, "description": "Noisy"}),
    )

    assert updated.title == "AC not cooling"
    assert updated.priority == "MEDIUM"
    assert updated.description == "Noisy"
    assert db.get(ServiceRequest, record.id).title == "AC not cooling"


def test_contract_null_name_keeps_name(db, session, account):
    record = contract_service.create_contract(
        db, session, ContractCreate(name="Annual maintenance", account_id=account.id), now=NOW
    )

    updated = contract_service.update_contract(
        db, session, record.id, ContractUpdate.model_validate({"name": None, "terms": None})
    )

    assert updated.name == "Annual maintenance"
    assert db.get(Contract, record.id).name == "Annual maintenance"


def test_installation_null_engineer_team_keeps_team(db, session, account):
    record = installation_service.create_installation(
        db, session, InstallationCreate(account_id=account.id, engineer_team=["Ravi"]), now=NOW
    )

    updated = installation_service.update_installation(
        db, session, record.id,
        InstallationUpdate.model_validate({"engineer_team": None, "notes": "Gate code 1234"}),
    )

    assert updated.engineer_team == ["Ravi"]
    assert updated.notes == "Gate code 1234"
    assert db.get(Installation, record.id).engineer_team == ["Ravi"]


def test_quote_null_status_and_items_change_nothing(db, session, account):
    record = quote_service.create_quote(
        db, session, QuoteCreate(account_id=account.id, items=ITEMS, notes="Draft"), now=NOW
    )

    updated = quote_service.update_quote(
        db, session, record.id,
        QuoteUpdate.model_validate({"status": None, "items": None, "notes": None}),
    )

    assert updated.status == "DRAFT"
    assert len(updated.items) == 1
    assert updated.total == Decimal("100.00")
    assert updated.notes is None
    assert db.get(Quote, record.id).status == "DRAFT"


def test_sales_order_null_tax_keeps_totals(db, session, account):
    record = sales_order_service.create_sales_order(
        db, session,
        SalesOrderCreate(account_id=account.id, items=ITEMS, tax=Decimal("18")),
        now=NOW,
    )
    total_before = record.total

    updated = sales_order_service.update_sales_order(
        db, session, record.id,
        SalesOrderUpdate.model_validate({"tax": None, "status": None, "items": None}),
    )

    assert updated.tax == Decimal("18.00")
    assert updated.total == total_before
    assert db.get(SalesOrder, record.id).status == "DRAFT"


def test_deal_null_name_and_stage_keep_values(db, session, account):
    deal = deal_service.create_deal(
        db, session, DealCreate(name="Rooftop solar", account_id=account.id)
    )

    updated = deal_service.update_deal(
        db, session, deal.id, DealUpdate.model_validate({"name": None, "stage": None})
    )

    assert updated.name == "Rooftop solar"
    assert updated.stage == "PROSPECTING"
    assert db.get(Deal, deal.id).name == "Rooftop solar"


@pytest.mark.asyncio
async def test_patch_contract_with_null_name_returns_200(authed_client, db, session, account):
    record = contract_service.create_contract(
        db, session, ContractCreate(name="Annual maintenance", account_id=account.id), now=NOW
    )

    response = await authed_client.patch(f"/contracts/{record.id}", json={"name": None})

    assert response.status_code == 200
    assert response.json()["name"] == "Annual maintenance"


@pytest.mark.asyncio
async def test_patch_service_request_with_null_title_returns_200(authed_client, db, session, account):
    record = service_request_service.create_service_request(
        db, session, ServiceRequestCreate(title="AC not cooling", account_id=account.id), now=NOW
    )

    response = await authed_client.patch(
        f"/service-requests/{record.id}", json={"title": None, "priority": None}
    )

    assert response.status_code == 200
    assert response.json()["title"] == "AC not cooling"


# =============================================================================
# Invalid status leaves the record untouched
# =============================================================================

def test_invalid_status_does_not_apply_other_fields(db, session, account):
    record = service_request_service.create_service_request(
        db, session, ServiceRequestCreate(title="AC not cooling", account_id=account.id), now=NOW
    )

    with pytest.raises(InvalidStatusError):
        service_request_service.update_service_request(
            db, session, record.id,
            ServiceRequestUpdate(title="Changed", status="NOT_A_STATUS"),
        )

    assert record.title == "AC not cooling"
    assert not db.is_modified(record)
    db.commit()
    assert db.get(ServiceRequest, record.id).title == "AC not cooling"


def test_invalid_stage_does_not_apply_deal_fields(db, session, account):
    deal = deal_service.create_deal(
        db, session, DealCreate(name="Rooftop solar", account_id=account.id)
    )

    with pytest.raises(InvalidStatusError):
        deal_service.update_deal(
            db, session, deal.id, DealUpdate(name="Renamed", stage="WON_MAYBE")
        )

    assert not db.is_modified(deal)
    db.commit()
    assert db.get(Deal, deal.id).name == "Rooftop solar"


def test_locked_terminal_status_does_not_apply_other_fields(db, session, account, monkeypatch):
    from fieldcrm.core.config import settings

    monkeypatch.setattr(settings, "STRICT_STATUS_WORKFLOW", True)
    record = contract_service.create_contract(
        db, session, ContractCreate(name="Annual maintenance", account_id=account.id), now=NOW
    )
    contract_service.update_contract(db, session, record.id, ContractUpdate(status="TERMINATED"))

    with pytest.raises(InvalidStatusError):
        contract_service.update_contract(
            db, session, record.id, ContractUpdate(name="Renamed", status="ACTIVE")
        )

    assert not db.is_modified(record)
    assert db.get(Contract, record.id).name == "Annual maintenance"
