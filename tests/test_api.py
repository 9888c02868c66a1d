"""End-to-end tests through the HTTP layer."""

import uuid
from datetime import date, timedelta

import pytest

from fieldcrm.db.models import Contract
from fieldcrm.services import notification_service


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get("/service-requests")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_org_code(authed_client, test_auth):
    response = await authed_client.get("/auth/me")
    assert response.status_code == 200
    body = response.json()
    assert body["org_code"] == test_auth.org.code
    assert body["email"] == test_auth.user.email


@pytest.mark.asyncio
async def test_mutation_requires_csrf_header(authed_client, account):
    response = await authed_client.post(
        "/service-requests",
        json={"title": "No header", "account_id": str(account.id)},
        headers={"X-Requested-With": ""},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_service_request_ignores_payload_org(authed_client, account, test_org):
    response = await authed_client.post(
        "/service-requests",
        json={
            "title": "Inverter fault",
            "account_id": str(account.id),
            "organization_id": str(uuid.uuid4()),
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["ticket_number"].startswith("SR-")
    assert body["status"] == "OPEN"

    detail = await authed_client.get(f"/service-requests/{body['id']}")
    assert detail.status_code == 200
    assert detail.json()["account"]["name"] == "Acme Industries"


@pytest.mark.asyncio
async def test_cross_tenant_read_is_not_found(authed_client, db, other_account, other_session):
    from fieldcrm.schemas.service_request import ServiceRequestCreate
    from fieldcrm.services import service_request_service

    foreign = service_request_service.create_service_request(
        db, other_session, ServiceRequestCreate(title="Not yours", account_id=other_account.id)
    )

    response = await authed_client.get(f"/service-requests/{foreign.id}")
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"

    response = await authed_client.get(
        "/activities", params={"subject_kind": "service_request", "subject_id": str(foreign.id)}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_status_is_rejected(authed_client, account):
    created = await authed_client.post(
        "/service-requests", json={"title": "Leaking tank", "account_id": str(account.id)}
    )
    record_id = created.json()["id"]

    response = await authed_client.patch(f"/service-requests/{record_id}", json={"status": "BOGUS"})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "invalid_status"
    assert "OPEN" in body["details"]["allowed"]


@pytest.mark.asyncio
async def test_foreign_reference_is_rejected(authed_client, other_account):
    response = await authed_client.post(
        "/contracts", json={"name": "Sneaky", "account_id": str(other_account.id)}
    )
    assert response.status_code == 422
    assert response.json()["code"] == "referential_integrity"


@pytest.mark.asyncio
async def test_status_change_comment_and_activity_feed(authed_client, account):
    created = await authed_client.post(
        "/contracts", json={"name": "AMC 2024", "account_id": str(account.id)}
    )
    assert created.status_code == 201
    contract_id = created.json()["id"]

    patched = await authed_client.patch(f"/contracts/{contract_id}", json={"status": "ACTIVE"})
    assert patched.status_code == 200
    assert patched.json()["status"] == "ACTIVE"

    comment = await authed_client.post(
        f"/contracts/{contract_id}/comments", json={"body": "Customer signed on site"}
    )
    assert comment.status_code == 201
    assert comment.json()["activity_type"] == "comment"

    per_record = await authed_client.get(f"/contracts/{contract_id}/activities")
    assert per_record.status_code == 200
    titles = {entry["title"] for entry in per_record.json()["items"]}
    assert "Status changed: DRAFT → ACTIVE" in titles
    assert "Comment added" in titles

    feed = await authed_client.get(
        "/activities", params={"subject_kind": "contract", "subject_id": contract_id}
    )
    assert feed.status_code == 200
    assert len(feed.json()["items"]) == 3


@pytest.mark.asyncio
async def test_list_is_paginated(authed_client, account):
    for n in range(3):
        await authed_client.post(
            "/service-requests", json={"title": f"Ticket {n}", "account_id": str(account.id)}
        )

    response = await authed_client.get("/service-requests", params={"per_page": 2})

    body = response.json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert len(body["items"]) == 2


@pytest.mark.asyncio
async def test_quote_totals_via_api(authed_client, account):
    response = await authed_client.post(
        "/quotes",
        json={
            "account_id": str(account.id),
            "items": [
                {"description": "Panel", "quantity": "2", "unit_price": "100", "discount": "10"},
                {"description": "Mount", "quantity": "1", "unit_price": "50.50"},
            ],
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["quote_number"].startswith("QT-")
    assert float(body["total"]) == 240.5


@pytest.mark.asyncio
async def test_delete_referenced_account_conflicts(authed_client, account):
    await authed_client.post(
        "/service-requests", json={"title": "Keep me", "account_id": str(account.id)}
    )

    response = await authed_client.delete(f"/accounts/{account.id}")

    assert response.status_code == 409
    assert response.json()["code"] == "record_in_use"


@pytest.mark.asyncio
async def test_internal_renewal_endpoint(client, db, session, account, monkeypatch):
    sent = []

    class RecordingClient:
        def send_text(self, to, body):
            sent.append(body)
            return True

    monkeypatch.setattr(notification_service, "get_whatsapp_client", RecordingClient)
    db.add(
        Contract(
            organization_id=session.org_id,
            contract_number="CON-20240101-0001",
            name="Expiring",
            status="ACTIVE",
            account_id=account.id,
            end_date=date.today() + timedelta(days=5),
        )
    )
    db.commit()

    missing = await client.post("/internal/contracts/renewal-reminders")
    assert missing.status_code == 422

    wrong = await client.post(
        "/internal/contracts/renewal-reminders", headers={"X-Internal-Secret": "nope"}
    )
    assert wrong.status_code == 403

    ok = await client.post(
        "/internal/contracts/renewal-reminders",
        headers={"X-Internal-Secret": "test-internal-secret"},
    )
    assert ok.status_code == 200
    assert ok.json()["reminders_sent"] == 1
    assert sent and "CON-20240101-0001" in sent[0]
