import json

import httpx
import pytest

from fieldcrm.services.notification_service import (
    WhatsAppClient,
    contract_reminder_message,
    installation_message,
    normalize_phone,
    quote_message,
    service_request_message,
)


def _client(handler) -> WhatsAppClient:
    return WhatsAppClient(
        phone_number_id="1234567890",
        access_token="test-token",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("+91 98765 43210", "919876543210"),
        ("+91-90000-11111", "919000011111"),
        ("(555) 010-9999", "5550109999"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_send_text_posts_graph_api_payload():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

    assert _client(handler).send_text("+91 98765 43210", "Hello") is True
    assert captured["url"] == "https://graph.facebook.com/v17.0/1234567890/messages"
    assert captured["auth"] == "Bearer test-token"
    assert captured["body"] == {
        "messaging_product": "whatsapp",
        "to": "919876543210",
        "type": "text",
        "text": {"body": "Hello"},
    }


def test_send_text_without_credentials_does_not_call_api():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    client = WhatsAppClient(
        phone_number_id="", access_token="", transport=httpx.MockTransport(handler)
    )

    assert client.configured is False
    assert client.send_text("+91 98765 43210", "Hello") is False
    assert calls == []


def test_send_text_reports_api_error():
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "Invalid parameter"}})

    assert _client(handler).send_text("+91 98765 43210", "Hello") is False


def test_send_text_reports_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert _client(handler).send_text("+91 98765 43210", "Hello") is False


def test_send_text_skips_number_without_digits():
    def handler(request):
        raise AssertionError("should not be called")

    assert _client(handler).send_text("n/a", "Hello") is False


def test_message_texts():
    assert service_request_message("SR-20240115-0001", "RESOLVED") == (
        "Your service request SR-20240115-0001 has been updated. Status: RESOLVED"
    )
    assert installation_message("WO-20240120-0001", "2024-02-01") == (
        "Your installation WO-20240120-0001 has been scheduled for 2024-02-01"
    )
    assert contract_reminder_message("CON-20240115-0001", 10) == (
        "Reminder: Your contract CON-20240115-0001 will expire in 10 days"
    )
    assert quote_message("QT-20240115-0001", "125000") == (
        "Your quote QT-20240115-0001 for ₹125,000.00 has been generated. "
        "Please review and approve."
    )
