"""Customer notifications over the WhatsApp Business (Graph) API.

Notifications are fire-and-forget: they run after the originating change is
committed, and a failed send is logged without failing the request.
"""

from __future__ import annotations

import logging
import re
from datetime import date

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fieldcrm.core.config import settings
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.db.models import Contract, Installation, Quote, ServiceRequest
from fieldcrm.services import activity_service
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.db.enums import SubjectKind
from fieldcrm.utils.pricing import money

logger = logging.getLogger(__name__)

CHANNEL = "whatsapp"
GRAPH_API_BASE = "https://graph.facebook.com"

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """Strip everything but digits (Graph API wants bare international numbers)."""
    return _NON_DIGITS.sub("", phone or "")


# =============================================================================
# Message text
# =============================================================================

def service_request_message(ticket_number: str, status: str) -> str:
    return f"Your service request {ticket_number} has been updated. Status: {status}"


def installation_message(work_order_number: str, scheduled_for: date | str) -> str:
    return f"Your installation {work_order_number} has been scheduled for {scheduled_for}"


def contract_reminder_message(contract_number: str, days_remaining: int) -> str:
    return f"Reminder: Your contract {contract_number} will expire in {days_remaining} days"


def quote_message(quote_number: str, amount) -> str:
    return (
        f"Your quote {quote_number} for ₹{money(amount):,} has been generated. "
        "Please review and approve."
    )


# =============================================================================
# Client
# =============================================================================

class WhatsAppClient:
    """Minimal Graph API client for plain text messages."""

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: str = "v17.0",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.phone_number_id and self.access_token)

    @property
    def messages_url(self) -> str:
        return f"{GRAPH_API_BASE}/{self.api_version}/{self.phone_number_id}/messages"

    def send_text(self, to: str, body: str) -> bool:
        """
        Send a text message. Returns True on success.

        Never raises: missing credentials, transport errors and API errors
        are logged and reported as False.
        """
        if not self.configured:
            logger.warning("WhatsApp credentials not configured")
            return False

        recipient = normalize_phone(to)
        if not recipient:
            logger.warning("WhatsApp send skipped: recipient has no phone digits")
            return False

        payload = {
            "messaging_product": "whatsapp",
            "to": recipient,
            "type": "text",
            "text": {"body": body},
        }
        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
                response = client.post(
                    self.messages_url,
                    headers={"Authorization": f"Bearer {self.access_token}"},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            logger.warning("WhatsApp request failed: %s", type(exc).__name__)
            return False

        if response.status_code >= 400:
            detail = None
            try:
                detail = response.json().get("error", {}).get("message")
            except ValueError:
                detail = response.text[:200]
            logger.warning(
                "WhatsApp API error %s: %s", response.status_code, detail or "unknown error"
            )
            return False
        return True


def get_whatsapp_client() -> WhatsAppClient:
    return WhatsAppClient(
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        api_version=settings.WHATSAPP_API_VERSION,
        timeout=settings.WHATSAPP_TIMEOUT_SECONDS,
    )


# =============================================================================
# Triggers
# =============================================================================

def recipient_phone(record) -> str | None:
    """Contact phone first, then the account's."""
    contact = getattr(record, "contact", None)
    if contact is not None and contact.phone:
        return contact.phone
    account = getattr(record, "account", None)
    if account is not None and account.phone:
        return account.phone
    return None


def _deliver(db: Session, record, kind: SubjectKind, message: str) -> bool:
    phone = recipient_phone(record)
    if not phone:
        return False

    try:
        sent = get_whatsapp_client().send_text(phone, message)
    except Exception:
        logger.exception(
            "WhatsApp notification failed",
            extra=build_log_context(org_id=str(record.organization_id), entity_id=str(record.id)),
        )
        return False
    if not sent:
        return False

    try:
        activity_service.log_notification_sent(
            db=db,
            organization_id=record.organization_id,
            subject=ActivitySubject(kind=kind, id=record.id),
            channel=CHANNEL,
            message=message,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to log notification",
            extra=build_log_context(org_id=str(record.organization_id), entity_id=str(record.id)),
        )
    return True


def notify_service_request_status(db: Session, service_request: ServiceRequest) -> bool:
    message = service_request_message(service_request.ticket_number, service_request.status)
    return _deliver(db, service_request, SubjectKind.SERVICE_REQUEST, message)


def notify_installation_scheduled(db: Session, installation: Installation) -> bool:
    if installation.dispatch_date is None:
        return False
    message = installation_message(
        installation.work_order_number, installation.dispatch_date.isoformat()
    )
    return _deliver(db, installation, SubjectKind.INSTALLATION, message)


def notify_quote_sent(db: Session, quote: Quote) -> bool:
    message = quote_message(quote.quote_number, quote.total)
    return _deliver(db, quote, SubjectKind.QUOTE, message)


def notify_contract_renewal(db: Session, contract: Contract, days_remaining: int) -> bool:
    message = contract_reminder_message(contract.contract_number, days_remaining)
    return _deliver(db, contract, SubjectKind.CONTRACT, message)
