"""Contract service - CRUD, status workflow and renewal reminders."""

import logging
from datetime import date, datetime, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.config import settings
from fieldcrm.core.document_types import CONTRACT
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.db.enums import ContractStatus
from fieldcrm.db.models import Contract, utcnow
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.contract import ContractCreate, ContractUpdate
from fieldcrm.services import document_service, notification_service, reference_service
from fieldcrm.utils.pagination import PaginationParams

logger = logging.getLogger(__name__)


def create_contract(
    db: Session,
    session: UserSession,
    data: ContractCreate,
    now: datetime | None = None,
) -> Contract:
    reference_service.check_references(
        db, session.org_id, data.model_dump(include={"account_id", "contact_id", "deal_id"})
    )

    def build(code: str) -> Contract:
        return Contract(
            contract_number=code,
            name=data.name,
            contract_type=data.contract_type,
            status=CONTRACT.workflow.initial.value,
            account_id=data.account_id,
            contact_id=data.contact_id,
            deal_id=data.deal_id,
            effective_date=data.effective_date,
            end_date=data.end_date,
            value=data.value,
            terms=data.terms,
        )

    return document_service.create_document(
        db, session, CONTRACT, build, now=now,
        description=f'Contract "{data.name}" was created',
    )


def get_contract(db: Session, org_id: UUID, contract_id: UUID) -> Contract:
    return document_service.require_document(db, org_id, CONTRACT, contract_id)


def list_contracts(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    account_id: UUID | None = None,
    deal_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[Contract], int]:
    return document_service.list_documents(
        db, org_id, CONTRACT, pagination,
        status=status,
        q=q,
        filters={"account_id": account_id, "deal_id": deal_id},
    )


def update_contract(
    db: Session,
    session: UserSession,
    contract_id: UUID,
    data: ContractUpdate,
) -> Contract:
    record = get_contract(db, session.org_id, contract_id)
    values = data.model_dump(exclude_unset=True)
    new_status = values.pop("status", None)
    if new_status is not None:
        document_service.check_status(CONTRACT, record, new_status)

    reference_service.check_references(db, session.org_id, values)
    document_service.apply_changes(record, values)
    if "end_date" in values:
        # A new end date earns a new reminder
        record.renewal_reminder_sent_at = None

    if new_status is not None:
        document_service.change_status(db, session, CONTRACT, record, new_status)

    db.commit()
    db.refresh(record)
    return record


def delete_contract(db: Session, session: UserSession, contract_id: UUID) -> None:
    document_service.delete_document(db, session, CONTRACT, contract_id)


# =============================================================================
# Renewal reminders
# =============================================================================

def contracts_due_for_reminder(
    db: Session,
    today: date,
    org_id: UUID | None = None,
) -> list[Contract]:
    """ACTIVE contracts ending within the reminder window that were not reminded yet."""
    horizon = today + timedelta(days=settings.CONTRACT_RENEWAL_REMINDER_DAYS)
    query = db.query(Contract).filter(
        Contract.status == ContractStatus.ACTIVE.value,
        Contract.end_date.isnot(None),
        Contract.end_date >= today,
        Contract.end_date <= horizon,
        Contract.renewal_reminder_sent_at.is_(None),
    )
    if org_id is not None:
        query = query.filter(Contract.organization_id == org_id)
    return query.order_by(Contract.end_date).all()


def send_contract_renewal_reminders(
    db: Session,
    today: date | None = None,
    org_id: UUID | None = None,
) -> dict[str, int]:
    """
    Send one WhatsApp renewal reminder per expiring contract.

    A contract is marked as reminded only when the message went out, so a
    failed send is retried on the next run and a successful one is never
    repeated.
    """
    today = today or utcnow().date()
    contracts = contracts_due_for_reminder(db, today, org_id)

    sent = 0
    skipped_no_phone = 0
    for contract in contracts:
        if not notification_service.recipient_phone(contract):
            skipped_no_phone += 1
            continue
        days_remaining = (contract.end_date - today).days
        if notification_service.notify_contract_renewal(db, contract, days_remaining):
            contract.renewal_reminder_sent_at = utcnow()
            db.commit()
            sent += 1

    logger.info(
        "Contract renewal sweep: checked=%d sent=%d skipped_no_phone=%d",
        len(contracts),
        sent,
        skipped_no_phone,
        extra=build_log_context(org_id=str(org_id) if org_id else None),
    )
    return {
        "contracts_checked": len(contracts),
        "reminders_sent": sent,
        "skipped_no_phone": skipped_no_phone,
    }
