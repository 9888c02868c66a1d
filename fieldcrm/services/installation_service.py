"""Installation service - work orders for on-site installs."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.document_types import INSTALLATION
from fieldcrm.db.enums import InstallationStatus
from fieldcrm.db.models import Installation
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.installation import InstallationCreate, InstallationUpdate
from fieldcrm.services import document_service, notification_service, reference_service
from fieldcrm.utils.pagination import PaginationParams


def create_installation(
    db: Session,
    session: UserSession,
    data: InstallationCreate,
    now: datetime | None = None,
) -> Installation:
    reference_service.check_references(
        db, session.org_id,
        data.model_dump(include={"account_id", "contact_id", "sales_order_id"}),
    )

    def build(code: str) -> Installation:
        return Installation(
            work_order_number=code,
            status=INSTALLATION.workflow.initial.value,
            account_id=data.account_id,
            contact_id=data.contact_id,
            sales_order_id=data.sales_order_id,
            dispatch_date=data.dispatch_date,
            engineer_team=list(data.engineer_team),
            notes=data.notes,
        )

    return document_service.create_document(
        db, session, INSTALLATION, build, now=now,
        description="Installation work order was created",
    )


def get_installation(db: Session, org_id: UUID, installation_id: UUID) -> Installation:
    return document_service.require_document(db, org_id, INSTALLATION, installation_id)


def list_installations(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    account_id: UUID | None = None,
    sales_order_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[Installation], int]:
    return document_service.list_documents(
        db, org_id, INSTALLATION, pagination,
        status=status,
        q=q,
        filters={"account_id": account_id, "sales_order_id": sales_order_id},
    )


def update_installation(
    db: Session,
    session: UserSession,
    installation_id: UUID,
    data: InstallationUpdate,
) -> Installation:
    """Partial update; moving to SCHEDULED with a dispatch date notifies the customer."""
    record = get_installation(db, session.org_id, installation_id)
    values = data.model_dump(exclude_unset=True)
    new_status = values.pop("status", None)
    if new_status is not None:
        document_service.check_status(INSTALLATION, record, new_status)

    reference_service.check_references(db, session.org_id, values)
    document_service.apply_changes(record, values)

    change = None
    if new_status is not None:
        change = document_service.change_status(db, session, INSTALLATION, record, new_status)

    db.commit()
    db.refresh(record)

    if (
        change is not None
        and change.changed
        and change.new == InstallationStatus.SCHEDULED.value
        and record.dispatch_date is not None
    ):
        notification_service.notify_installation_scheduled(db, record)
    return record


def delete_installation(db: Session, session: UserSession, installation_id: UUID) -> None:
    document_service.delete_document(db, session, INSTALLATION, installation_id)
