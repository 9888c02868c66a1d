"""Numbered document service - shared create/list/get/update/delete logic.

Every function takes the organization (or the full UserSession) explicitly;
no query here runs without an organization_id filter.
"""

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fieldcrm.core.config import settings
from fieldcrm.core.document_types import DocumentType
from fieldcrm.core.exceptions import DuplicateCodeError, NotFoundError
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.schemas.auth import UserSession
from fieldcrm.services import activity_service, numbering_service, status_workflow
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.services.status_workflow import StatusChange
from fieldcrm.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)


def subject_for(doc_type: DocumentType, record) -> ActivitySubject:
    return ActivitySubject(kind=doc_type.kind, id=record.id)


def _is_code_conflict(error: IntegrityError, doc_type: DocumentType) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name == doc_type.constraint_name:
        return True
    message = str(error.orig) if error.orig else str(error)
    if doc_type.constraint_name in message:
        return True
    # SQLite names the columns instead of the constraint
    return f"{doc_type.model.__tablename__}.{doc_type.code_field}" in message


# =============================================================================
# Create
# =============================================================================

def create_document(
    db: Session,
    session: UserSession,
    doc_type: DocumentType,
    build: Callable[[str], Any],
    *,
    now: datetime | None = None,
    description: str | None = None,
):
    """
    Insert a new numbered document for the caller's organization.

    ``build(code)`` returns an unsaved model instance carrying the generated
    code. On a code collision (a concurrent creator took the same number)
    the instance is discarded and rebuilt with a freshly generated code, up
    to DOCUMENT_CODE_MAX_ATTEMPTS times.

    The creation activity entry is a second commit; if it fails the record
    stays and the failure is logged.
    """
    now = now or datetime.now(timezone.utc)
    day: date = now.date()
    max_attempts = max(1, settings.DOCUMENT_CODE_MAX_ATTEMPTS)

    record = None
    code = ""
    for attempt in range(max_attempts):
        code = numbering_service.next_document_code(db, session.org_id, doc_type, day)
        record = build(code)
        record.organization_id = session.org_id
        record.created_by_user_id = session.user_id
        record.created_at = now
        db.add(record)
        try:
            db.commit()
            db.refresh(record)
            break
        except IntegrityError as exc:
            db.rollback()
            if record in db:
                db.expunge(record)
            if _is_code_conflict(exc, doc_type):
                logger.warning(
                    "%s number collision on attempt %d",
                    doc_type.label,
                    attempt + 1,
                    extra=build_log_context(org_id=str(session.org_id), code=code),
                )
                record = None
                continue
            raise
    if record is None:
        raise DuplicateCodeError(resource=doc_type.label.lower(), document_code=code)

    try:
        activity_service.log_record_created(
            db=db,
            organization_id=session.org_id,
            subject=subject_for(doc_type, record),
            actor_user_id=session.user_id,
            label=doc_type.label,
            reference=code,
            description=description,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to log creation of %s %s",
            doc_type.label.lower(),
            code,
            extra=build_log_context(org_id=str(session.org_id), entity_id=str(record.id)),
        )

    logger.info(
        "Created %s %s",
        doc_type.label.lower(),
        code,
        extra=build_log_context(
            user_id=str(session.user_id), org_id=str(session.org_id), code=code
        ),
    )
    return record


# =============================================================================
# Read
# =============================================================================

def get_document(db: Session, org_id: UUID, doc_type: DocumentType, record_id: UUID):
    """Get a document by ID (org-scoped). None when absent or in another org."""
    model = doc_type.model
    return db.query(model).filter(
        model.id == record_id,
        model.organization_id == org_id,
    ).first()


def require_document(db: Session, org_id: UUID, doc_type: DocumentType, record_id: UUID):
    """Org-scoped lookup that raises NotFoundError on a miss."""
    record = get_document(db, org_id, doc_type, record_id)
    if record is None:
        raise NotFoundError(resource=doc_type.label, resource_id=record_id)
    return record


def list_documents(
    db: Session,
    org_id: UUID,
    doc_type: DocumentType,
    pagination: PaginationParams,
    *,
    status: str | None = None,
    q: str | None = None,
    filters: dict[str, Any] | None = None,
) -> tuple[list, int]:
    """
    List documents for an organization, newest first.

    ``q`` is a case-insensitive substring match over the type's search
    fields; ``filters`` are equality filters on model columns (None values
    are skipped).
    """
    model = doc_type.model
    query = db.query(model).filter(model.organization_id == org_id)

    if status:
        query = query.filter(getattr(model, doc_type.workflow.field) == status)

    for field, value in (filters or {}).items():
        if value is not None:
            query = query.filter(getattr(model, field) == value)

    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(
            or_(*[getattr(model, field).ilike(pattern) for field in doc_type.search_fields])
        )

    query = query.order_by(model.created_at.desc(), doc_type.code_column.desc())
    return paginate_query(query, pagination)


# =============================================================================
# Update / Delete
# =============================================================================

def apply_changes(record, values: dict[str, Any]) -> None:
    """
    Copy plain field updates onto a record, storing enum members by value.

    An explicit None for a NOT NULL column leaves the current value alone;
    partial-update payloads use null to mean "no change" for those fields.
    """
    columns = record.__table__.columns
    for field, value in values.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(record, field, value.value if isinstance(value, Enum) else value)


def check_status(doc_type: DocumentType, record, new_status: object) -> StatusChange:
    """Validate a requested status before any other field is applied."""
    return status_workflow.check_status_change(
        record, doc_type.workflow, new_status, resource=doc_type.label
    )


def change_status(
    db: Session,
    session: UserSession,
    doc_type: DocumentType,
    record,
    new_status: object,
) -> StatusChange:
    """Run the status workflow for a document (no commit)."""
    return status_workflow.apply_status_change(
        db=db,
        record=record,
        workflow=doc_type.workflow,
        subject=subject_for(doc_type, record),
        new_status=new_status,
        organization_id=session.org_id,
        actor_user_id=session.user_id,
        resource=doc_type.label,
    )


def delete_document(db: Session, session: UserSession, doc_type: DocumentType, record_id: UUID) -> None:
    """Delete a document. Its activity entries are kept."""
    record = require_document(db, session.org_id, doc_type, record_id)
    code = getattr(record, doc_type.code_field)
    db.delete(record)
    db.commit()
    logger.info(
        "Deleted %s %s",
        doc_type.label.lower(),
        code,
        extra=build_log_context(
            user_id=str(session.user_id), org_id=str(session.org_id), code=code
        ),
    )


# =============================================================================
# Comments / Activity
# =============================================================================

def add_comment(
    db: Session,
    session: UserSession,
    doc_type: DocumentType,
    record_id: UUID,
    body: str,
):
    """Append a manual comment to a document's activity log."""
    record = require_document(db, session.org_id, doc_type, record_id)
    entry = activity_service.log_comment(
        db=db,
        organization_id=session.org_id,
        subject=subject_for(doc_type, record),
        actor_user_id=session.user_id,
        body=body,
    )
    db.commit()
    db.refresh(entry)
    return entry


def list_document_activity(
    db: Session,
    org_id: UUID,
    doc_type: DocumentType,
    record_id: UUID,
):
    """Activity entries for a document, newest first."""
    record = require_document(db, org_id, doc_type, record_id)
    return activity_service.list_activities(db, org_id, subject_for(doc_type, record))
