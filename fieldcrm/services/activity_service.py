"""Activity logging service - append-only audit trail for all record kinds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.db.enums import ActivityType, SubjectKind
from fieldcrm.db.models import (
    Account, ActivityLog, Contact, Contract, Deal, Installation, Lead,
    Quote, SalesOrder, ServiceRequest,
)

SUBJECT_MODELS: dict[SubjectKind, type] = {
    SubjectKind.ACCOUNT: Account,
    SubjectKind.CONTACT: Contact,
    SubjectKind.LEAD: Lead,
    SubjectKind.DEAL: Deal,
    SubjectKind.SERVICE_REQUEST: ServiceRequest,
    SubjectKind.CONTRACT: Contract,
    SubjectKind.INSTALLATION: Installation,
    SubjectKind.QUOTE: Quote,
    SubjectKind.SALES_ORDER: SalesOrder,
}


@dataclass(frozen=True)
class ActivitySubject:
    """The record an activity entry describes (kind + id, no FK)."""

    kind: SubjectKind
    id: UUID

    @classmethod
    def from_row(cls, entry: ActivityLog) -> "ActivitySubject":
        return cls(kind=SubjectKind(entry.subject_kind), id=entry.subject_id)


def log_activity(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    activity_type: ActivityType,
    title: str,
    actor_user_id: UUID | None = None,
    description: str | None = None,
    details: dict[str, Any] | None = None,
) -> ActivityLog:
    """
    Append an activity entry.
    
    Args:
        db: Database session
        organization_id: Organization context
        subject: Record the entry documents
        activity_type: Category (from ActivityType enum)
        title: Short headline shown in activity feeds
        actor_user_id: User who performed the action (None for system)
        details: Type-specific details as JSON
        
    Returns:
        The created activity log entry
    """
    entry = ActivityLog(
        organization_id=organization_id,
        subject_kind=subject.kind.value,
        subject_id=subject.id,
        activity_type=activity_type.value,
        title=title,
        description=description,
        actor_user_id=actor_user_id,
        details=details,
    )
    db.add(entry)
    db.flush()  # Don't commit - let caller control transaction
    return entry


def log_record_created(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    actor_user_id: UUID | None,
    label: str,
    reference: str,
    description: str | None = None,
) -> ActivityLog:
    """Log record creation, e.g. "Service Request Created: SR-20240115-0001"."""
    return log_activity(
        db=db,
        organization_id=organization_id,
        subject=subject,
        activity_type=ActivityType.RECORD_CREATED,
        title=f"{label.title()} Created: {reference}",
        actor_user_id=actor_user_id,
        description=description,
    )


def log_status_changed(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    actor_user_id: UUID | None,
    label: str,
    from_status: str,
    to_status: str,
) -> ActivityLog:
    """Log a status transition with both the old and the new value."""
    return log_activity(
        db=db,
        organization_id=organization_id,
        subject=subject,
        activity_type=ActivityType.STATUS_CHANGED,
        title=f"Status changed: {from_status} → {to_status}",
        description=f"{label} status updated from {from_status} to {to_status}",
        actor_user_id=actor_user_id,
        details={"from": from_status, "to": to_status},
    )


def log_comment(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    actor_user_id: UUID,
    body: str,
) -> ActivityLog:
    """Log a manual comment."""
    return log_activity(
        db=db,
        organization_id=organization_id,
        subject=subject,
        activity_type=ActivityType.COMMENT,
        title="Comment added",
        description=body,
        actor_user_id=actor_user_id,
    )


def log_notification_sent(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    channel: str,
    message: str,
) -> ActivityLog:
    """Log an outbound customer notification (system actor)."""
    return log_activity(
        db=db,
        organization_id=organization_id,
        subject=subject,
        activity_type=ActivityType.NOTIFICATION_SENT,
        title=f"Notification sent via {channel}",
        description=message,
        details={"channel": channel},
    )


def subject_exists(db: Session, organization_id: UUID, subject: ActivitySubject) -> bool:
    """Check the subject record exists inside the organization."""
    model = SUBJECT_MODELS[subject.kind]
    return db.query(model.id).filter(
        model.id == subject.id,
        model.organization_id == organization_id,
    ).first() is not None


def list_activities(
    db: Session,
    organization_id: UUID,
    subject: ActivitySubject,
    limit: int | None = None,
) -> list[ActivityLog]:
    """List activity entries for a subject, newest first."""
    query = db.query(ActivityLog).filter(
        ActivityLog.organization_id == organization_id,
        ActivityLog.subject_kind == subject.kind.value,
        ActivityLog.subject_id == subject.id,
    ).order_by(ActivityLog.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
