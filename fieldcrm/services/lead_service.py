"""Lead service - prospects with a status pipeline, activities and comments."""

import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import NotFoundError
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.core.workflows import LEAD_WORKFLOW
from fieldcrm.db.enums import SubjectKind
from fieldcrm.db.models import ActivityLog, Lead
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.lead import LeadCreate, LeadUpdate
from fieldcrm.services import activity_service, reference_service, status_workflow
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.services.document_service import apply_changes
from fieldcrm.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)


def _subject(lead: Lead) -> ActivitySubject:
    return ActivitySubject(kind=SubjectKind.LEAD, id=lead.id)


def create_lead(db: Session, session: UserSession, data: LeadCreate) -> Lead:
    """Create a lead, then log its creation (best effort, separate commit)."""
    values = data.model_dump()
    reference_service.check_references(db, session.org_id, values)
    lead = Lead(
        organization_id=session.org_id,
        created_by_user_id=session.user_id,
        status=LEAD_WORKFLOW.initial.value,
    )
    apply_changes(lead, values)
    db.add(lead)
    db.commit()
    db.refresh(lead)

    try:
        activity_service.log_record_created(
            db=db,
            organization_id=session.org_id,
            subject=_subject(lead),
            actor_user_id=session.user_id,
            label="Lead",
            reference=lead.name,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Failed to log lead creation",
            extra=build_log_context(org_id=str(session.org_id), entity_id=str(lead.id)),
        )
    return lead


def get_lead(db: Session, org_id: UUID, lead_id: UUID) -> Lead:
    lead = db.query(Lead).filter(
        Lead.id == lead_id,
        Lead.organization_id == org_id,
    ).first()
    if lead is None:
        raise NotFoundError(resource="Lead", resource_id=lead_id)
    return lead


def list_leads(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    status: str | None = None,
    source: str | None = None,
    assigned_to_user_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[Lead], int]:
    query = db.query(Lead).filter(Lead.organization_id == org_id)
    if status:
        query = query.filter(Lead.status == status)
    if source:
        query = query.filter(Lead.source == source)
    if assigned_to_user_id:
        query = query.filter(Lead.assigned_to_user_id == assigned_to_user_id)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(
            or_(Lead.name.ilike(pattern), Lead.company.ilike(pattern), Lead.email.ilike(pattern))
        )
    query = query.order_by(Lead.created_at.desc(), Lead.name)
    return paginate_query(query, pagination)


def update_lead(db: Session, session: UserSession, lead_id: UUID, data: LeadUpdate) -> Lead:
    """Partial update; a status change is logged in the same commit."""
    lead = get_lead(db, session.org_id, lead_id)
    values = data.model_dump(exclude_unset=True)
    new_status = values.pop("status", None)
    if new_status is not None:
        status_workflow.check_status_change(lead, LEAD_WORKFLOW, new_status, resource="Lead")

    reference_service.check_references(db, session.org_id, values)
    apply_changes(lead, values)

    if new_status is not None:
        status_workflow.apply_status_change(
            db=db,
            record=lead,
            workflow=LEAD_WORKFLOW,
            subject=_subject(lead),
            new_status=new_status,
            organization_id=session.org_id,
            actor_user_id=session.user_id,
            resource="Lead",
        )

    db.commit()
    db.refresh(lead)
    return lead


def delete_lead(db: Session, session: UserSession, lead_id: UUID) -> None:
    """Delete a lead. Its activity entries are kept."""
    lead = get_lead(db, session.org_id, lead_id)
    db.delete(lead)
    db.commit()


def add_lead_comment(db: Session, session: UserSession, lead_id: UUID, body: str) -> ActivityLog:
    lead = get_lead(db, session.org_id, lead_id)
    entry = activity_service.log_comment(
        db=db,
        organization_id=session.org_id,
        subject=_subject(lead),
        actor_user_id=session.user_id,
        body=body,
    )
    db.commit()
    db.refresh(entry)
    return entry


def list_lead_activity(db: Session, org_id: UUID, lead_id: UUID) -> list[ActivityLog]:
    lead = get_lead(db, org_id, lead_id)
    return activity_service.list_activities(db, org_id, _subject(lead))
