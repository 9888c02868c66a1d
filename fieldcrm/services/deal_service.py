"""Deal service - sales pipeline with stage changes tracked in the activity log."""

from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import NotFoundError
from fieldcrm.core.workflows import DEAL_WORKFLOW
from fieldcrm.db.enums import SubjectKind
from fieldcrm.db.models import Deal
from fieldcrm.schemas.auth import UserSession
from fieldcrm.schemas.deal import DealCreate, DealUpdate
from fieldcrm.services import reference_service, status_workflow
from fieldcrm.services.activity_service import ActivitySubject
from fieldcrm.services.document_service import apply_changes
from fieldcrm.utils.pagination import PaginationParams, paginate_query


def create_deal(db: Session, session: UserSession, data: DealCreate) -> Deal:
    values = data.model_dump()
    reference_service.check_references(db, session.org_id, values)
    deal = Deal(organization_id=session.org_id, created_by_user_id=session.user_id)
    apply_changes(deal, values)
    db.add(deal)
    db.commit()
    db.refresh(deal)
    return deal


def get_deal(db: Session, org_id: UUID, deal_id: UUID) -> Deal:
    deal = db.query(Deal).filter(
        Deal.id == deal_id,
        Deal.organization_id == org_id,
    ).first()
    if deal is None:
        raise NotFoundError(resource="Deal", resource_id=deal_id)
    return deal


def list_deals(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    stage: str | None = None,
    account_id: UUID | None = None,
    q: str | None = None,
) -> tuple[list[Deal], int]:
    query = db.query(Deal).filter(Deal.organization_id == org_id)
    if stage:
        query = query.filter(Deal.stage == stage)
    if account_id:
        query = query.filter(Deal.account_id == account_id)
    if q:
        query = query.filter(Deal.name.ilike(f"%{q.strip()}%"))
    query = query.order_by(Deal.created_at.desc(), Deal.name)
    return paginate_query(query, pagination)


def update_deal(db: Session, session: UserSession, deal_id: UUID, data: DealUpdate) -> Deal:
    """Partial update; a stage change is logged like a document status change."""
    deal = get_deal(db, session.org_id, deal_id)
    values = data.model_dump(exclude_unset=True)
    new_stage = values.pop("stage", None)
    if new_stage is not None:
        status_workflow.check_status_change(deal, DEAL_WORKFLOW, new_stage, resource="Deal")

    reference_service.check_references(db, session.org_id, values)
    apply_changes(deal, values)

    if new_stage is not None:
        status_workflow.apply_status_change(
            db=db,
            record=deal,
            workflow=DEAL_WORKFLOW,
            subject=ActivitySubject(kind=SubjectKind.DEAL, id=deal.id),
            new_status=new_stage,
            organization_id=session.org_id,
            actor_user_id=session.user_id,
            resource="Deal",
        )

    db.commit()
    db.refresh(deal)
    return deal


def delete_deal(db: Session, session: UserSession, deal_id: UUID) -> None:
    deal = get_deal(db, session.org_id, deal_id)
    db.delete(deal)
    db.commit()
