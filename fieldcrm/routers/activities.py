"""Activity feed router - log entries for any record kind."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db
from fieldcrm.core.exceptions import NotFoundError
from fieldcrm.db.enums import SubjectKind
from fieldcrm.schemas.activity import ActivityListResponse, ActivityRead
from fieldcrm.schemas.auth import UserSession
from fieldcrm.services import activity_service
from fieldcrm.services.activity_service import ActivitySubject

router = APIRouter()


@router.get("", response_model=ActivityListResponse)
def list_activities(
    subject_kind: SubjectKind,
    subject_id: UUID,
    limit: int | None = Query(None, ge=1, le=500),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Entries for one record, newest first. 404 when the record is not in the caller's org."""
    subject = ActivitySubject(kind=subject_kind, id=subject_id)
    if not activity_service.subject_exists(db, session.org_id, subject):
        raise NotFoundError(resource=subject_kind.value.replace("_", " ").capitalize(), resource_id=subject_id)
    entries = activity_service.list_activities(db, session.org_id, subject, limit=limit)
    return ActivityListResponse(items=[ActivityRead.model_validate(e) for e in entries])
