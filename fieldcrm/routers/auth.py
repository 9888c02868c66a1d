"""Auth router - session introspection.

Sign-in lives with the identity provider, which issues the ``crm_session``
cookie; this API only reads it.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldcrm.core.deps import get_current_session, get_db
from fieldcrm.db.models import Organization, User
from fieldcrm.schemas.auth import MeResponse, UserSession

router = APIRouter()


@router.get("/me", response_model=MeResponse)
def get_me(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The caller's identity and the organization the session is bound to."""
    org = db.get(Organization, session.org_id)
    user = db.get(User, session.user_id)
    return MeResponse(
        user_id=session.user_id,
        email=session.email,
        display_name=user.display_name if user else session.display_name,
        org_id=org.id,
        org_name=org.name,
        org_code=org.code,
        role=session.role,
    )
