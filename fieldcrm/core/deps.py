"""FastAPI dependencies: database session, tenant-scoped auth context, CSRF."""

from typing import Generator, Iterable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from fieldcrm.core.security import InvalidSessionError, SessionClaims, decode_session_token
from fieldcrm.db.enums import Role
from fieldcrm.db.models import Membership, User
from fieldcrm.db.session import SessionLocal
from fieldcrm.schemas.auth import UserSession


COOKIE_NAME = "crm_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """One session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _session_claims(request: Request) -> SessionClaims:
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        return decode_session_token(token)
    except InvalidSessionError as exc:
        raise HTTPException(status_code=401, detail=str(exc))


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
) -> UserSession:
    """
    Resolve the caller's tenant context.

    The organization comes from the signed token and must match a
    membership row; the role is read from that membership so a role change
    applies without re-issuing the cookie.

    Raises:
        HTTPException 401: missing/invalid/revoked session, unknown or disabled user
        HTTPException 403: no membership in the token's organization, unknown role
    """
    claims = _session_claims(request)

    user = db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid session")
    if user.token_version != claims.token_version:
        raise HTTPException(status_code=401, detail="Session revoked")

    membership = db.query(Membership).filter(
        Membership.user_id == user.id,
        Membership.organization_id == claims.org_id,
    ).first()
    if membership is None:
        raise HTTPException(status_code=403, detail="No membership in this organization")
    if not Role.has_value(membership.role):
        raise HTTPException(
            status_code=403,
            detail=f"Unknown role '{membership.role}'. Contact administrator.",
        )

    return UserSession(
        user_id=user.id,
        org_id=membership.organization_id,
        role=Role(membership.role),
        email=user.email,
        display_name=user.display_name,
    )


def require_roles(allowed_roles: Iterable[Role]):
    """
    Dependency factory for role-gated endpoints. Yields the UserSession.

    Usage:
        session: UserSession = Depends(require_roles([Role.ADMIN]))
    """
    allowed = frozenset(allowed_roles)

    def dependency(session: UserSession = Depends(get_current_session)) -> UserSession:
        if session.role not in allowed:
            raise HTTPException(
                status_code=403,
                detail=f"Role '{session.role.value}' not authorized for this action",
            )
        return session

    return dependency


def require_csrf_header(request: Request) -> None:
    """Mutations must carry ``X-Requested-With: XMLHttpRequest``."""
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )
