"""Session token signing and verification.

The ``crm_session`` cookie carries an HS256 JWT naming the user, the
organization the session is bound to, and the user's token version
(bumped to revoke every outstanding session).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from fieldcrm.core.config import settings

ALGORITHM = "HS256"


class InvalidSessionError(Exception):
    """Token is unsigned, expired, or missing required claims."""


@dataclass(frozen=True)
class SessionClaims:
    user_id: UUID
    org_id: UUID
    role: str
    token_version: int


def create_session_token(
    user_id: UUID,
    org_id: UUID,
    role: str,
    token_version: int,
) -> str:
    """Sign a session token with the current JWT_SECRET."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "org_id": str(org_id),
        "role": role,
        "token_version": token_version,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def _verify(token: str) -> dict:
    # Current secret first, then the previous one during rotation
    error: jwt.InvalidTokenError | None = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError as exc:
            raise InvalidSessionError("Session expired") from exc
        except jwt.InvalidTokenError as exc:
            error = exc
    raise InvalidSessionError("Invalid session token") from error


def decode_session_token(token: str) -> SessionClaims:
    """
    Verify a session token and return its claims.

    Raises:
        InvalidSessionError: bad signature, expired, or malformed claims
    """
    payload = _verify(token)
    try:
        return SessionClaims(
            user_id=UUID(payload["sub"]),
            org_id=UUID(payload["org_id"]),
            role=str(payload["role"]),
            token_version=int(payload["token_version"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidSessionError("Malformed session claims") from exc
