"""Session context schemas."""

from uuid import UUID

from pydantic import BaseModel

from fieldcrm.db.enums import Role


class UserSession(BaseModel):
    """
    Tenant context for one authenticated request.

    Built by ``get_current_session`` and passed explicitly into every
    service call; ``org_id`` scopes every query.
    """
    user_id: UUID
    org_id: UUID
    role: Role
    email: str
    display_name: str


class MeResponse(BaseModel):
    user_id: UUID
    email: str
    display_name: str
    org_id: UUID
    org_name: str
    org_code: str
    role: Role
