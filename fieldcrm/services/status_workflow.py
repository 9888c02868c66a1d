"""Status workflow engine - validate and apply status changes with audit entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.config import settings
from fieldcrm.core.exceptions import InvalidStatusError, InvalidStatusTransitionError
from fieldcrm.core.workflows import DocumentWorkflow
from fieldcrm.services import activity_service
from fieldcrm.services.activity_service import ActivitySubject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusChange:
    """Outcome of a status update request."""

    old: str
    new: str

    @property
    def changed(self) -> bool:
        return self.old != self.new


def validate_status(workflow: DocumentWorkflow, value: object, resource: str) -> str:
    """Return the stored value for a requested status, or raise InvalidStatusError."""
    raw = value.value if hasattr(value, "value") else value
    if not isinstance(raw, str) or raw not in workflow.values:
        raise InvalidStatusError(resource=resource, value=str(raw), allowed=workflow.values)
    return raw


def check_status_change(
    record,
    workflow: DocumentWorkflow,
    new_status: object,
    *,
    resource: str,
    strict: bool | None = None,
) -> StatusChange:
    """
    Validate a requested status against the record without changing it.

    Callers run this before touching any other field so a rejected status
    leaves the record clean.
    """
    target = validate_status(workflow, new_status, resource)
    current = getattr(record, workflow.field)
    change = StatusChange(old=current, new=target)
    if not change.changed:
        return change

    if strict is None:
        strict = settings.STRICT_STATUS_WORKFLOW
    if strict and workflow.is_terminal(current):
        raise InvalidStatusTransitionError(resource=resource, current=current, value=target)
    return change


def apply_status_change(
    db: Session,
    record,
    workflow: DocumentWorkflow,
    subject: ActivitySubject,
    new_status: object,
    *,
    organization_id: UUID,
    actor_user_id: UUID | None,
    resource: str,
    strict: bool | None = None,
) -> StatusChange:
    """
    Set the record's status field and log the transition.

    Any member of the workflow's enum may follow any other. With
    ``strict`` (default: STRICT_STATUS_WORKFLOW) a record in a terminal
    status cannot move again. Writing the current value again is accepted
    and logs nothing. Does not commit - the status write and its log
    entry land in the caller's transaction together.
    """
    change = check_status_change(record, workflow, new_status, resource=resource, strict=strict)
    if not change.changed:
        return change
    current, target = change.old, change.new

    setattr(record, workflow.field, target)
    activity_service.log_status_changed(
        db=db,
        organization_id=organization_id,
        subject=subject,
        actor_user_id=actor_user_id,
        label=resource,
        from_status=current,
        to_status=target,
    )
    logger.info(
        "%s %s status %s -> %s", resource, subject.id, current, target,
    )
    return change
