"""Pydantic schemas for the activity log."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from fieldcrm.db.enums import ActivityType, SubjectKind


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=5000)


class ActivityRead(BaseModel):
    """Single activity log entry."""
    id: UUID
    activity_type: ActivityType
    subject_kind: SubjectKind
    subject_id: UUID
    title: str
    description: str | None
    actor_user_id: UUID | None
    details: dict[str, Any] | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ActivityListResponse(BaseModel):
    items: list[ActivityRead]
