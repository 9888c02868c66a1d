"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any

from fieldcrm.core.config import settings


def configure_logging() -> None:
    """Configure root logging for the API process."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_log_context(
    *,
    user_id: str | None = None,
    org_id: str | None = None,
    entity: str | None = None,
    entity_id: str | None = None,
    code: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (identifiers only)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if org_id:
        context["org_id"] = org_id
    if entity:
        context["entity"] = entity
    if entity_id:
        context["entity_id"] = entity_id
    if code:
        context["code"] = code
    return context
