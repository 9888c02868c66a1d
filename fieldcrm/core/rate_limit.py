"""Request rate limiting (slowapi), keyed by client address."""

import logging

import redis
from slowapi import Limiter
from slowapi.util import get_remote_address

from fieldcrm.core.config import settings

logger = logging.getLogger(__name__)

MEMORY_STORAGE = "memory://"


def default_limits() -> list[str]:
    if settings.TESTING or settings.RATE_LIMIT_API <= 0:
        return []
    return [f"{settings.RATE_LIMIT_API}/minute"]


def storage_uri() -> str:
    """Redis when configured and reachable (shared across workers), else in-process memory."""
    if settings.TESTING or not settings.REDIS_URL:
        return MEMORY_STORAGE
    try:
        redis.from_url(settings.REDIS_URL, socket_connect_timeout=1).ping()
    except (redis.RedisError, ValueError) as exc:
        logger.warning("Redis unavailable for rate limiting, using in-memory: %s", exc)
        return MEMORY_STORAGE
    return settings.REDIS_URL


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=storage_uri(),
    default_limits=default_limits(),
)
