from __future__ import annotations

import logging

import redis

from chiya.application.ports.publisher import EventPublisher
from chiya.application.ports.security import TokenBlocklist
from chiya.infrastructure.cache.redis_client import get_redis_client, redis_configured

logger = logging.getLogger(__name__)

BLOCKLIST_KEY_PREFIX = "token_blocklist:"


class RedisEventPublisher(EventPublisher):
    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        get_redis_client(timeout_seconds=self._timeout_seconds).publish(channel, message)


class NullEventPublisher(EventPublisher):
    """Used when no Redis is configured; events are only logged."""

    def publish(self, channel: str, message: str) -> None:
        logger.debug("floor_event_dropped", extra={"detail": channel})


class RedisTokenBlocklist(TokenBlocklist):
    """Revoked token ids kept in Redis until the token would have expired.

    Redis outages fail open: a revoke that cannot be stored is logged and a
    lookup that cannot be answered reports the token as not revoked.
    """

    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def revoke(self, token_id: str, ttl_seconds: int) -> None:
        if not redis_configured():
            logger.warning("token_blocklist_unavailable", extra={"detail": "REDIS_URL missing"})
            return
        try:
            get_redis_client(timeout_seconds=self._timeout_seconds).setex(
                f"{BLOCKLIST_KEY_PREFIX}{token_id}",
                ttl_seconds,
                "1",
            )
        except redis.RedisError:
            logger.warning("token_blocklist_write_failed", exc_info=True)

    def is_revoked(self, token_id: str) -> bool:
        if not redis_configured():
            return False
        try:
            return bool(
                get_redis_client(timeout_seconds=self._timeout_seconds).exists(
                    f"{BLOCKLIST_KEY_PREFIX}{token_id}"
                )
            )
        except redis.RedisError:
            logger.warning("token_blocklist_read_failed", exc_info=True)
            return False


def build_event_publisher(timeout_seconds: float = 1.0) -> EventPublisher:
    if redis_configured():
        return RedisEventPublisher(timeout_seconds=timeout_seconds)
    return NullEventPublisher()
