from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status

from chiya.infrastructure.cache.redis_client import ping_redis
from chiya.infrastructure.db.session import ping_database

router = APIRouter()

SERVICE_VERSION = "1.0.0"
_STARTED_AT = time.monotonic()


@router.get("/health")
def health() -> dict[str, object]:
    return {
        "status": "success",
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "version": SERVICE_VERSION,
    }


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    database_ready = ping_database(timeout_seconds=1.0)
    redis_ready = ping_redis(timeout_seconds=1.0)

    if database_ready and redis_ready:
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "unavailable",
        "checks": {"database": database_ready, "redis": redis_ready},
    }
