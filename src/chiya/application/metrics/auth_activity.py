from __future__ import annotations

from prometheus_client import Counter

AUTH_EVENTS_TOTAL = Counter(
    "chiya_auth_events_total",
    "Total number of authentication events by type.",
    ["event"],
)


def record_auth_event(event: str) -> None:
    AUTH_EVENTS_TOTAL.labels(event=event).inc()
