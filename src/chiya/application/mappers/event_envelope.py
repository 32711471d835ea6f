from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from chiya.domain.table.entities import Table


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_floor_event(
    *,
    command: str,
    occurred_at: datetime,
    tables: list[Table],
    created_id: str | None,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=f"floor.{command}",
        occurred_at=occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "createdId": created_id,
            "tables": [
                {
                    "tableId": str(table.table_id),
                    "number": table.number,
                    "status": table.status.value,
                    "mergeType": table.merge_type.value if table.merge_type else None,
                    "lineCount": len(table.order),
                    "subtotal": {
                        "amountCents": table.subtotal().amount_cents,
                        "currency": table.subtotal().currency,
                    },
                }
                for table in tables
            ],
        },
    )
