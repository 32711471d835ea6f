from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from chiya.application.dto.responses import FloorCommandResponse, FloorSnapshotResponse
from chiya.application.mappers.event_envelope import serialize_floor_event
from chiya.application.mappers.floor_mapper import (
    to_completed_order_response,
    to_menu_item_response,
    to_table_response,
)
from chiya.application.metrics.floor_activity import (
    record_checkout,
    record_floor_command,
    record_table_statuses,
)
from chiya.application.ports.publisher import EventPublisher
from chiya.application.ports.repositories import FloorStateRepository
from chiya.application.use_cases.context import TraceContext
from chiya.domain.floor.commands import CheckoutTable, FloorCommand, command_name
from chiya.domain.floor.reducers import IdFactory, apply
from chiya.domain.floor.state import FloorState, Outcome
from chiya.domain.table.entities import Table

logger = logging.getLogger(__name__)

FLOOR_EVENTS_CHANNEL = "events:floor"


def new_prefixed_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplyFloorCommand:
    """Load the floor, apply one command, persist and announce the result."""

    def __init__(
        self,
        floor_repository: FloorStateRepository,
        publisher: EventPublisher,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: IdFactory = new_prefixed_id,
    ) -> None:
        self._floor_repository = floor_repository
        self._publisher = publisher
        self._clock = clock
        self._id_factory = id_factory

    def execute(self, command: FloorCommand, trace_ctx: TraceContext) -> FloorCommandResponse:
        now = self._clock()
        state = self._floor_repository.load()
        outcome = apply(state, command, now=now, new_id=self._id_factory)
        name = command_name(command)
        record_floor_command(name, outcome.status.value)

        if not outcome.applied:
            logger.info(
                "floor_command_skipped",
                extra={"command": name, "outcome": outcome.status.value, "detail": outcome.detail},
            )
            return _to_command_response(name, outcome, [])

        self._floor_repository.save(outcome.state)
        record_table_statuses(outcome.state)
        if isinstance(command, CheckoutTable):
            record_checkout(outcome.state.completed_orders[-1])

        touched = _touched_tables(state, outcome.state)
        logger.info(
            "floor_command_applied",
            extra={"command": name, "outcome": outcome.status.value, "created_id": outcome.created_id},
        )
        message = serialize_floor_event(
            command=name,
            occurred_at=now,
            tables=touched,
            created_id=outcome.created_id,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=FLOOR_EVENTS_CHANNEL, message=message)
        except Exception:
            logger.warning("floor_event_publish_failed", exc_info=True, extra={"command": name})

        return _to_command_response(name, outcome, touched)


class GetFloorSnapshot:
    def __init__(self, floor_repository: FloorStateRepository) -> None:
        self._floor_repository = floor_repository

    def execute(self) -> FloorSnapshotResponse:
        state = self._floor_repository.load()
        return FloorSnapshotResponse(
            tables=[to_table_response(table) for table in state.tables],
            menuItems=[to_menu_item_response(item) for item in state.menu_items],
            completedOrders=[to_completed_order_response(order) for order in state.completed_orders],
        )


def _touched_tables(before: FloorState, after: FloorState) -> list[Table]:
    previous = {table.table_id: table for table in before.tables}
    return [table for table in after.tables if previous.get(table.table_id) != table]


def _to_command_response(
    name: str, outcome: Outcome, tables: list[Table]
) -> FloorCommandResponse:
    return FloorCommandResponse(
        command=name,
        outcome=outcome.status.value,
        detail=outcome.detail,
        createdId=outcome.created_id,
        tables=[to_table_response(table) for table in tables],
    )
