from __future__ import annotations

from prometheus_client import Counter, Gauge

from chiya.domain.floor.state import FloorState
from chiya.domain.ledger.entities import CompletedOrder

FLOOR_COMMANDS_TOTAL = Counter(
    "chiya_floor_commands_total",
    "Total number of floor commands by outcome.",
    ["command", "outcome"],
)

CHECKOUTS_TOTAL = Counter(
    "chiya_checkouts_total",
    "Total number of table checkouts by payment method.",
    ["payment_method"],
)

CHECKOUT_REVENUE_CENTS_TOTAL = Counter(
    "chiya_checkout_revenue_cents_total",
    "Settled revenue in minor units, negative totals excluded.",
    ["currency"],
)

TABLES_BY_STATUS = Gauge(
    "chiya_tables_by_status",
    "Current number of tables per status.",
    ["status"],
)


def record_floor_command(command: str, outcome: str) -> None:
    FLOOR_COMMANDS_TOTAL.labels(command=command, outcome=outcome).inc()


def record_checkout(order: CompletedOrder) -> None:
    CHECKOUTS_TOTAL.labels(payment_method=order.payment_method.value).inc()
    if order.total.amount_cents > 0:
        CHECKOUT_REVENUE_CENTS_TOTAL.labels(currency=order.total.currency).inc(
            order.total.amount_cents
        )


def record_table_statuses(state: FloorState) -> None:
    counts: dict[str, int] = {}
    for table in state.tables:
        counts[table.status.value] = counts.get(table.status.value, 0) + 1
    for status in ("available", "occupied", "merged"):
        TABLES_BY_STATUS.labels(status=status).set(counts.get(status, 0))
