from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, TypeVar

from chiya.domain.common.ids import InventoryItemId, MenuItemId, StaffId, TableId
from chiya.domain.inventory.entities import InventoryItem
from chiya.domain.ledger.entities import CompletedOrder
from chiya.domain.menu.entities import MenuItem
from chiya.domain.staff.entities import Expense, StaffMember
from chiya.domain.table.entities import Table

T = TypeVar("T")


@dataclass(frozen=True)
class FloorState:
    """Everything the point-of-sale floor holds in memory.

    Collections are tuples so a state value can be shared freely between
    reducers; every change produces a new ``FloorState``.
    """

    tables: tuple[Table, ...] = ()
    menu_items: tuple[MenuItem, ...] = ()
    completed_orders: tuple[CompletedOrder, ...] = ()
    inventory: tuple[InventoryItem, ...] = ()
    staff: tuple[StaffMember, ...] = ()
    expenses: tuple[Expense, ...] = ()

    def table(self, table_id: TableId) -> Table | None:
        return _first(self.tables, lambda table: table.table_id == table_id)

    def menu_item(self, item_id: MenuItemId) -> MenuItem | None:
        return _first(self.menu_items, lambda item: item.item_id == item_id)

    def inventory_item(self, item_id: InventoryItemId) -> InventoryItem | None:
        return _first(self.inventory, lambda item: item.item_id == item_id)

    def staff_member(self, staff_id: StaffId) -> StaffMember | None:
        return _first(self.staff, lambda member: member.staff_id == staff_id)

    def with_tables(self, updates: dict[TableId, Table]) -> FloorState:
        if not updates:
            return self
        return replace(
            self,
            tables=tuple(updates.get(table.table_id, table) for table in self.tables),
        )


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Outcome:
    state: FloorState
    status: OutcomeStatus
    detail: str | None = None
    created_id: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == OutcomeStatus.APPLIED

    @classmethod
    def applied_to(cls, state: FloorState, created_id: str | None = None) -> Outcome:
        return cls(state=state, status=OutcomeStatus.APPLIED, created_id=created_id)

    @classmethod
    def not_found(cls, state: FloorState, detail: str) -> Outcome:
        return cls(state=state, status=OutcomeStatus.NOT_FOUND, detail=detail)

    @classmethod
    def unchanged(cls, state: FloorState, detail: str) -> Outcome:
        return cls(state=state, status=OutcomeStatus.UNCHANGED, detail=detail)


def _first(items: tuple[T, ...], predicate: Callable[[T], bool]) -> T | None:
    for item in items:
        if predicate(item):
            return item
    return None
