from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chiya.domain.common.ids import (
    InventoryItemId,
    LineItemId,
    MenuItemId,
    StaffId,
    TableId,
)
from chiya.domain.common.money import Money
from chiya.domain.ledger.entities import PaymentMethod
from chiya.domain.menu.entities import MenuItem
from chiya.domain.staff.entities import ClockAction


@dataclass(frozen=True)
class AddOrderItem:
    table_id: TableId
    menu_item: MenuItem
    quantity: int = 1
    notes: str | None = None


@dataclass(frozen=True)
class RemoveOrderItem:
    table_id: TableId
    line_id: LineItemId


@dataclass(frozen=True)
class MergeTables:
    main_table_id: TableId
    secondary_ids: tuple[TableId, ...]


@dataclass(frozen=True)
class UnmergeTables:
    main_table_id: TableId


@dataclass(frozen=True)
class ShiftTable:
    from_table_id: TableId
    to_table_id: TableId


@dataclass(frozen=True)
class CheckoutTable:
    table_id: TableId
    payment_method: PaymentMethod
    discount: Money


@dataclass(frozen=True)
class AddMenuItem:
    name: str
    category: str
    price: Money
    is_available: bool = True
    description: str | None = None


@dataclass(frozen=True)
class UpdateMenuItem:
    item_id: MenuItemId
    name: str | None = None
    category: str | None = None
    price: Money | None = None
    is_available: bool | None = None
    description: str | None = None


@dataclass(frozen=True)
class DeleteMenuItem:
    item_id: MenuItemId


@dataclass(frozen=True)
class UpdateInventory:
    item_id: InventoryItemId
    quantity: float


@dataclass(frozen=True)
class MarkAttendance:
    staff_id: StaffId
    present: bool


@dataclass(frozen=True)
class ClockInOut:
    staff_id: StaffId
    action: ClockAction


@dataclass(frozen=True)
class AddExpense:
    staff_id: StaffId
    category: str
    amount: Money
    description: str
    date: datetime


FloorCommand = (
    AddOrderItem
    | RemoveOrderItem
    | MergeTables
    | UnmergeTables
    | ShiftTable
    | CheckoutTable
    | AddMenuItem
    | UpdateMenuItem
    | DeleteMenuItem
    | UpdateInventory
    | MarkAttendance
    | ClockInOut
    | AddExpense
)


def command_name(command: FloorCommand) -> str:
    """Snake-case name used for metrics labels and event types."""
    name = type(command).__name__
    return "".join(f"_{char.lower()}" if char.isupper() else char for char in name).lstrip("_")
