from __future__ import annotations

from datetime import datetime, timezone

from chiya.domain.common.ids import InventoryItemId, MenuItemId, StaffId, TableId
from chiya.domain.common.money import Money
from chiya.domain.floor.state import FloorState
from chiya.domain.inventory.entities import InventoryItem
from chiya.domain.menu.entities import MenuItem
from chiya.domain.staff.entities import StaffMember
from chiya.domain.table.entities import Table

TABLE_COUNT = 12

_MENU = (
    ("1", "Masala Chai", "Milk Tea", 25),
    ("2", "Cardamom Tea", "Milk Tea", 30),
    ("3", "Ginger Tea", "Milk Tea", 28),
    ("4", "Plain Black Tea", "Black Tea", 20),
    ("5", "Lemon Tea", "Black Tea", 25),
    ("6", "Green Tea", "Green Tea", 35),
    ("7", "Honey Ginger Tea", "Special", 40),
    ("8", "Butter Tea", "Special", 45),
)

_INVENTORY = (
    ("1", "Milk", "Liter", 15, 5),
    ("2", "Tea Leaves", "Kg", 3, 1),
    ("3", "Sugar", "Kg", 8, 2),
    ("4", "Cardamom", "Gram", 200, 50),
    ("5", "Ginger", "Kg", 2, 0.5),
)


def _capacity(index: int) -> int:
    if index < 4:
        return 2
    if index < 8:
        return 4
    return 6


def _area(index: int) -> str:
    if index < 6:
        return "Main Area"
    if index < 10:
        return "Garden Area"
    return "VIP Area"


def sample_tables() -> tuple[Table, ...]:
    return tuple(
        Table(
            table_id=TableId(f"table-{index + 1}"),
            number=index + 1,
            capacity=_capacity(index),
            area=_area(index),
        )
        for index in range(TABLE_COUNT)
    )


def sample_menu() -> tuple[MenuItem, ...]:
    return tuple(
        MenuItem(
            item_id=MenuItemId(item_id),
            name=name,
            category=category,
            price=Money(amount_cents=rupees * 100),
        )
        for item_id, name, category, rupees in _MENU
    )


def sample_floor_state(now: datetime | None = None) -> FloorState:
    """The floor a fresh shop starts with: empty tables, the tea menu, stock and staff."""
    stamp = now or datetime.now(timezone.utc)
    inventory = tuple(
        InventoryItem(
            item_id=InventoryItemId(item_id),
            name=name,
            unit=unit,
            current_stock=float(current),
            min_stock=float(minimum),
            last_updated=stamp,
        )
        for item_id, name, unit, current, minimum in _INVENTORY
    )
    staff = (
        StaffMember(StaffId("1"), "Ram Bahadur", "Manager", is_present=True, clock_in=stamp),
        StaffMember(StaffId("2"), "Sita Devi", "Server", is_present=True, clock_in=stamp),
        StaffMember(StaffId("3"), "Hari Sharma", "Cashier"),
    )
    return FloorState(
        tables=sample_tables(),
        menu_items=sample_menu(),
        inventory=inventory,
        staff=staff,
    )
