from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable

from chiya.domain.common.ids import (
    ExpenseId,
    InventoryItemId,
    LineItemId,
    MenuItemId,
    OrderId,
    StaffId,
    TableId,
)
from chiya.domain.common.money import Money
from chiya.domain.floor.commands import (
    AddExpense,
    AddMenuItem,
    AddOrderItem,
    CheckoutTable,
    ClockInOut,
    DeleteMenuItem,
    FloorCommand,
    MarkAttendance,
    MergeTables,
    RemoveOrderItem,
    ShiftTable,
    UnmergeTables,
    UpdateInventory,
    UpdateMenuItem,
)
from chiya.domain.floor.state import FloorState, Outcome
from chiya.domain.ledger.entities import CompletedOrder, CompletedOrderStatus, PaymentMethod
from chiya.domain.menu.entities import MenuItem
from chiya.domain.staff.entities import ClockAction, Expense, StaffMember
from chiya.domain.table.entities import MergeType, OrderLineItem, Table, TableStatus

IdFactory = Callable[[str], str]


def add_order_item(
    state: FloorState,
    table_id: TableId,
    menu_item: MenuItem,
    quantity: int,
    *,
    now: datetime,
    line_id: LineItemId,
    notes: str | None = None,
) -> Outcome:
    if quantity < 1:
        raise ValueError("quantity must be >= 1")

    table = state.table(table_id)
    if table is None:
        return Outcome.not_found(state, f"table {table_id} not found")

    existing = table.find_line_for_menu_item(menu_item.item_id)
    if existing is not None:
        order = tuple(
            line.add_quantity(quantity) if line.line_id == existing.line_id else line
            for line in table.order
        )
        created_id = str(existing.line_id)
    else:
        order = table.order + (
            OrderLineItem(line_id=line_id, menu_item=menu_item, quantity=quantity, notes=notes),
        )
        created_id = str(line_id)

    status = TableStatus.OCCUPIED if table.status == TableStatus.AVAILABLE else table.status
    updated = replace(table, order=order, status=status, start_time=table.start_time or now)
    return Outcome.applied_to(state.with_tables({table_id: updated}), created_id=created_id)


def remove_order_item(state: FloorState, table_id: TableId, line_id: LineItemId) -> Outcome:
    table = state.table(table_id)
    if table is None:
        return Outcome.not_found(state, f"table {table_id} not found")
    if table.find_line(line_id) is None:
        return Outcome.not_found(state, f"line item {line_id} not found on table {table_id}")

    order = tuple(line for line in table.order if line.line_id != line_id)
    if order:
        updated = replace(table, order=order)
    else:
        updated = table.reset()
    return Outcome.applied_to(state.with_tables({table_id: updated}))


def merge_tables(
    state: FloorState,
    main_table_id: TableId,
    secondary_ids: tuple[TableId, ...],
) -> Outcome:
    main = state.table(main_table_id)
    if main is None:
        return Outcome.not_found(state, f"table {main_table_id} not found")

    # Secondary orders are read from the pre-merge state.
    combined = main.order
    for secondary_id in secondary_ids:
        secondary = state.table(secondary_id)
        if secondary is not None:
            combined = combined + secondary.order

    updates: dict[TableId, Table] = {}
    for secondary_id in secondary_ids:
        secondary = state.table(secondary_id)
        if secondary is None or secondary_id == main_table_id:
            continue
        updates[secondary_id] = replace(
            secondary,
            order=(),
            start_time=None,
            status=TableStatus.MERGED,
            merge_type=MergeType.SECONDARY,
            main_table_id=main_table_id,
        )
    updates[main_table_id] = replace(
        main,
        order=combined,
        status=TableStatus.MERGED,
        merge_type=MergeType.MAIN,
        merged_with=tuple(secondary_ids),
    )
    return Outcome.applied_to(state.with_tables(updates))


def unmerge_tables(state: FloorState, main_table_id: TableId) -> Outcome:
    main = state.table(main_table_id)
    if main is None:
        return Outcome.not_found(state, f"table {main_table_id} not found")
    if not main.merged_with:
        return Outcome.unchanged(state, f"table {main_table_id} has no merged tables")

    updates: dict[TableId, Table] = {}
    for secondary_id in main.merged_with:
        secondary = state.table(secondary_id)
        if secondary is None or secondary_id == main_table_id:
            continue
        updates[secondary_id] = secondary.reset()
    # Merged items stay on the main table; nothing is handed back.
    updates[main_table_id] = replace(
        main,
        status=TableStatus.OCCUPIED,
        merged_with=None,
        merge_type=None,
    )
    return Outcome.applied_to(state.with_tables(updates))


def shift_table(state: FloorState, from_table_id: TableId, to_table_id: TableId) -> Outcome:
    source = state.table(from_table_id)
    if source is None:
        return Outcome.not_found(state, f"table {from_table_id} not found")
    target = state.table(to_table_id)
    if target is None:
        return Outcome.not_found(state, f"table {to_table_id} not found")

    shifted = replace(
        target,
        order=source.order,
        status=TableStatus.OCCUPIED,
        start_time=source.start_time,
        merged_with=None,
        merge_type=None,
        main_table_id=None,
    )
    if from_table_id == to_table_id:
        return Outcome.applied_to(state.with_tables({to_table_id: shifted}))

    return Outcome.applied_to(
        state.with_tables({to_table_id: shifted, from_table_id: source.reset()})
    )


def checkout_table(
    state: FloorState,
    table_id: TableId,
    payment_method: PaymentMethod,
    discount: Money,
    *,
    now: datetime,
    order_id: OrderId,
) -> Outcome:
    table = state.table(table_id)
    if table is None:
        return Outcome.not_found(state, f"table {table_id} not found")

    # No floor at zero: a discount larger than the subtotal settles negative.
    total = table.subtotal(discount.currency) - discount
    completed = CompletedOrder(
        order_id=order_id,
        table_id=table.table_id,
        table_number=table.number,
        items=table.order,
        discount=discount,
        total=total,
        status=CompletedOrderStatus.COMPLETED,
        payment_method=payment_method,
        timestamp=now,
    )
    next_state = replace(
        state.with_tables({table_id: table.reset()}),
        completed_orders=state.completed_orders + (completed,),
    )
    return Outcome.applied_to(next_state, created_id=str(order_id))


def add_menu_item(state: FloorState, command: AddMenuItem, *, item_id: MenuItemId) -> Outcome:
    item = MenuItem(
        item_id=item_id,
        name=command.name,
        category=command.category,
        price=command.price,
        is_available=command.is_available,
        description=command.description,
    )
    return Outcome.applied_to(
        replace(state, menu_items=state.menu_items + (item,)),
        created_id=str(item_id),
    )


def update_menu_item(state: FloorState, command: UpdateMenuItem) -> Outcome:
    current = state.menu_item(command.item_id)
    if current is None:
        return Outcome.not_found(state, f"menu item {command.item_id} not found")

    changes = {
        field: value
        for field, value in (
            ("name", command.name),
            ("category", command.category),
            ("price", command.price),
            ("is_available", command.is_available),
            ("description", command.description),
        )
        if value is not None
    }
    updated = replace(current, **changes)
    return Outcome.applied_to(
        replace(
            state,
            menu_items=tuple(
                updated if item.item_id == command.item_id else item for item in state.menu_items
            ),
        )
    )


def delete_menu_item(state: FloorState, item_id: MenuItemId) -> Outcome:
    if state.menu_item(item_id) is None:
        return Outcome.not_found(state, f"menu item {item_id} not found")
    return Outcome.applied_to(
        replace(
            state,
            menu_items=tuple(item for item in state.menu_items if item.item_id != item_id),
        )
    )


def update_inventory(
    state: FloorState,
    item_id: InventoryItemId,
    quantity: float,
    *,
    now: datetime,
) -> Outcome:
    current = state.inventory_item(item_id)
    if current is None:
        return Outcome.not_found(state, f"inventory item {item_id} not found")
    updated = replace(current, current_stock=quantity, last_updated=now)
    return Outcome.applied_to(
        replace(
            state,
            inventory=tuple(
                updated if item.item_id == item_id else item for item in state.inventory
            ),
        )
    )


def mark_attendance(state: FloorState, staff_id: StaffId, present: bool) -> Outcome:
    member = state.staff_member(staff_id)
    if member is None:
        return Outcome.not_found(state, f"staff member {staff_id} not found")
    return _replace_staff(state, replace(member, is_present=present))


def clock_in_out(
    state: FloorState,
    staff_id: StaffId,
    action: ClockAction,
    *,
    now: datetime,
) -> Outcome:
    member = state.staff_member(staff_id)
    if member is None:
        return Outcome.not_found(state, f"staff member {staff_id} not found")
    if action == ClockAction.IN:
        updated = replace(member, clock_in=now, is_present=True)
    else:
        updated = replace(member, clock_out=now, is_present=False)
    return _replace_staff(state, updated)


def add_expense(state: FloorState, command: AddExpense, *, expense_id: ExpenseId) -> Outcome:
    expense = Expense(
        expense_id=expense_id,
        staff_id=command.staff_id,
        category=command.category,
        amount=command.amount,
        description=command.description,
        date=command.date,
    )
    return Outcome.applied_to(
        replace(state, expenses=state.expenses + (expense,)),
        created_id=str(expense_id),
    )


def apply(state: FloorState, command: FloorCommand, *, now: datetime, new_id: IdFactory) -> Outcome:
    """Dispatch a command to its reducer. ``new_id(prefix)`` mints ids for created records."""
    if isinstance(command, AddOrderItem):
        return add_order_item(
            state,
            command.table_id,
            command.menu_item,
            command.quantity,
            now=now,
            line_id=LineItemId(new_id("line")),
            notes=command.notes,
        )
    if isinstance(command, RemoveOrderItem):
        return remove_order_item(state, command.table_id, command.line_id)
    if isinstance(command, MergeTables):
        return merge_tables(state, command.main_table_id, command.secondary_ids)
    if isinstance(command, UnmergeTables):
        return unmerge_tables(state, command.main_table_id)
    if isinstance(command, ShiftTable):
        return shift_table(state, command.from_table_id, command.to_table_id)
    if isinstance(command, CheckoutTable):
        return checkout_table(
            state,
            command.table_id,
            command.payment_method,
            command.discount,
            now=now,
            order_id=OrderId(new_id("order")),
        )
    if isinstance(command, AddMenuItem):
        return add_menu_item(state, command, item_id=MenuItemId(new_id("menu")))
    if isinstance(command, UpdateMenuItem):
        return update_menu_item(state, command)
    if isinstance(command, DeleteMenuItem):
        return delete_menu_item(state, command.item_id)
    if isinstance(command, UpdateInventory):
        return update_inventory(state, command.item_id, command.quantity, now=now)
    if isinstance(command, MarkAttendance):
        return mark_attendance(state, command.staff_id, command.present)
    if isinstance(command, ClockInOut):
        return clock_in_out(state, command.staff_id, command.action, now=now)
    if isinstance(command, AddExpense):
        return add_expense(state, command, expense_id=ExpenseId(new_id("expense")))
    raise TypeError(f"unsupported floor command: {type(command).__name__}")


def _replace_staff(state: FloorState, updated: StaffMember) -> Outcome:
    return Outcome.applied_to(
        replace(
            state,
            staff=tuple(
                updated if member.staff_id == updated.staff_id else member
                for member in state.staff
            ),
        )
    )
