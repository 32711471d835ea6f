from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from chiya.domain.common.ids import LineItemId, MenuItemId, OrderId, TableId
from chiya.domain.common.money import Money
from chiya.domain.floor.commands import (
    AddOrderItem,
    CheckoutTable,
    MergeTables,
    RemoveOrderItem,
    ShiftTable,
    UnmergeTables,
)
from chiya.domain.floor.reducers import (
    add_order_item,
    apply,
    checkout_table,
    merge_tables,
    remove_order_item,
    shift_table,
    unmerge_tables,
)
from chiya.domain.floor.state import FloorState, OutcomeStatus
from chiya.domain.ledger.entities import CompletedOrderStatus, PaymentMethod
from chiya.domain.menu.entities import MenuItem
from chiya.domain.table.entities import MergeType, TableStatus
from chiya.infrastructure.memory.sample_floor import sample_floor_state

NOW = datetime(2026, 10, 16, 9, 30, tzinfo=timezone.utc)


class SequentialIds:
    def __init__(self) -> None:
        self._counter = 0

    def __call__(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"


def _menu_item(state: FloorState, item_id: str) -> MenuItem:
    item = state.menu_item(MenuItemId(item_id))
    assert item is not None
    return item


def _table_id(number: int) -> TableId:
    return TableId(f"table-{number}")


def _add(state: FloorState, number: int, item_id: str, quantity: int = 1, line_id: str = "") -> FloorState:
    outcome = add_order_item(
        state,
        _table_id(number),
        _menu_item(state, item_id),
        quantity,
        now=NOW,
        line_id=LineItemId(line_id or f"line-{number}-{item_id}"),
    )
    assert outcome.applied
    return outcome.state


def _table(state: FloorState, number: int):
    table = state.table(_table_id(number))
    assert table is not None
    return table


def _assert_available_tables_are_empty(state: FloorState) -> None:
    for table in state.tables:
        if table.status == TableStatus.AVAILABLE:
            assert table.order == ()
            assert table.start_time is None


def test_masala_chai_scenario_settles_seventy_rupees() -> None:
    state = sample_floor_state(now=NOW)
    ids = SequentialIds()
    masala = _menu_item(state, "1")
    assert masala.name == "Masala Chai"
    assert masala.price == Money(amount_cents=2500)

    outcome = apply(state, AddOrderItem(table_id=_table_id(1), menu_item=masala, quantity=2), now=NOW, new_id=ids)
    table = _table(outcome.state, 1)
    assert table.status == TableStatus.OCCUPIED
    assert [(line.menu_item.name, line.quantity) for line in table.order] == [("Masala Chai", 2)]
    assert table.start_time == NOW

    outcome = apply(outcome.state, AddOrderItem(table_id=_table_id(1), menu_item=masala), now=NOW, new_id=ids)
    table = _table(outcome.state, 1)
    assert [(line.menu_item.name, line.quantity) for line in table.order] == [("Masala Chai", 3)]

    outcome = apply(
        outcome.state,
        CheckoutTable(
            table_id=_table_id(1),
            payment_method=PaymentMethod.CASH,
            discount=Money(amount_cents=500),
        ),
        now=NOW,
        new_id=ids,
    )
    assert len(outcome.state.completed_orders) == 1
    completed = outcome.state.completed_orders[0]
    assert completed.total == Money(amount_cents=7000)
    assert completed.status == CompletedOrderStatus.COMPLETED
    assert completed.payment_method == PaymentMethod.CASH
    assert str(completed.order_id) == outcome.created_id
    table = _table(outcome.state, 1)
    assert table.status == TableStatus.AVAILABLE
    assert table.order == ()
    assert table.start_time is None


def test_adding_same_menu_item_twice_coalesces_into_one_line() -> None:
    state = sample_floor_state(now=NOW)
    state = _add(state, 2, "3", quantity=2, line_id="first")
    outcome = add_order_item(
        state, _table_id(2), _menu_item(state, "3"), 4, now=NOW, line_id=LineItemId("second")
    )

    order = _table(outcome.state, 2).order
    assert len(order) == 1
    assert order[0].quantity == 6
    assert outcome.created_id == "first"


def test_add_order_item_keeps_existing_start_time() -> None:
    state = sample_floor_state(now=NOW)
    state = _add(state, 3, "1")
    later = datetime(2026, 10, 16, 11, 0, tzinfo=timezone.utc)
    outcome = add_order_item(
        state, _table_id(3), _menu_item(state, "2"), 1, now=later, line_id=LineItemId("l2")
    )
    assert _table(outcome.state, 3).start_time == NOW


def test_add_order_item_rejects_non_positive_quantity() -> None:
    state = sample_floor_state(now=NOW)
    with pytest.raises(ValueError):
        add_order_item(state, _table_id(1), _menu_item(state, "1"), 0, now=NOW, line_id=LineItemId("x"))


def test_add_order_item_to_missing_table_is_not_found() -> None:
    state = sample_floor_state(now=NOW)
    outcome = add_order_item(
        state, TableId("table-99"), _menu_item(state, "1"), 1, now=NOW, line_id=LineItemId("x")
    )
    assert outcome.status == OutcomeStatus.NOT_FOUND
    assert outcome.state is state


def test_line_items_snapshot_menu_item_at_order_time() -> None:
    state = sample_floor_state(now=NOW)
    state = _add(state, 1, "1")
    repriced = replace(_menu_item(state, "1"), price=Money(amount_cents=9900))
    state = replace(state, menu_items=(repriced,) + state.menu_items[1:])
    assert _table(state, 1).order[0].menu_item.price == Money(amount_cents=2500)


def test_removing_unknown_line_leaves_order_unchanged() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1", quantity=2)
    before = _table(state, 1).order

    outcome = remove_order_item(state, _table_id(1), LineItemId("missing"))

    assert outcome.status == OutcomeStatus.NOT_FOUND
    assert _table(outcome.state, 1).order == before


def test_removing_last_line_frees_table() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1", line_id="only")
    outcome = remove_order_item(state, _table_id(1), LineItemId("only"))

    table = _table(outcome.state, 1)
    assert table.status == TableStatus.AVAILABLE
    assert table.order == ()
    assert table.start_time is None


def test_removing_one_of_two_lines_keeps_table_occupied() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1", line_id="a")
    state = _add(state, 1, "2", line_id="b")
    outcome = remove_order_item(state, _table_id(1), LineItemId("a"))

    table = _table(outcome.state, 1)
    assert table.status == TableStatus.OCCUPIED
    assert [str(line.line_id) for line in table.order] == ["b"]


def test_merge_moves_all_secondary_lines_onto_main() -> None:
    state = sample_floor_state(now=NOW)
    state = _add(state, 1, "1", quantity=2)
    state = _add(state, 2, "2")
    state = _add(state, 2, "4")
    state = _add(state, 3, "5")
    main_before = _table(state, 1).order
    s1_before = _table(state, 2).order
    s2_before = _table(state, 3).order

    outcome = merge_tables(state, _table_id(1), (_table_id(2), _table_id(3)))

    main = _table(outcome.state, 1)
    assert main.order == main_before + s1_before + s2_before
    assert main.status == TableStatus.MERGED
    assert main.merge_type == MergeType.MAIN
    assert main.merged_with == (_table_id(2), _table_id(3))
    for number in (2, 3):
        secondary = _table(outcome.state, number)
        assert secondary.order == ()
        assert secondary.start_time is None
        assert secondary.status == TableStatus.MERGED
        assert secondary.merge_type == MergeType.SECONDARY
        assert secondary.main_table_id == _table_id(1)
    _assert_available_tables_are_empty(outcome.state)


def test_merge_skips_missing_secondaries_but_records_them() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1")
    outcome = merge_tables(state, _table_id(1), (TableId("table-99"),))

    assert outcome.applied
    main = _table(outcome.state, 1)
    assert len(main.order) == 1
    assert main.merged_with == (TableId("table-99"),)


def test_merge_with_missing_main_is_not_found() -> None:
    state = sample_floor_state(now=NOW)
    outcome = merge_tables(state, TableId("table-99"), (_table_id(1),))
    assert outcome.status == OutcomeStatus.NOT_FOUND
    assert outcome.state is state


def test_unmerge_keeps_combined_order_on_main() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1")
    state = _add(state, 2, "2")
    merged = merge_tables(state, _table_id(1), (_table_id(2),)).state
    combined = _table(merged, 1).order

    outcome = unmerge_tables(merged, _table_id(1))

    main = _table(outcome.state, 1)
    assert main.order == combined
    assert main.status == TableStatus.OCCUPIED
    assert main.merged_with is None
    assert main.merge_type is None
    secondary = _table(outcome.state, 2)
    assert secondary.order == ()
    assert secondary.status == TableStatus.AVAILABLE
    assert secondary.merge_type is None
    assert secondary.main_table_id is None
    _assert_available_tables_are_empty(outcome.state)


def test_unmerge_of_unmerged_table_is_unchanged() -> None:
    state = sample_floor_state(now=NOW)
    outcome = unmerge_tables(state, _table_id(1))
    assert outcome.status == OutcomeStatus.UNCHANGED
    assert outcome.state is state


def test_shift_moves_order_and_frees_source() -> None:
    state = _add(sample_floor_state(now=NOW), 4, "6", quantity=2)
    before = _table(state, 4)

    outcome = shift_table(state, _table_id(4), _table_id(9))

    target = _table(outcome.state, 9)
    assert target.order == before.order
    assert target.status == TableStatus.OCCUPIED
    assert target.start_time == before.start_time
    source = _table(outcome.state, 4)
    assert source.order == ()
    assert source.status == TableStatus.AVAILABLE
    assert source.start_time is None


def test_shift_to_missing_target_keeps_source_order() -> None:
    state = _add(sample_floor_state(now=NOW), 4, "6")
    outcome = shift_table(state, _table_id(4), TableId("table-99"))
    assert outcome.status == OutcomeStatus.NOT_FOUND
    assert len(_table(outcome.state, 4).order) == 1


def test_checkout_with_large_discount_settles_negative_total() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "4")
    outcome = checkout_table(
        state,
        _table_id(1),
        PaymentMethod.QR,
        Money(amount_cents=5000),
        now=NOW,
        order_id=OrderId("order_1"),
    )
    completed = outcome.state.completed_orders[-1]
    assert completed.total == Money(amount_cents=-3000)
    assert completed.subtotal == Money(amount_cents=2000)


def test_checkout_of_merged_main_clears_merge_tags() -> None:
    state = _add(sample_floor_state(now=NOW), 1, "1")
    state = merge_tables(state, _table_id(1), (_table_id(2),)).state
    outcome = checkout_table(
        state, _table_id(1), PaymentMethod.CARD, Money.zero(), now=NOW, order_id=OrderId("o")
    )
    main = _table(outcome.state, 1)
    assert main.status == TableStatus.AVAILABLE
    assert main.merged_with is None
    assert main.merge_type is None


def test_checkout_of_missing_table_adds_no_ledger_entry() -> None:
    state = sample_floor_state(now=NOW)
    outcome = checkout_table(
        state, TableId("nope"), PaymentMethod.CASH, Money.zero(), now=NOW, order_id=OrderId("o")
    )
    assert outcome.status == OutcomeStatus.NOT_FOUND
    assert outcome.state.completed_orders == ()


def test_apply_dispatches_remove_merge_unmerge_and_shift() -> None:
    ids = SequentialIds()
    state = sample_floor_state(now=NOW)
    masala = _menu_item(state, "1")
    state = apply(state, AddOrderItem(table_id=_table_id(1), menu_item=masala), now=NOW, new_id=ids).state
    state = apply(state, AddOrderItem(table_id=_table_id(2), menu_item=masala), now=NOW, new_id=ids).state
    state = apply(state, MergeTables(main_table_id=_table_id(1), secondary_ids=(_table_id(2),)), now=NOW, new_id=ids).state
    state = apply(state, UnmergeTables(main_table_id=_table_id(1)), now=NOW, new_id=ids).state
    state = apply(state, ShiftTable(from_table_id=_table_id(1), to_table_id=_table_id(5)), now=NOW, new_id=ids).state

    for line in _table(state, 5).order:
        outcome = apply(state, RemoveOrderItem(table_id=_table_id(5), line_id=line.line_id), now=NOW, new_id=ids)
        assert outcome.applied
        state = outcome.state

    assert all(table.status == TableStatus.AVAILABLE for table in state.tables)


def test_apply_rejects_unknown_command() -> None:
    with pytest.raises(TypeError):
        apply(sample_floor_state(now=NOW), object(), now=NOW, new_id=SequentialIds())
