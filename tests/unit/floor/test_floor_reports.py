from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from chiya.application.use_cases.reports import (
    GetDashboardSummary,
    GetSalesReport,
    InvalidReportRangeError,
    build_sales_report,
)
from chiya.domain.common.ids import ExpenseId, LineItemId, MenuItemId, OrderId, StaffId, TableId
from chiya.domain.common.money import Money
from chiya.domain.floor.state import FloorState
from chiya.domain.ledger.entities import CompletedOrder, CompletedOrderStatus, PaymentMethod
from chiya.domain.staff.entities import Expense
from chiya.domain.table.entities import OrderLineItem
from chiya.infrastructure.memory.floor_state_repo import InMemoryFloorStateRepository
from chiya.infrastructure.memory.sample_floor import sample_floor_state

DAY_ONE = datetime(2026, 10, 14, 10, 0, tzinfo=timezone.utc)
DAY_THREE = datetime(2026, 10, 16, 18, 0, tzinfo=timezone.utc)


def _order(
    state: FloorState,
    order_id: str,
    item_id: str,
    quantity: int,
    discount_cents: int,
    method: PaymentMethod,
    timestamp: datetime,
    status: CompletedOrderStatus = CompletedOrderStatus.COMPLETED,
) -> CompletedOrder:
    item = state.menu_item(MenuItemId(item_id))
    assert item is not None
    line = OrderLineItem(line_id=LineItemId(f"line-{order_id}"), menu_item=item, quantity=quantity)
    discount = Money(amount_cents=discount_cents)
    return CompletedOrder(
        order_id=OrderId(order_id),
        table_id=TableId("table-1"),
        table_number=1,
        items=(line,),
        discount=discount,
        total=line.line_total - discount,
        status=status,
        payment_method=method,
        timestamp=timestamp,
    )


def _state_with_history() -> FloorState:
    state = sample_floor_state(now=DAY_ONE)
    orders = (
        _order(state, "o1", "1", 3, 500, PaymentMethod.CASH, DAY_ONE),
        _order(state, "o2", "2", 1, 0, PaymentMethod.QR, DAY_THREE),
        _order(state, "o3", "1", 1, 0, PaymentMethod.CASH, DAY_THREE, CompletedOrderStatus.CANCELLED),
    )
    expenses = (
        Expense(
            expense_id=ExpenseId("e1"),
            staff_id=StaffId("1"),
            category="Supplies",
            amount=Money(amount_cents=4000),
            description="Sugar",
            date=DAY_THREE,
        ),
    )
    return replace(state, completed_orders=orders, expenses=expenses)


def test_sales_report_totals() -> None:
    report = build_sales_report(_state_with_history(), date(2026, 10, 14), date(2026, 10, 16))

    # o1: 7500 - 500, o2: 3000, o3: 2500
    assert report.totalRevenue.amountCents == 12500
    assert report.totalOrders == 3
    assert report.totalExpenses.amountCents == 4000
    assert report.netProfit.amountCents == 8500
    assert report.averageOrderValue.amountCents == 4167
    assert report.completedOrders == 2
    assert report.cancelledOrders == 1
    assert report.totalDiscounts.amountCents == 500
    assert report.paymentMethods == {"cash": 2, "card": 0, "qr": 1}
    assert report.staffPresent == 2
    assert report.attendanceRate == 67


def test_sales_report_zero_fills_every_day() -> None:
    report = build_sales_report(_state_with_history(), date(2026, 10, 14), date(2026, 10, 16))

    assert [row.day for row in report.dailySales] == [
        date(2026, 10, 14),
        date(2026, 10, 15),
        date(2026, 10, 16),
    ]
    assert [row.orders for row in report.dailySales] == [1, 0, 2]
    assert [row.revenue.amountCents for row in report.dailySales] == [7000, 0, 5500]


def test_sales_report_item_breakdown_covers_whole_menu() -> None:
    report = build_sales_report(_state_with_history(), date(2026, 10, 14), date(2026, 10, 16))
    by_name = {row.name: row for row in report.itemSales}

    assert len(report.itemSales) == 8
    assert by_name["Masala Chai"].quantity == 4
    assert by_name["Masala Chai"].revenue.amountCents == 10000
    assert by_name["Cardamom Tea"].quantity == 1
    assert by_name["Butter Tea"].quantity == 0


def test_empty_range_averages_to_zero() -> None:
    report = build_sales_report(_state_with_history(), date(2026, 1, 1), date(2026, 1, 1))
    assert report.totalOrders == 0
    assert report.averageOrderValue.amountCents == 0


def test_sales_report_rejects_inverted_range() -> None:
    use_case = GetSalesReport(floor_repository=InMemoryFloorStateRepository(_state_with_history()))
    with pytest.raises(InvalidReportRangeError):
        use_case.execute(date(2026, 10, 16), date(2026, 10, 14))


def test_dashboard_summary() -> None:
    state = _state_with_history()
    state = replace(
        state,
        inventory=tuple(
            replace(item, current_stock=1.0) if item.name == "Sugar" else item
            for item in state.inventory
        ),
    )

    summary = GetDashboardSummary(
        floor_repository=InMemoryFloorStateRepository(state)
    ).execute(date(2026, 10, 16))

    assert summary.tableStatusCounts == {"available": 12, "occupied": 0, "merged": 0}
    assert summary.todayOrders == 2
    assert summary.todayRevenue.amountCents == 5500
    assert [item.name for item in summary.lowStockItems] == ["Sugar"]
    assert summary.presentStaff == 2
