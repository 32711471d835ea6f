from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from chiya.application.dto.responses import (
    DailySalesResponse,
    DashboardSummaryResponse,
    ItemSalesResponse,
    SalesReportResponse,
)
from chiya.application.mappers.floor_mapper import to_inventory_item_response, to_money_response
from chiya.application.ports.repositories import FloorStateRepository
from chiya.domain.common.money import DEFAULT_CURRENCY, Money
from chiya.domain.floor.state import FloorState
from chiya.domain.ledger.entities import CompletedOrder, CompletedOrderStatus, PaymentMethod
from chiya.domain.table.entities import TableStatus


class InvalidReportRangeError(Exception):
    pass


class GetSalesReport:
    def __init__(self, floor_repository: FloorStateRepository) -> None:
        self._floor_repository = floor_repository

    def execute(self, start: date, end: date) -> SalesReportResponse:
        if start > end:
            raise InvalidReportRangeError(f"start date {start} is after end date {end}")
        return build_sales_report(self._floor_repository.load(), start, end)


class GetDashboardSummary:
    def __init__(self, floor_repository: FloorStateRepository) -> None:
        self._floor_repository = floor_repository

    def execute(self, today: date) -> DashboardSummaryResponse:
        return build_dashboard_summary(self._floor_repository.load(), today)


def build_sales_report(
    state: FloorState,
    start: date,
    end: date,
    currency: str = DEFAULT_CURRENCY,
) -> SalesReportResponse:
    orders = [order for order in state.completed_orders if start <= order.timestamp.date() <= end]
    expenses = [expense for expense in state.expenses if start <= expense.date.date() <= end]

    total_revenue = _sum_money((order.total for order in orders), currency)
    total_expenses = _sum_money((expense.amount for expense in expenses), currency)
    total_discounts = _sum_money((order.discount for order in orders), currency)

    daily_sales = []
    day = start
    while day <= end:
        day_orders = [order for order in orders if order.timestamp.date() == day]
        daily_sales.append(
            DailySalesResponse(
                day=day,
                orders=len(day_orders),
                revenue=to_money_response(
                    _sum_money((order.total for order in day_orders), currency)
                ),
            )
        )
        day += timedelta(days=1)

    present = sum(1 for member in state.staff if member.is_present)
    return SalesReportResponse(
        startDate=start,
        endDate=end,
        totalRevenue=to_money_response(total_revenue),
        totalOrders=len(orders),
        totalExpenses=to_money_response(total_expenses),
        netProfit=to_money_response(total_revenue - total_expenses),
        averageOrderValue=to_money_response(
            Money(
                amount_cents=_round_half_up(total_revenue.amount_cents, len(orders)),
                currency=currency,
            )
        ),
        completedOrders=_count_status(orders, CompletedOrderStatus.COMPLETED),
        cancelledOrders=_count_status(orders, CompletedOrderStatus.CANCELLED),
        totalDiscounts=to_money_response(total_discounts),
        dailySales=daily_sales,
        itemSales=_item_sales(state, orders, currency),
        paymentMethods={
            method.value: sum(1 for order in orders if order.payment_method == method)
            for method in PaymentMethod
        },
        staffPresent=present,
        attendanceRate=_round_half_up(present * 100, len(state.staff)),
    )


def build_dashboard_summary(
    state: FloorState,
    today: date,
    currency: str = DEFAULT_CURRENCY,
) -> DashboardSummaryResponse:
    today_orders = [order for order in state.completed_orders if order.timestamp.date() == today]
    return DashboardSummaryResponse(
        tableStatusCounts={
            status.value: sum(1 for table in state.tables if table.status == status)
            for status in TableStatus
        },
        todayOrders=len(today_orders),
        todayRevenue=to_money_response(
            _sum_money((order.total for order in today_orders), currency)
        ),
        lowStockItems=[
            to_inventory_item_response(item) for item in state.inventory if item.is_low_stock
        ],
        presentStaff=sum(1 for member in state.staff if member.is_present),
    )


def _item_sales(
    state: FloorState,
    orders: list[CompletedOrder],
    currency: str,
) -> list[ItemSalesResponse]:
    rows = []
    for item in state.menu_items:
        quantity = 0
        revenue = Money.zero(currency)
        for order in orders:
            for line in order.items:
                if line.menu_item.item_id == item.item_id:
                    quantity += line.quantity
                    revenue = revenue + line.line_total
        rows.append(
            ItemSalesResponse(
                itemId=str(item.item_id),
                name=item.name,
                quantity=quantity,
                revenue=to_money_response(revenue),
            )
        )
    return rows


def _sum_money(values, currency: str) -> Money:
    total = Money.zero(currency)
    for value in values:
        total = total + value
    return total


def _count_status(orders: list[CompletedOrder], status: CompletedOrderStatus) -> int:
    return sum(1 for order in orders if order.status == status)


def _round_half_up(numerator: int, denominator: int) -> int:
    if denominator == 0:
        return 0
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
