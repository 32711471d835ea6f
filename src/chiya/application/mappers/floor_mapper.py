from __future__ import annotations

from chiya.application.dto.responses import (
    CompletedOrderResponse,
    InventoryItemResponse,
    MenuItemResponse,
    MoneyResponse,
    OrderLineItemResponse,
    TableResponse,
)
from chiya.domain.common.money import Money
from chiya.domain.inventory.entities import InventoryItem
from chiya.domain.ledger.entities import CompletedOrder
from chiya.domain.menu.entities import MenuItem
from chiya.domain.table.entities import OrderLineItem, Table


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=money.amount_cents, currency=money.currency)


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        category=item.category,
        price=to_money_response(item.price),
        isAvailable=item.is_available,
        description=item.description,
    )


def to_line_item_response(line: OrderLineItem) -> OrderLineItemResponse:
    return OrderLineItemResponse(
        lineId=str(line.line_id),
        menuItem=to_menu_item_response(line.menu_item),
        quantity=line.quantity,
        lineTotal=to_money_response(line.line_total),
        notes=line.notes,
    )


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        status=table.status.value,
        capacity=table.capacity,
        area=table.area,
        order=[to_line_item_response(line) for line in table.order],
        subtotal=to_money_response(table.subtotal()),
        startTime=table.start_time,
        mergedWith=[str(table_id) for table_id in table.merged_with]
        if table.merged_with is not None
        else None,
        mergeType=table.merge_type.value if table.merge_type else None,
        mainTableId=str(table.main_table_id) if table.main_table_id else None,
    )


def to_completed_order_response(order: CompletedOrder) -> CompletedOrderResponse:
    return CompletedOrderResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        tableNumber=order.table_number,
        items=[to_line_item_response(line) for line in order.items],
        discount=to_money_response(order.discount),
        total=to_money_response(order.total),
        status=order.status.value,
        paymentMethod=order.payment_method.value,
        timestamp=order.timestamp,
    )


def to_inventory_item_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        unit=item.unit,
        currentStock=item.current_stock,
        minStock=item.min_stock,
        lastUpdated=item.last_updated,
    )
