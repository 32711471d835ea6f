from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from chiya.domain.common.ids import LineItemId, MenuItemId, TableId
from chiya.domain.common.money import DEFAULT_CURRENCY, Money
from chiya.domain.menu.entities import MenuItem


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MERGED = "merged"


class MergeType(str, Enum):
    MAIN = "main"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class OrderLineItem:
    line_id: LineItemId
    menu_item: MenuItem
    quantity: int
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.menu_item.price.times(self.quantity)

    def add_quantity(self, quantity: int) -> OrderLineItem:
        return replace(self, quantity=self.quantity + quantity)


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: int
    capacity: int
    area: str
    status: TableStatus = TableStatus.AVAILABLE
    order: tuple[OrderLineItem, ...] = ()
    start_time: datetime | None = None
    merged_with: tuple[TableId, ...] | None = None
    merge_type: MergeType | None = None
    main_table_id: TableId | None = None

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")
        if self.status == TableStatus.AVAILABLE:
            if self.order:
                raise ValueError("available table must have an empty order")
            if self.start_time is not None:
                raise ValueError("available table must not have start_time")
        if self.merge_type is not None and self.status != TableStatus.MERGED:
            raise ValueError("merge_type is only allowed while status is merged")

    def find_line(self, line_id: LineItemId) -> OrderLineItem | None:
        for line in self.order:
            if line.line_id == line_id:
                return line
        return None

    def find_line_for_menu_item(self, item_id: MenuItemId) -> OrderLineItem | None:
        for line in self.order:
            if line.menu_item.item_id == item_id:
                return line
        return None

    def subtotal(self, currency: str = DEFAULT_CURRENCY) -> Money:
        total = Money.zero(currency)
        for line in self.order:
            total = total + line.line_total
        return total

    def is_main(self) -> bool:
        return self.status == TableStatus.MERGED and self.merge_type == MergeType.MAIN

    def reset(self) -> Table:
        """Empty, available table with every merge tag cleared."""
        return replace(
            self,
            status=TableStatus.AVAILABLE,
            order=(),
            start_time=None,
            merged_with=None,
            merge_type=None,
            main_table_id=None,
        )
