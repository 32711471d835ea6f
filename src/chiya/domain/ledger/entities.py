from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from chiya.domain.common.ids import OrderId, TableId
from chiya.domain.common.money import Money
from chiya.domain.table.entities import OrderLineItem


class CompletedOrderStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    QR = "qr"


@dataclass(frozen=True)
class CompletedOrder:
    order_id: OrderId
    table_id: TableId
    table_number: int
    items: tuple[OrderLineItem, ...]
    discount: Money
    total: Money
    status: CompletedOrderStatus
    payment_method: PaymentMethod
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.discount.currency != self.total.currency:
            raise ValueError("discount currency must match total currency")

    @property
    def subtotal(self) -> Money:
        return self.total + self.discount
