from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from chiya.domain.common.ids import ExpenseId, StaffId
from chiya.domain.common.money import Money


class ClockAction(str, Enum):
    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class StaffMember:
    staff_id: StaffId
    name: str
    position: str
    is_present: bool = False
    clock_in: datetime | None = None
    clock_out: datetime | None = None


@dataclass(frozen=True)
class Expense:
    expense_id: ExpenseId
    staff_id: StaffId
    category: str
    amount: Money
    description: str
    date: datetime

    def __post_init__(self) -> None:
        if self.amount.is_negative():
            raise ValueError("expense amount must be >= 0")
