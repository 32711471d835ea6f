from __future__ import annotations

from typing import NewType

TableId = NewType("TableId", str)
MenuItemId = NewType("MenuItemId", str)
LineItemId = NewType("LineItemId", str)
OrderId = NewType("OrderId", str)
InventoryItemId = NewType("InventoryItemId", str)
StaffId = NewType("StaffId", str)
ExpenseId = NewType("ExpenseId", str)
UserId = NewType("UserId", str)
