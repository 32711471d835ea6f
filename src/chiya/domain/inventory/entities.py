from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chiya.domain.common.ids import InventoryItemId


@dataclass(frozen=True)
class InventoryItem:
    item_id: InventoryItemId
    name: str
    unit: str
    current_stock: float
    min_stock: float
    last_updated: datetime

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock
