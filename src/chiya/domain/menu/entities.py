from __future__ import annotations

from dataclasses import dataclass

from chiya.domain.common.ids import MenuItemId
from chiya.domain.common.money import Money


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    category: str
    price: Money
    is_available: bool = True
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price.is_negative():
            raise ValueError("price must be >= 0")
