from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CURRENCY = "NPR"


@dataclass(frozen=True)
class Money:
    """Signed amount in minor units. Negative values are allowed for settled totals."""

    amount_cents: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(amount_cents=0, currency=currency)

    def __add__(self, other: Money) -> Money:
        self._ensure_same_currency(other)
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        self._ensure_same_currency(other)
        return Money(amount_cents=self.amount_cents - other.amount_cents, currency=self.currency)

    def times(self, quantity: int) -> Money:
        return Money(amount_cents=self.amount_cents * quantity, currency=self.currency)

    def is_negative(self) -> bool:
        return self.amount_cents < 0

    def _ensure_same_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValueError(
                f"currency mismatch: {self.currency} vs {other.currency}"
            )
