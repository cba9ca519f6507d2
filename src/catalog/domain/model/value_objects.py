"""Value Objects of the catalog domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from catalog.domain.exceptions import ValidationError

# Every store keeps amounts as NUMERIC(PRICE_PRECISION, PRICE_SCALE).
PRICE_PRECISION = 14
PRICE_SCALE = 4
MAX_PRICE = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


def canonical_amount(amount: Decimal) -> Decimal:
    """Drop trailing zeros without switching to exponent notation."""
    normalized = amount.normalize()
    if normalized.as_tuple().exponent > 0:
        return normalized.quantize(Decimal(1))
    return normalized


@dataclass(frozen=True)
class Price:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors. A zero amount is
    a legitimate price (free items); negative amounts are not. The amount
    is kept without trailing zeros, so 9.90 and 9.9 are the same price
    everywhere, including after a round trip through any store.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Price amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Invalid price amount: {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError("price cannot be negative")
        if self.amount >= MAX_PRICE:
            raise ValidationError(f"price must be below {MAX_PRICE}, got {self.amount}")
        if self.amount.scaleb(PRICE_SCALE) % 1 != 0:
            raise ValidationError(
                f"price supports at most {PRICE_SCALE} decimal places, got {self.amount}"
            )
        if not self.currency or not self.currency.strip():
            raise ValidationError("currency is required")
        object.__setattr__(self, "amount", canonical_amount(self.amount))

    def with_currency(self, currency: str) -> Price:
        return Price(self.amount, currency)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str) -> Price:
        """Convenient factory that coerces the amount to Decimal safely."""
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid price amount: {amount!r}") from exc
        return Price(value, currency.strip() if currency else currency)


@dataclass(frozen=True)
class Stock:
    """Quantity on hand together with the unit it is counted in."""

    quantity: int
    unit: str

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Stock quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity < 0:
            raise ValidationError("stock quantity cannot be negative")
        if not self.unit or not self.unit.strip():
            raise ValidationError("unit is required")

    def with_quantity(self, quantity: int) -> Stock:
        """Build the replacement stock, keeping the unit."""
        return Stock(quantity, self.unit)

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit}"
