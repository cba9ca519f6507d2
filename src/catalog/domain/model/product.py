"""Product aggregate and its status state machine.

The Product owns its price and stock. All business invariants are
enforced here, and the version counter used for optimistic concurrency
moves only from inside its methods.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

from catalog.domain.exceptions import DomainRuleViolation, ValidationError
from catalog.domain.model.events import ProductPriceChanged
from catalog.domain.model.value_objects import Price, Stock


class ProductStatus(Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISCONTINUED = "DISCONTINUED"

    @classmethod
    def parse(cls, raw: str) -> ProductStatus:
        try:
            return cls(raw.strip().upper())
        except (AttributeError, ValueError) as exc:
            raise ValidationError(f"Unknown product status: {raw!r}") from exc


@dataclass
class Product:
    """Aggregate root for catalog products.

    Use the ``Product.create()`` factory for new products; it enforces
    all business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted products with their stored
    status and version.

    Invariants:
    - ``version`` starts at 1 and grows by exactly 1 per successful mutation
    - DISCONTINUED is terminal; price and stock are frozen once reached
    - a failed call leaves every field untouched
    """

    id: str
    name: str
    description: str
    price: Price
    stock: Stock
    status: ProductStatus = ProductStatus.DRAFT
    version: int = 1
    events: list[ProductPriceChanged] = field(
        default_factory=list, repr=False, compare=False
    )

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(name: str, description: str, price: Price, stock: Stock) -> Product:
        """Create a new DRAFT product at version 1."""
        if not name or not name.strip():
            raise ValidationError("product name is required")
        return Product(
            id=str(uuid.uuid4()),
            name=name.strip(),
            description=(description or "").strip(),
            price=price,
            stock=stock,
        )

    # --- State transitions ----------------------------------------------------

    def activate(self) -> None:
        """Transition DRAFT|INACTIVE|ACTIVE -> ACTIVE.

        A product with nothing on hand cannot be put on sale.
        """
        if self.status == ProductStatus.DISCONTINUED:
            raise DomainRuleViolation("cannot activate discontinued product")
        if self.stock.quantity == 0:
            raise DomainRuleViolation("cannot activate product with zero stock")
        self.status = ProductStatus.ACTIVE
        self._bump_version()

    def deactivate(self) -> None:
        if self.status == ProductStatus.DISCONTINUED:
            raise DomainRuleViolation("cannot deactivate discontinued product")
        self.status = ProductStatus.INACTIVE
        self._bump_version()

    def discontinue(self) -> None:
        """Transition to the terminal DISCONTINUED status."""
        if self.status == ProductStatus.DISCONTINUED:
            raise DomainRuleViolation("product is already discontinued")
        self.status = ProductStatus.DISCONTINUED
        self._bump_version()

    # --- Price & stock --------------------------------------------------------

    def update_price(self, new_price: Price) -> None:
        """Replace the price and record a ProductPriceChanged event."""
        self._ensure_price_changeable()
        self._replace_price(new_price)
        self._bump_version()

    def update_stock(self, quantity: int) -> None:
        """Replace the stock level, keeping the unit."""
        new_stock = self._next_stock(quantity)
        self.stock = new_stock
        self._bump_version()

    def revise(
        self,
        price: Price | None = None,
        stock_quantity: int | None = None,
    ) -> None:
        """Apply a price and/or stock change as one mutation.

        All guards run before anything is assigned, and the version moves
        once no matter how many fields change.
        """
        if price is None and stock_quantity is None:
            raise ValidationError("no changes supplied")

        new_stock = None
        if stock_quantity is not None:
            new_stock = self._next_stock(stock_quantity)
        if price is not None:
            self._ensure_price_changeable()
            self._replace_price(price)
        if new_stock is not None:
            self.stock = new_stock
        self._bump_version()

    # --- Outbox ---------------------------------------------------------------

    def pull_events(self) -> list[ProductPriceChanged]:
        """Hand over the recorded events and clear the outbox."""
        events, self.events = self.events, []
        return events

    # --- Internal helpers -----------------------------------------------------

    def _ensure_price_changeable(self) -> None:
        if self.status == ProductStatus.DISCONTINUED:
            raise DomainRuleViolation("cannot update price of discontinued product")

    def _next_stock(self, quantity: int) -> Stock:
        if quantity < 0:
            raise ValidationError("stock quantity cannot be negative")
        if self.status == ProductStatus.DISCONTINUED:
            raise DomainRuleViolation("cannot update stock of discontinued product")
        return self.stock.with_quantity(quantity)

    def _replace_price(self, new_price: Price) -> None:
        old_price = self.price
        self.price = new_price
        self.events.append(
            ProductPriceChanged(
                product_id=self.id, old_price=old_price, new_price=new_price
            )
        )

    def _bump_version(self) -> None:
        self.version += 1
