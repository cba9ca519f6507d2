"""Commands, queries and results passed between transports and handlers.

The CLI and HTTP layers build them; handlers never see transport types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from catalog.domain.model.product import ProductStatus
from catalog.domain.model.read_model import ProductReadModel


# ── Commands ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CreateProductCommand:
    name: str
    description: str
    price: Decimal | str | int
    currency: str
    stock_level: int
    stock_unit: str


@dataclass(frozen=True)
class UpdateProductCommand:
    """Input: the fields to change, plus the version the caller last read.

    ``None`` means "leave unchanged"; zero is a real value.
    """

    product_id: str
    version: int
    price: Decimal | str | int | None = None
    currency: str | None = None
    stock_level: int | None = None


@dataclass(frozen=True)
class ChangeProductStatusCommand:
    product_id: str
    action: str  # "activate", "deactivate" or "discontinue"
    version: int


@dataclass(frozen=True)
class DeleteProductCommand:
    product_id: str


# ── Queries ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GetProductQuery:
    product_id: str


@dataclass(frozen=True)
class ListProductsQuery:
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    status: ProductStatus | None = None
    min_stock: int | None = None
    search_term: str = ""
    page_size: int = 0
    page_number: int = 0


# ── Results ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProductStatusResult:
    """Output of a status change: just enough to continue editing."""

    id: str
    status: ProductStatus
    version: int


@dataclass(frozen=True)
class ProductListResult:
    products: list[ProductReadModel] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.products)
