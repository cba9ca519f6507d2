"""Read side of the catalog: a flat projection and its query criteria.

Queries never rebuild the aggregate. They work on ProductReadModel, which
storage adapters build straight from persisted records.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from catalog.domain.model.product import ProductStatus


@dataclass(frozen=True)
class ProductReadModel:
    id: str
    name: str
    description: str
    price_amount: Decimal
    currency: str
    stock_level: int
    stock_unit: str
    status: ProductStatus
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price_amount": str(self.price_amount),
            "currency": self.currency,
            "stock_level": self.stock_level,
            "stock_unit": self.stock_unit,
            "status": self.status.value,
            "version": self.version,
        }


@dataclass(frozen=True)
class ProductFilter:
    """Criteria for listing products.

    Every field that is set narrows the result (AND). ``search_term``
    matches the name or the description, case-insensitively.  A
    ``page_size`` of zero or less disables pagination; ``page_number``
    is zero-indexed.
    """

    min_price: Decimal | None = None
    max_price: Decimal | None = None
    status: ProductStatus | None = None
    min_stock: int | None = None
    search_term: str = ""
    page_size: int = 0
    page_number: int = 0

    @property
    def is_paginated(self) -> bool:
        return self.page_size > 0

    @property
    def offset(self) -> int:
        return self.page_size * self.page_number if self.is_paginated else 0

    @property
    def normalized_search(self) -> str:
        return (self.search_term or "").strip().lower()

    def matches(self, model: ProductReadModel) -> bool:
        if self.min_price is not None and model.price_amount < self.min_price:
            return False
        if self.max_price is not None and model.price_amount > self.max_price:
            return False
        if self.status is not None and model.status != self.status:
            return False
        if self.min_stock is not None and model.stock_level < self.min_stock:
            return False
        term = self.normalized_search
        if term and not (
            term in model.name.lower() or term in model.description.lower()
        ):
            return False
        return True

    def apply(self, models: Iterable[ProductReadModel]) -> list[ProductReadModel]:
        """Filter, order and paginate an in-memory collection."""
        return self.paginate(sort_for_listing(m for m in models if self.matches(m)))

    def paginate(self, models: list[ProductReadModel]) -> list[ProductReadModel]:
        if not self.is_paginated:
            return list(models)
        return list(models[self.offset : self.offset + self.page_size])


def sort_for_listing(models: Iterable[ProductReadModel]) -> list[ProductReadModel]:
    """Listing order shared by every backend: name (case-insensitive), then id."""
    return sorted(models, key=lambda m: (m.name.lower(), m.id))
