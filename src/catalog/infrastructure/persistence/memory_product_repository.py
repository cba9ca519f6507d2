"""In-memory implementation of both product repository ports.

Stores plain records rather than aggregate instances, so a caller holding
a Product can never change stored state without going through ``update``.
"""

from __future__ import annotations

import threading
from typing import Any

from catalog.domain.exceptions import (
    EntityNotFoundError,
    StorageError,
    VersionConflictError,
)
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.model.read_model import (
    ProductFilter,
    ProductReadModel,
    sort_for_listing,
)
from catalog.domain.repository.product_read_repository import ProductReadRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.records import (
    to_domain,
    to_read_model,
    to_record,
)


class InMemoryProductRepository(ProductRepository, ProductReadRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        for product in products or []:
            self.save(product)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        with self._lock:
            record = self._records.get(product_id)
        return to_domain(record) if record is not None else None

    def save(self, product: Product) -> None:
        with self._lock:
            if product.id in self._records:
                raise StorageError(f"Product '{product.id}' already exists")
            self._records[product.id] = to_record(product)

    def update(self, product: Product) -> None:
        expected = product.version - 1
        with self._lock:
            current = self._records.get(product.id)
            if current is None:
                raise EntityNotFoundError(f"Product '{product.id}' not found")
            if current["version"] != expected:
                raise VersionConflictError(product.id, expected, current["version"])
            self._records[product.id] = to_record(product)

    def delete(self, product_id: str) -> None:
        with self._lock:
            if self._records.pop(product_id, None) is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")

    # --- ProductReadRepository interface --------------------------------------

    def find_by_id(self, product_id: str) -> ProductReadModel | None:
        with self._lock:
            record = self._records.get(product_id)
        return to_read_model(record) if record is not None else None

    def find_all(self, product_filter: ProductFilter) -> list[ProductReadModel]:
        return product_filter.apply(self._snapshot())

    def find_by_status(self, status: ProductStatus) -> list[ProductReadModel]:
        return sort_for_listing(m for m in self._snapshot() if m.status == status)

    # --- Helpers --------------------------------------------------------------

    def _snapshot(self) -> list[ProductReadModel]:
        with self._lock:
            records = list(self._records.values())
        return [to_read_model(r) for r in records]
