"""Test doubles for the repository ports.

The in-memory adapter is the default store in tests; the classes below
bend it to simulate racing writers, spy on persistence calls, or fail
like a dead database.
"""

from __future__ import annotations

from decimal import Decimal

from catalog.domain.exceptions import StorageError
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.model.read_model import ProductFilter, ProductReadModel
from catalog.domain.model.value_objects import Price, Stock
from catalog.domain.repository.product_read_repository import ProductReadRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)


def make_product(
    name: str = "Widget",
    price: str = "9.99",
    currency: str = "USD",
    quantity: int = 5,
    unit: str = "unit",
    description: str = "",
) -> Product:
    return Product.create(
        name, description, Price(Decimal(price), currency), Stock(quantity, unit)
    )


class SpyProductRepository(InMemoryProductRepository):
    """Records every write the handlers attempt."""

    def __init__(self, products: list[Product] | None = None) -> None:
        self.writes: list[tuple[str, str]] = []
        super().__init__(products)
        self.writes.clear()

    def save(self, product: Product) -> None:
        self.writes.append(("save", product.id))
        super().save(product)

    def update(self, product: Product) -> None:
        self.writes.append(("update", product.id))
        super().update(product)

    def delete(self, product_id: str) -> None:
        self.writes.append(("delete", product_id))
        super().delete(product_id)

    def reset(self) -> None:
        self.writes.clear()


class RacingProductRepository(InMemoryProductRepository):
    """Another writer commits between every read and the following write."""

    def get_by_id(self, product_id: str) -> Product | None:
        product = super().get_by_id(product_id)
        if product is not None:
            rival = super().get_by_id(product_id)
            rival.update_stock(rival.stock.quantity + 1)
            self.update(rival)
        return product


class VanishingProductRepository(InMemoryProductRepository):
    """The product disappears right after it has been read."""

    def get_by_id(self, product_id: str) -> Product | None:
        product = super().get_by_id(product_id)
        if product is not None:
            super().delete(product_id)
        return product


class BrokenProductRepository(ProductRepository, ProductReadRepository):
    """Every call fails as if the database were unreachable."""

    def _fail(self):
        raise StorageError("connection refused")

    def get_by_id(self, product_id: str) -> Product | None:
        self._fail()

    def save(self, product: Product) -> None:
        self._fail()

    def update(self, product: Product) -> None:
        self._fail()

    def delete(self, product_id: str) -> None:
        self._fail()

    def find_by_id(self, product_id: str) -> ProductReadModel | None:
        self._fail()

    def find_all(self, product_filter: ProductFilter) -> list[ProductReadModel]:
        self._fail()

    def find_by_status(self, status: ProductStatus) -> list[ProductReadModel]:
        self._fail()
