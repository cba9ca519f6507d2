"""Abstract read repository serving ProductReadModel projections.

Kept apart from ProductRepository even when one backend implements both,
so the query side can move to its own store later.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import ProductStatus
from catalog.domain.model.read_model import ProductFilter, ProductReadModel


class ProductReadRepository(ABC):

    @abstractmethod
    def find_by_id(self, product_id: str) -> ProductReadModel | None:
        """Return the projection of a product, or None if not found."""

    @abstractmethod
    def find_all(self, product_filter: ProductFilter) -> list[ProductReadModel]:
        """Return the products matching every criterion of the filter."""

    @abstractmethod
    def find_by_status(self, status: ProductStatus) -> list[ProductReadModel]:
        """Return every product currently in the given status."""
