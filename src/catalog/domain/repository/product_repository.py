"""Abstract write repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (in-memory, JSON, SQL)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Rebuild the aggregate by its ID, or return None if not found.

        Raises StorageError when the stored record cannot be turned back
        into a valid aggregate.
        """

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new product. Raises StorageError if the ID is taken."""

    @abstractmethod
    def update(self, product: Product) -> None:
        """Persist a mutated product with an atomic version check.

        The write only happens when the stored version equals
        ``product.version - 1``. Raises EntityNotFoundError when the ID is
        unknown and VersionConflictError when the stored version differs.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product. Raises EntityNotFoundError if it does not exist."""
