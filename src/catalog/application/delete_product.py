"""Application service: Delete Product use case.

Deletion is unconditional once the product is found: there is no version
check and no tombstone.
"""

from __future__ import annotations

import structlog
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import DeleteProductCommand
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.product import Product
from catalog.domain.repository.product_repository import ProductRepository


class DeleteProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, cmd: DeleteProductCommand) -> Product:
        """Remove a product and return what was removed."""
        product = self._product_repo.get_by_id(cmd.product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{cmd.product_id}' not found")

        self._product_repo.delete(cmd.product_id)
        self._log.info("product.deleted", product_id=cmd.product_id)
        return product
