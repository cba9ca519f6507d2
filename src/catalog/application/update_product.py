"""Application service: Update Product use case.

Price and stock changes are applied as a single aggregate mutation, so a
successful update always advances the version by exactly one.  The
version the caller read is checked here first; the repository checks it
again atomically when writing, which is what actually settles races.
"""

from __future__ import annotations

import structlog
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import UpdateProductCommand
from catalog.domain.exceptions import EntityNotFoundError, VersionConflictError
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Price
from catalog.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, cmd: UpdateProductCommand) -> Product:
        log = self._log.bind(product_id=cmd.product_id)

        product = self._product_repo.get_by_id(cmd.product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{cmd.product_id}' not found")

        if product.version != cmd.version:
            log.warning(
                "product.version_conflict",
                expected=cmd.version,
                actual=product.version,
            )
            raise VersionConflictError(cmd.product_id, cmd.version, product.version)

        product.revise(
            price=self._new_price(product, cmd),
            stock_quantity=cmd.stock_level,
        )

        try:
            self._product_repo.update(product)
        except VersionConflictError:
            log.warning("product.version_conflict", expected=cmd.version)
            raise

        log.info("product.updated", version=product.version)
        return product

    @staticmethod
    def _new_price(product: Product, cmd: UpdateProductCommand) -> Price | None:
        """Build the replacement price, or None when neither field was sent."""
        if cmd.price is None and cmd.currency is None:
            return None
        if cmd.price is None:
            return product.price.with_currency(cmd.currency)  # type: ignore[arg-type]
        return Price.of(cmd.price, cmd.currency or product.price.currency)
