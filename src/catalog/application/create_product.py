"""Application service: Create Product use case."""

from __future__ import annotations

import structlog
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import CreateProductCommand
from catalog.domain.model.product import Product
from catalog.domain.model.value_objects import Price, Stock
from catalog.domain.repository.product_repository import ProductRepository


class CreateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, cmd: CreateProductCommand) -> Product:
        """Add a new DRAFT product to the catalog.

        Price, then Stock, then the aggregate are built before anything
        touches the repository, so invalid input never reaches storage.
        """
        price = Price.of(cmd.price, cmd.currency)
        stock = Stock(cmd.stock_level, cmd.stock_unit)
        product = Product.create(cmd.name, cmd.description, price, stock)

        self._product_repo.save(product)
        self._log.info(
            "product.created", product_id=product.id, version=product.version
        )
        return product
