"""Application services: product listing queries.

Both handlers talk to the read repository only and hand back flat read
models; no aggregate is rebuilt on this path.
"""

from __future__ import annotations

import structlog
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import ListProductsQuery, ProductListResult
from catalog.domain.exceptions import ValidationError
from catalog.domain.model.product import ProductStatus
from catalog.domain.model.read_model import ProductFilter
from catalog.domain.repository.product_read_repository import ProductReadRepository


class ListProductsHandler:

    def __init__(
        self,
        read_repo: ProductReadRepository,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._read_repo = read_repo
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, query: ListProductsQuery) -> ProductListResult:
        product_filter = self._to_filter(query)
        products = self._read_repo.find_all(product_filter)
        self._log.debug(
            "product.listed",
            count=len(products),
            page_size=product_filter.page_size,
            page_number=product_filter.page_number,
        )
        return ProductListResult(products=products)

    @staticmethod
    def _to_filter(query: ListProductsQuery) -> ProductFilter:
        if query.page_number < 0:
            raise ValidationError("page number cannot be negative")
        if query.min_stock is not None and query.min_stock < 0:
            raise ValidationError("minimum stock cannot be negative")
        if (
            query.min_price is not None
            and query.max_price is not None
            and query.min_price > query.max_price
        ):
            raise ValidationError("minimum price cannot exceed maximum price")

        return ProductFilter(
            min_price=query.min_price,
            max_price=query.max_price,
            status=query.status,
            min_stock=query.min_stock,
            search_term=query.search_term or "",
            page_size=query.page_size,
            page_number=query.page_number,
        )


class ListProductsByStatusHandler:

    def __init__(self, read_repo: ProductReadRepository) -> None:
        self._read_repo = read_repo

    def handle(self, status: ProductStatus) -> ProductListResult:
        return ProductListResult(products=self._read_repo.find_by_status(status))
