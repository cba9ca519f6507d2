"""Application service: Get Product use case (query)."""

from __future__ import annotations

from catalog.application.dto import GetProductQuery
from catalog.domain.exceptions import EntityNotFoundError
from catalog.domain.model.read_model import ProductReadModel
from catalog.domain.repository.product_read_repository import ProductReadRepository


class GetProductHandler:

    def __init__(self, read_repo: ProductReadRepository) -> None:
        self._read_repo = read_repo

    def handle(self, query: GetProductQuery) -> ProductReadModel:
        product = self._read_repo.find_by_id(query.product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{query.product_id}' not found")
        return product
