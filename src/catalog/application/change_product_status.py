"""Application service: Change Product Status use case."""

from __future__ import annotations

from typing import Callable

import structlog
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import ChangeProductStatusCommand, ProductStatusResult
from catalog.domain.exceptions import (
    EntityNotFoundError,
    ValidationError,
    VersionConflictError,
)
from catalog.domain.model.product import Product
from catalog.domain.repository.product_repository import ProductRepository

# Status actions the transport may request, mapped to the aggregate method.
ACTIONS: dict[str, Callable[[Product], None]] = {
    "activate": Product.activate,
    "deactivate": Product.deactivate,
    "discontinue": Product.discontinue,
}


class ChangeProductStatusHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._log = logger or structlog.get_logger(__name__)

    def handle(self, cmd: ChangeProductStatusCommand) -> ProductStatusResult:
        """Run one state-machine transition on a product.

        An unknown action is rejected as bad input before the product is
        even loaded; guard failures come from the aggregate itself.
        """
        action = (cmd.action or "").strip().lower()
        transition = ACTIONS.get(action)
        if transition is None:
            raise ValidationError(f"invalid status change action: {cmd.action!r}")

        log = self._log.bind(product_id=cmd.product_id, action=action)

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

        transition(product)
        self._product_repo.update(product)

        log.info(
            "product.status_changed",
            status=product.status.value,
            version=product.version,
        )
        return ProductStatusResult(
            id=product.id, status=product.status, version=product.version
        )
