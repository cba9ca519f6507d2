"""Domain events recorded by the Product aggregate.

Events accumulate on the aggregate's outbox and are handed to whoever
publishes them after a successful commit. The domain never dispatches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from catalog.domain.model.value_objects import Price


@dataclass(frozen=True)
class ProductPriceChanged:
    product_id: str
    old_price: Price
    new_price: Price
    changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return "product.price_changed"
