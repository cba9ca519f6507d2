"""Mapping between stored product records and domain objects.

A record is the flat dict every adapter persists. Amounts are kept as
strings so Decimal survives the JSON round trip untouched.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from catalog.domain.exceptions import CatalogError, StorageError
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.model.read_model import ProductReadModel
from catalog.domain.model.value_objects import Price, Stock, canonical_amount


def to_record(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price_amount": str(product.price.amount),
        "currency": product.price.currency,
        "stock_level": product.stock.quantity,
        "stock_unit": product.stock.unit,
        "status": product.status.value,
        "version": product.version,
    }


def to_domain(record: dict[str, Any]) -> Product:
    """Rebuild the aggregate, re-validating its value objects.

    Anything that no longer passes validation means the store holds data
    the domain would never have written, so it is reported as a storage
    failure rather than as a business error.
    """
    try:
        price = Price(_decimal(record["price_amount"]), record["currency"])
        stock = Stock(int(record["stock_level"]), record["stock_unit"])
        status = ProductStatus(record["status"])
        version = int(record["version"])
        if version < 1:
            raise StorageError(f"invalid stored version {version}")
        return Product(
            id=str(record["id"]),
            name=record["name"],
            description=record.get("description") or "",
            price=price,
            stock=stock,
            status=status,
            version=version,
        )
    except (CatalogError, KeyError, TypeError, ValueError) as exc:
        raise StorageError(
            f"Corrupt product record '{record.get('id')}': {exc}"
        ) from exc


def to_read_model(record: dict[str, Any]) -> ProductReadModel:
    try:
        return ProductReadModel(
            id=str(record["id"]),
            name=record["name"],
            description=record.get("description") or "",
            price_amount=_decimal(record["price_amount"]),
            currency=record["currency"],
            stock_level=int(record["stock_level"]),
            stock_unit=record["stock_unit"],
            status=ProductStatus(record["status"]),
            version=int(record["version"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(
            f"Corrupt product record '{record.get('id')}': {exc}"
        ) from exc


def _decimal(raw: Any) -> Decimal:
    try:
        value = Decimal(str(raw))
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount {raw!r}") from exc
    if not value.is_finite():
        raise ValueError(f"invalid amount {raw!r}")
    return canonical_amount(value)
