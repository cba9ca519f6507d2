"""SQLAlchemy Core implementation of both product repository ports.

Optimistic locking is a single conditional statement::

    UPDATE products SET ... WHERE id = :id AND version = :expected

and the affected row count decides the outcome. Nothing is read and then
written in two steps.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
    func,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from structlog.typing import FilteringBoundLogger

from catalog.domain.exceptions import (
    EntityNotFoundError,
    StorageError,
    VersionConflictError,
)
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.model.read_model import ProductFilter, ProductReadModel
from catalog.domain.model.value_objects import PRICE_PRECISION, PRICE_SCALE
from catalog.domain.repository.product_read_repository import ProductReadRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.records import (
    to_domain,
    to_read_model,
    to_record,
)

metadata = MetaData()

products_table = Table(
    "products",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column(
        "price_amount",
        Numeric(PRICE_PRECISION, PRICE_SCALE, asdecimal=True),
        nullable=False,
    ),
    Column("currency", String(8), nullable=False),
    Column("stock_level", Integer, nullable=False),
    Column("stock_unit", String(32), nullable=False),
    Column("status", String(16), nullable=False, index=True),
    Column("version", Integer, nullable=False),
)


def create_sql_engine(db_url: str, echo: bool = False) -> Engine:
    """Build an engine; in-memory SQLite shares one connection across threads."""
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            db_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_engine(db_url, echo=echo)


class SqlProductRepository(ProductRepository, ProductReadRepository):

    def __init__(
        self,
        engine: Engine,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self._engine = engine
        self._log = logger or structlog.get_logger(__name__)

    def create_schema(self) -> None:
        try:
            metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot create schema: {exc}") from exc

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        row = self._fetch_one(product_id)
        return to_domain(row) if row is not None else None

    def save(self, product: Product) -> None:
        stmt = products_table.insert().values(**self._to_row(product))
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as exc:
            raise StorageError(f"Product '{product.id}' already exists") from exc
        except SQLAlchemyError as exc:
            self._log.error("storage.write_failed", product_id=product.id)
            raise StorageError(f"Cannot save product '{product.id}': {exc}") from exc

    def update(self, product: Product) -> None:
        expected = product.version - 1
        t = products_table
        stmt = (
            t.update()
            .where(t.c.id == product.id, t.c.version == expected)
            .values(**self._to_row(product))
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
                if result.rowcount == 1:
                    return
                current = conn.execute(
                    select(t.c.version).where(t.c.id == product.id)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            self._log.error("storage.write_failed", product_id=product.id)
            raise StorageError(f"Cannot update product '{product.id}': {exc}") from exc

        if current is None:
            raise EntityNotFoundError(f"Product '{product.id}' not found")
        raise VersionConflictError(product.id, expected, current)

    def delete(self, product_id: str) -> None:
        stmt = products_table.delete().where(products_table.c.id == product_id)
        try:
            with self._engine.begin() as conn:
                deleted = conn.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            self._log.error("storage.write_failed", product_id=product_id)
            raise StorageError(f"Cannot delete product '{product_id}': {exc}") from exc
        if deleted == 0:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

    # --- ProductReadRepository interface --------------------------------------

    def find_by_id(self, product_id: str) -> ProductReadModel | None:
        row = self._fetch_one(product_id)
        return to_read_model(row) if row is not None else None

    def find_all(self, product_filter: ProductFilter) -> list[ProductReadModel]:
        t = products_table
        stmt = select(t)
        if product_filter.min_price is not None:
            stmt = stmt.where(t.c.price_amount >= product_filter.min_price)
        if product_filter.max_price is not None:
            stmt = stmt.where(t.c.price_amount <= product_filter.max_price)
        if product_filter.status is not None:
            stmt = stmt.where(t.c.status == product_filter.status.value)
        if product_filter.min_stock is not None:
            stmt = stmt.where(t.c.stock_level >= product_filter.min_stock)
        term = product_filter.normalized_search
        if term:
            stmt = stmt.where(
                func.lower(t.c.name).contains(term, autoescape=True)
                | func.lower(t.c.description).contains(term, autoescape=True)
            )
        stmt = stmt.order_by(func.lower(t.c.name), t.c.id)
        if product_filter.is_paginated:
            stmt = stmt.limit(product_filter.page_size).offset(product_filter.offset)
        return [to_read_model(row) for row in self._fetch_all(stmt)]

    def find_by_status(self, status: ProductStatus) -> list[ProductReadModel]:
        t = products_table
        stmt = (
            select(t)
            .where(t.c.status == status.value)
            .order_by(func.lower(t.c.name), t.c.id)
        )
        return [to_read_model(row) for row in self._fetch_all(stmt)]

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _to_row(product: Product) -> dict[str, Any]:
        row = to_record(product)
        row["price_amount"] = product.price.amount
        return row

    def _fetch_one(self, product_id: str) -> dict[str, Any] | None:
        stmt = select(products_table).where(products_table.c.id == product_id)
        rows = self._fetch_all(stmt)
        return rows[0] if rows else None

    def _fetch_all(self, stmt) -> list[dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            self._log.error("storage.read_failed")
            raise StorageError(f"Cannot read products: {exc}") from exc
