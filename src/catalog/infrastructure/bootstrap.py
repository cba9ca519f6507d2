"""Composition root: picks a storage backend and wires every handler to it.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions, and every handler gets
its logger from here rather than from module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass

from catalog.application.change_product_status import ChangeProductStatusHandler
from catalog.application.create_product import CreateProductHandler
from catalog.application.delete_product import DeleteProductHandler
from catalog.application.get_product import GetProductHandler
from catalog.application.list_products import (
    ListProductsByStatusHandler,
    ListProductsHandler,
)
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.repository.product_read_repository import ProductReadRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.config import Settings, load_settings
from catalog.infrastructure.log_config import configure_logging, get_logger
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from catalog.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from catalog.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
    create_sql_engine,
)


@dataclass(frozen=True)
class Catalog:
    """Every handler the transports need, already wired."""

    create_product: CreateProductHandler
    update_product: UpdateProductHandler
    change_product_status: ChangeProductStatusHandler
    delete_product: DeleteProductHandler
    get_product: GetProductHandler
    list_products: ListProductsHandler
    list_products_by_status: ListProductsByStatusHandler


def product_repositories(
    settings: Settings,
) -> tuple[ProductRepository, ProductReadRepository]:
    """Build the write and read ports for the configured backend.

    Every backend implements both ports with one object, but callers only
    ever see them through the separate interfaces.
    """
    log = get_logger("catalog.persistence")
    if settings.backend == "memory":
        repo = InMemoryProductRepository()
        return repo, repo
    if settings.backend == "json":
        json_repo = JsonProductRepository(settings.products_file, logger=log)
        return json_repo, json_repo
    if settings.backend == "sql":
        if settings.db_url.startswith("sqlite:///"):
            settings.data_dir.mkdir(parents=True, exist_ok=True)
        sql_repo = SqlProductRepository(create_sql_engine(settings.db_url), logger=log)
        sql_repo.create_schema()
        return sql_repo, sql_repo
    raise ValueError(f"Unknown backend: {settings.backend!r}")


def build_catalog(
    write_repo: ProductRepository,
    read_repo: ProductReadRepository,
) -> Catalog:
    return Catalog(
        create_product=CreateProductHandler(
            write_repo, logger=get_logger("catalog.commands.create")
        ),
        update_product=UpdateProductHandler(
            write_repo, logger=get_logger("catalog.commands.update")
        ),
        change_product_status=ChangeProductStatusHandler(
            write_repo, logger=get_logger("catalog.commands.status")
        ),
        delete_product=DeleteProductHandler(
            write_repo, logger=get_logger("catalog.commands.delete")
        ),
        get_product=GetProductHandler(read_repo),
        list_products=ListProductsHandler(
            read_repo, logger=get_logger("catalog.queries.list")
        ),
        list_products_by_status=ListProductsByStatusHandler(read_repo),
    )


def bootstrap(settings: Settings | None = None) -> Catalog:
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_json)
    write_repo, read_repo = product_repositories(settings)
    return build_catalog(write_repo, read_repo)
