"""Tests for settings loading and backend wiring."""

import logging
from pathlib import Path

import pytest
import structlog

from catalog.application.dto import (
    CreateProductCommand,
    GetProductQuery,
    ListProductsQuery,
)
from catalog.domain.model.product import ProductStatus
from catalog.infrastructure.bootstrap import bootstrap, product_repositories
from catalog.infrastructure.config import Settings, load_settings
from catalog.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from catalog.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from catalog.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
)

ENV_VARS = (
    "CATALOG_BACKEND",
    "CATALOG_DATA_DIR",
    "CATALOG_DATABASE_URL",
    "CATALOG_LOG_LEVEL",
    "CATALOG_LOG_JSON",
    "CATALOG_HOST",
    "CATALOG_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.backend == "json"
        assert settings.data_dir == Path("data")
        assert settings.products_file == Path("data") / "products.json"
        assert settings.port == 8080
        assert settings.log_json is False

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CATALOG_BACKEND", " SQL ")
        monkeypatch.setenv("CATALOG_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("CATALOG_LOG_LEVEL", "debug")
        monkeypatch.setenv("CATALOG_LOG_JSON", "true")
        monkeypatch.setenv("CATALOG_PORT", "9000")

        settings = load_settings()

        assert settings.backend == "sql"
        assert settings.db_url == f"sqlite:///{tmp_path / 'catalog.db'}"
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.port == 9000

    def test_explicit_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("CATALOG_DATABASE_URL", "postgresql://db/catalog")
        assert load_settings().db_url == "postgresql://db/catalog"

    def test_unknown_backend_fails_fast(self, monkeypatch):
        monkeypatch.setenv("CATALOG_BACKEND", "mongo")
        with pytest.raises(ValueError, match="CATALOG_BACKEND"):
            load_settings()


class TestWiring:

    def test_memory_backend_shares_one_store(self):
        write_repo, read_repo = product_repositories(Settings(backend="memory"))
        assert isinstance(write_repo, InMemoryProductRepository)
        assert write_repo is read_repo

    def test_json_backend(self, tmp_path):
        write_repo, _ = product_repositories(Settings(backend="json", data_dir=tmp_path))
        assert isinstance(write_repo, JsonProductRepository)
        assert (tmp_path / "products.json").exists()

    def test_sql_backend_creates_schema(self, tmp_path):
        write_repo, read_repo = product_repositories(
            Settings(backend="sql", data_dir=tmp_path / "db")
        )
        assert isinstance(write_repo, SqlProductRepository)
        assert read_repo.find_by_status(ProductStatus.DRAFT) == []
        assert (tmp_path / "db" / "catalog.db").exists()

    def test_bootstrap_wires_every_handler(self, restore_logging):
        catalog = bootstrap(Settings(backend="memory", log_level="WARNING"))

        product = catalog.create_product.handle(
            CreateProductCommand("Widget", "", "9.99", "USD", 5, "unit")
        )

        assert catalog.get_product.handle(GetProductQuery(product.id)).name == "Widget"
        assert catalog.list_products.handle(ListProductsQuery()).total == 1
