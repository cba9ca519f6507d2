"""Tests for the click commands, driven through CliRunner."""

import re

import pytest
from click.testing import CliRunner

from catalog.infrastructure.bootstrap import build_catalog
from catalog.infrastructure.cli.main import cli
from catalog.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from tests.fakes import BrokenProductRepository


@pytest.fixture
def catalog():
    repo = InMemoryProductRepository()
    return build_catalog(repo, repo)


def _run(catalog, *args):
    return CliRunner().invoke(cli, list(args), obj=catalog)


def _create(catalog, name="Widget", stock="5"):
    result = _run(
        catalog, "product", "create", "--name", name, "--price", "9.99", "--stock", stock
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Product (\S+) ", result.output).group(1)


class TestProductCommands:

    def test_create(self, catalog):
        result = _run(catalog, "product", "create", "--name", "Widget", "--price", "9.99")
        assert result.exit_code == 0
        assert "'Widget' created at 9.99 USD" in result.output
        assert "Status: DRAFT  Version: 1" in result.output

    def test_show(self, catalog):
        pid = _create(catalog)
        result = _run(catalog, "product", "show", "--id", pid)
        assert result.exit_code == 0
        assert "Price:       9.99 USD" in result.output
        assert "Stock:       5 unit" in result.output

    def test_list_empty(self, catalog):
        result = _run(catalog, "product", "list")
        assert result.exit_code == 0
        assert "No products found." in result.output

    def test_list_and_by_status(self, catalog):
        _create(catalog, name="Widget")
        _create(catalog, name="Gadget")

        listed = _run(catalog, "product", "list", "--search", "gad")
        by_status = _run(catalog, "product", "by-status", "draft")

        assert "Gadget" in listed.output
        assert "Widget" not in listed.output
        assert "Gadget" in by_status.output and "Widget" in by_status.output

    def test_update_and_status(self, catalog):
        pid = _create(catalog)

        activated = _run(
            catalog, "product", "status", "--id", pid, "--action", "activate", "--version", "1"
        )
        updated = _run(
            catalog, "product", "update", "--id", pid, "--version", "2", "--stock", "0"
        )

        assert f"Product {pid} is now ACTIVE (version 2)" in activated.output
        assert "(version 3)" in updated.output

    def test_stale_version_fails(self, catalog):
        pid = _create(catalog)
        _run(catalog, "product", "update", "--id", pid, "--version", "1", "--stock", "3")

        result = _run(
            catalog, "product", "update", "--id", pid, "--version", "1", "--stock", "4"
        )

        assert result.exit_code == 1
        assert "modified by another process" in result.output

    def test_delete(self, catalog):
        pid = _create(catalog)

        deleted = _run(catalog, "product", "delete", "--id", pid)
        again = _run(catalog, "product", "delete", "--id", pid)

        assert f"Product {pid} 'Widget' deleted." in deleted.output
        assert again.exit_code == 1
        assert "not found" in again.output

    def test_bad_price_is_usage_error(self, catalog):
        result = _run(catalog, "product", "create", "--name", "X", "--price", "cheap")
        assert result.exit_code == 2
        assert "not a valid amount" in result.output

    @pytest.mark.parametrize(
        "args",
        [
            ("product", "list"),
            ("product", "by-status", "active"),
            ("product", "show", "--id", "x"),
        ],
    )
    def test_storage_failure_is_reported_not_raised(self, args):
        broken = BrokenProductRepository()
        result = _run(build_catalog(broken, broken), *args)

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error: connection refused" in result.output
