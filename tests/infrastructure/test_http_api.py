"""End-to-end tests of the REST adapter over the in-memory store."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from catalog.infrastructure.bootstrap import build_catalog
from catalog.infrastructure.http.api import create_app
from catalog.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from tests.fakes import BrokenProductRepository

URL = "/api/v1/products"


def _client(repo=None) -> TestClient:
    repo = repo if repo is not None else InMemoryProductRepository()
    return TestClient(create_app(build_catalog(repo, repo)))


@pytest.fixture
def client():
    return _client()


def _create(client, **overrides):
    body = {
        "name": "Widget",
        "description": "A fine widget",
        "price": "9.99",
        "currency": "USD",
        "stock_level": 5,
        "stock_unit": "unit",
    }
    body.update(overrides)
    return client.post(URL, json=body)


class TestCreateAndRead:

    def test_create_returns_201(self, client):
        resp = _create(client)

        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Widget"
        assert Decimal(str(body["price_amount"])) == Decimal("9.99")
        assert body["status"] == "DRAFT"
        assert body["version"] == 1

    def test_get_by_id(self, client):
        pid = _create(client).json()["id"]

        resp = client.get(f"{URL}/{pid}")

        assert resp.status_code == 200
        assert resp.json()["id"] == pid
        assert resp.json()["stock_level"] == 5

    def test_get_unknown_is_404(self, client):
        resp = client.get(f"{URL}/missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_found"

    def test_price_finer_than_four_places_is_400(self, client):
        resp = _create(client, price="0.00009")
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation"

    def test_invalid_price_is_400(self, client):
        resp = _create(client, price="-1")
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "validation",
            "detail": "price cannot be negative",
        }


class TestListing:

    def test_list_with_filters_and_pages(self, client):
        for name, price in (("Gamma", "30"), ("alpha", "10"), ("Beta", "20")):
            _create(client, name=name, price=price)

        everything = client.get(URL).json()
        assert [p["name"] for p in everything["products"]] == ["alpha", "Beta", "Gamma"]
        assert everything["total"] == 3

        window = client.get(URL, params={"min_price": "15", "max_price": "30"}).json()
        assert [p["name"] for p in window["products"]] == ["Beta", "Gamma"]

        page = client.get(URL, params={"page_size": 2, "page": 1}).json()
        assert [p["name"] for p in page["products"]] == ["Gamma"]

    def test_list_by_status(self, client):
        _create(client, name="Draft")
        resp = client.get(f"{URL}/status/draft")
        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()["products"]] == ["Draft"]

    def test_unknown_status_is_400(self, client):
        assert client.get(f"{URL}/status/archived").status_code == 400
        assert client.get(URL, params={"status": "archived"}).status_code == 400

    def test_inverted_price_window_is_400(self, client):
        resp = client.get(URL, params={"min_price": "5", "max_price": "1"})
        assert resp.status_code == 400


class TestOptimisticConcurrency:

    def test_widget_lifecycle(self, client):
        pid = _create(client).json()["id"]

        activated = client.put(
            f"{URL}/{pid}/status", json={"action": "activate", "version": 1}
        )
        assert activated.status_code == 200
        assert activated.json() == {"id": pid, "status": "ACTIVE", "version": 2}

        emptied = client.put(f"{URL}/{pid}", json={"version": 2, "stock_level": 0})
        assert emptied.status_code == 200
        assert emptied.json()["stock_level"] == 0
        assert emptied.json()["version"] == 3

        stale = client.put(
            f"{URL}/{pid}/status", json={"action": "activate", "version": 2}
        )
        assert stale.status_code == 409
        assert stale.json()["error"] == "version_conflict"

    def test_price_and_stock_in_one_request_is_one_version(self, client):
        pid = _create(client).json()["id"]

        resp = client.put(
            f"{URL}/{pid}", json={"version": 1, "price": "12.50", "stock_level": 9}
        )

        assert resp.status_code == 200
        assert resp.json()["version"] == 2
        assert Decimal(str(resp.json()["price_amount"])) == Decimal("12.50")

    def test_rule_violation_is_422(self, client):
        pid = _create(client, stock_level=0).json()["id"]

        resp = client.put(
            f"{URL}/{pid}/status", json={"action": "activate", "version": 1}
        )

        assert resp.status_code == 422
        assert resp.json()["error"] == "domain_rule"

    def test_unknown_action_is_400(self, client):
        pid = _create(client).json()["id"]
        resp = client.put(f"{URL}/{pid}/status", json={"action": "launch", "version": 1})
        assert resp.status_code == 400

    def test_missing_version_is_rejected(self, client):
        pid = _create(client).json()["id"]
        resp = client.put(f"{URL}/{pid}", json={"stock_level": 1})
        assert resp.status_code == 422


class TestDelete:

    def test_delete_then_get(self, client):
        pid = _create(client).json()["id"]

        resp = client.delete(f"{URL}/{pid}")

        assert resp.status_code == 200
        assert resp.json()["id"] == pid
        assert client.get(f"{URL}/{pid}").status_code == 404
        assert client.delete(f"{URL}/{pid}").status_code == 404


class TestStorageFailure:

    def test_storage_error_is_500(self):
        client = _client(BrokenProductRepository())

        resp = client.get(URL)

        assert resp.status_code == 500
        assert resp.json() == {"error": "storage", "detail": "connection refused"}


class ExplodingRepository(InMemoryProductRepository):

    def find_all(self, product_filter):
        raise RuntimeError("disk on fire")


class TestRequestLogging:

    def test_successful_request_is_logged(self):
        with capture_logs() as logs:
            _client().get(URL)

        assert {
            "event": "http.request",
            "method": "GET",
            "path": URL,
            "status": 200,
            "log_level": "info",
        } in logs

    def test_unhandled_error_is_still_logged(self):
        repo = ExplodingRepository()
        client = TestClient(
            create_app(build_catalog(repo, repo)), raise_server_exceptions=False
        )

        with capture_logs() as logs:
            resp = client.get(URL)

        assert resp.status_code == 500
        requests = [e for e in logs if e["event"] == "http.request"]
        assert len(requests) == 1
        assert requests[0]["status"] == 500
        assert requests[0]["log_level"] == "error"
