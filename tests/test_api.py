"""Tests for the HTTP query interface."""

import time

from fastapi.testclient import TestClient

from circulating_supply.api.server import create_app
from circulating_supply.calculator.supply import SupplyCalculator
from circulating_supply.core.models import Snapshot


def wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestRoutes:
    """Tests for the two read-only routes."""

    def test_initial_zero(self, store):
        """Before the first cycle both routes serve zero."""
        client = TestClient(create_app(store))

        assert client.get("/").text == "0"
        assert client.get("/total").text == "0"

    def test_serves_published_snapshot(self, store):
        store.publish(Snapshot(total_supply="8537500", circulating_supply="2915421.25"))
        client = TestClient(create_app(store))

        root = client.get("/")
        assert root.status_code == 200
        assert root.text == "2915421.25"
        assert root.headers["content-type"].startswith("text/plain")

        total = client.get("/total")
        assert total.status_code == 200
        assert total.text == "8537500"
        assert total.headers["content-type"].startswith("text/plain")

    def test_routes_follow_replacement(self, store):
        client = TestClient(create_app(store))

        store.publish(Snapshot(total_supply="2", circulating_supply="1"))
        assert (client.get("/").text, client.get("/total").text) == ("1", "2")

        store.publish(Snapshot(total_supply="4", circulating_supply="3"))
        assert (client.get("/").text, client.get("/total").text) == ("3", "4")

    def test_unknown_route_not_found(self, store):
        """Unknown paths return 404 with an empty body."""
        client = TestClient(create_app(store))

        response = client.get("/foo")

        assert response.status_code == 404
        assert response.content == b""

    def test_no_docs_routes(self, store):
        client = TestClient(create_app(store))

        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


class TestLifespan:
    """Tests for the background refresh task owned by the app."""

    def test_refresh_loop_publishes(self, scenario_ledger, default_exclusions, store):
        """The app starts the refresh loop and serves its results."""
        calculator = SupplyCalculator(scenario_ledger, default_exclusions, store, refresh_interval=60)
        app = create_app(store, calculator)

        with TestClient(app) as client:
            assert wait_for(lambda: not store.current().is_initial)
            assert client.get("/").text == "0.00000000000000065"
            assert client.get("/total").text == "0.000000000000001"

        assert scenario_ledger.closed

    def test_failed_refresh_serves_last_snapshot(self, scenario_ledger, default_exclusions, store):
        """Refresh errors never reach HTTP readers."""
        store.publish(Snapshot(total_supply="7", circulating_supply="5"))
        scenario_ledger.fail_on = "totalSupply"
        calculator = SupplyCalculator(scenario_ledger, default_exclusions, store, refresh_interval=60)

        with TestClient(create_app(store, calculator)) as client:
            assert wait_for(lambda: ("totalSupply", None) in scenario_ledger.calls)
            root = client.get("/")
            total = client.get("/total")

        assert (root.status_code, root.text) == (200, "5")
        assert (total.status_code, total.text) == (200, "7")
