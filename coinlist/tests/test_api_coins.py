from __future__ import annotations

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coinlist.api.coins import router as coins_router
from coinlist.api.health import router as health_router
from coinlist.services.coin_list import CoinListController, LoadOutcome
from coinlist.services.fixtures import FixtureMarketDataSource
from coinlist.services.market_data import BadResponse


class _SwitchableSource:
    def __init__(self):
        self.inner = FixtureMarketDataSource()

    async def fetch_coins(self):
        return await self.inner.fetch_coins()


@pytest.fixture()
def coins_client():
    source = _SwitchableSource()
    controller = CoinListController(source)

    app = FastAPI()
    app.include_router(health_router)
    app.include_router(coins_router)
    app.state.controller = controller
    # one portal for the whole test so the update loop outlives each request
    with TestClient(app) as client:
        yield client, controller, source


def test_list_is_empty_before_first_load(coins_client):
    client, _, _ = coins_client
    resp = client.get("/coins")
    assert resp.status_code == 200
    assert resp.json() == []


def test_refresh_loads_then_lists_rows(coins_client):
    client, controller, _ = coins_client

    resp = client.post("/coins/refresh")
    assert resp.status_code == 200
    assert resp.json() == {"refreshed": True, "outcome": "applied", "count": 2, "error": None}
    assert controller.initialized is True

    rows = client.get("/coins").json()
    assert [r["id"] for r in rows] == ["bitcoin", "ethereum"]
    assert rows[0]["display_symbol"] == "BTC"
    assert rows[0]["display_price"] == "$20,000.00"
    assert rows[1]["display_price"] == "$1,500.00"


def test_detail_view(coins_client):
    client, _, _ = coins_client
    client.post("/coins/refresh")

    resp = client.get("/coins/ethereum")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Ethereum"
    assert body["image"].endswith("ethereum.png?1595348880")

    missing = client.get("/coins/dogecoin")
    assert missing.status_code == 404


def test_failed_refresh_keeps_rows_and_reports_error(coins_client):
    client, _, source = coins_client
    client.post("/coins/refresh")

    source.inner = FixtureMarketDataSource(error=BadResponse(503))
    resp = client.post("/coins/refresh")

    assert resp.status_code == 200
    body = resp.json()
    assert body["refreshed"] is False
    assert body["outcome"] == "failed"
    assert body["count"] == 2
    assert "503" in body["error"]
    assert len(client.get("/coins").json()) == 2


def test_discarded_refresh_reports_no_stale_error(coins_client, monkeypatch):
    client, controller, source = coins_client
    client.post("/coins/refresh")
    source.inner = FixtureMarketDataSource(error=BadResponse(503))
    client.post("/coins/refresh")
    assert controller.last_error is not None

    async def _lost_to_newer_load():
        return LoadOutcome.DISCARDED

    monkeypatch.setattr(controller, "refresh", _lost_to_newer_load)
    body = client.post("/coins/refresh").json()

    assert body == {"refreshed": False, "outcome": "discarded", "count": 2, "error": None}


def test_ready_reports_not_initialized(coins_client):
    client, _, _ = coins_client
    resp = client.get("/ready")
    assert resp.status_code == 503
    assert resp.json()["degraded_reasons"] == ["not_initialized"]


def test_ready_after_load(coins_client):
    client, _, _ = coins_client
    client.post("/coins/refresh")

    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["checks"]["coins"]["count"] == 2


def test_ready_stays_up_with_stale_list(coins_client):
    client, _, source = coins_client
    client.post("/coins/refresh")
    source.inner = FixtureMarketDataSource(error=BadResponse(None, "connect timeout"))
    client.post("/coins/refresh")

    resp = client.get("/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["coins"]["last_error"]["type"] == "BadResponse"


def test_missing_controller_is_503():
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(coins_router)
    client = TestClient(app)

    assert client.get("/coins").status_code == 503
    assert client.get("/ready").status_code == 503


async def _await(task):
    return await asyncio.wait_for(task, timeout=5)


def test_app_startup_runs_initial_load(monkeypatch):
    monkeypatch.setenv("COINLIST_DATA_SOURCE", "fixture")
    from coinlist.config import settings as settings_module
    from coinlist import main as main_module

    monkeypatch.setattr(settings_module, "_settings", None)

    with TestClient(main_module.app) as client:
        task = main_module.app.state.initial_load
        assert task is not None
        client.portal.call(_await, task)

        rows = client.get("/coins").json()
        assert [r["symbol"] for r in rows] == ["btc", "eth"]
        assert client.get("/").json() == {"message": "Coin list"}

    assert main_module.app.state.http is None
