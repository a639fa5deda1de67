# coinlist/main.py
from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI

from coinlist.api.coins import router as coins_router
from coinlist.api.health import router as health_router

from coinlist.config.settings import get_settings
from coinlist.services.coin_list import CoinListController
from coinlist.services.sources import build_http_client, build_market_data_source

logger = logging.getLogger("coinlist.app")

app = FastAPI(title="Coin List API")

# Routers
app.include_router(health_router)
app.include_router(coins_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Coin list"}


@app.on_event("startup")
async def on_startup() -> None:
    settings = get_settings()

    app.state.http = build_http_client(settings)
    source = build_market_data_source(settings, app.state.http)
    app.state.controller = CoinListController(source, discard_stale=settings.DISCARD_STALE)

    # first load runs in the background so startup does not wait on the network
    if settings.LOAD_ON_STARTUP:
        app.state.initial_load = asyncio.create_task(app.state.controller.initialize())
    else:
        app.state.initial_load = None
    logger.info("coin list app started | source=%s", settings.DATA_SOURCE)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    task = getattr(app.state, "initial_load", None)
    if task is not None and not task.done():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
    app.state.initial_load = None

    http = getattr(app.state, "http", None)
    if http is not None:
        await http.aclose()
    app.state.http = None
