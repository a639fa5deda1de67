from __future__ import annotations

import httpx

from coinlist.config.settings import Settings
from coinlist.services.coingecko import CoinGeckoClient
from coinlist.services.fixtures import FixtureMarketDataSource
from coinlist.services.market_data import MarketDataSource

DATA_SOURCES = ("coingecko", "fixture")


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    # No explicit timeout means httpx's own default applies.
    if settings.HTTP_TIMEOUT_SECONDS is None:
        return httpx.AsyncClient()
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def build_market_data_source(settings: Settings, http: httpx.AsyncClient | None = None) -> MarketDataSource:
    """
    Pick the configured source. The HTTP client is owned by the caller and
    required for the coingecko source.
    """
    name = settings.DATA_SOURCE
    if name == "fixture":
        return FixtureMarketDataSource(delay_seconds=settings.FIXTURE_DELAY_SECONDS)
    if name == "coingecko":
        if http is None:
            raise ValueError("coingecko source needs an httpx.AsyncClient")
        return CoinGeckoClient(http, url=settings.MARKETS_URL, params=settings.markets_params())
    raise ValueError(f"Unknown COINLIST_DATA_SOURCE: {name!r} (expected one of {', '.join(DATA_SOURCES)})")
