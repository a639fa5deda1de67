"""Helpers for interacting with the public CoinGecko API."""

from __future__ import annotations

import logging
import time
from typing import List, Mapping, Optional
from urllib.parse import urlencode

import httpx
from pydantic import TypeAdapter, ValidationError

from coinlist.config.endpoints import COINS_MARKETS_PARAMS, COINS_MARKETS_URL, REQUEST_HEADERS
from coinlist.models.coin import Coin
from coinlist.services.market_data import BadResponse, DecodeError, InvalidURL

logger = logging.getLogger("coinlist.coingecko")

_COIN_LIST = TypeAdapter(List[Coin])


class CoinGeckoClient:
    """
    MarketDataSource backed by GET /coins/markets.

    Holds no state between calls besides the injected httpx client, so one
    instance can serve overlapping fetches.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str = COINS_MARKETS_URL,
        params: Optional[Mapping[str, str]] = None,
    ):
        self._http = http
        self._url = url
        self._params = dict(COINS_MARKETS_PARAMS if params is None else params)

    @property
    def url(self) -> str:
        return self._url

    def build_request(self) -> httpx.Request:
        try:
            target = httpx.URL(self._url)
        except (httpx.InvalidURL, TypeError) as exc:
            raise InvalidURL(self._url, str(exc)) from exc

        if target.scheme not in {"http", "https"}:
            raise InvalidURL(self._url, f"unsupported scheme {target.scheme!r}")
        if not target.host:
            raise InvalidURL(self._url, "missing host")

        # comma-separated values (price_change_percentage=24h,1h) stay literal on the wire
        query = urlencode(self._params, safe=",")
        if target.query:
            query = "&".join(part for part in (target.query.decode("ascii"), query) if part)
        target = target.copy_with(query=query.encode("ascii"))

        return self._http.build_request("GET", target, headers=REQUEST_HEADERS)

    async def fetch_coins(self) -> List[Coin]:
        request = self.build_request()

        t0 = time.perf_counter()
        try:
            response = await self._http.send(request)
        except httpx.HTTPError as exc:
            raise BadResponse(None, repr(exc)) from exc

        if response.status_code != httpx.codes.OK:
            raise BadResponse(response.status_code)

        try:
            coins = _COIN_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(_describe(exc)) from exc

        dt_ms = int((time.perf_counter() - t0) * 1000)
        logger.info("markets fetched | coins=%s | %dms", len(coins), dt_ms)
        return coins


def _describe(exc: ValidationError) -> str:
    # first few problems only; a broken payload can produce hundreds
    errors = exc.errors()
    parts = []
    for err in errors[:3]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc or '<root>'}: {err.get('msg')}")
    if len(errors) > 3:
        parts.append(f"(+{len(errors) - 3} more)")
    return "; ".join(parts)
