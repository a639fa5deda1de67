"""Deterministic MarketDataSource for tests and offline runs."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from coinlist.models.coin import Coin
from coinlist.services.market_data import FetchError

SAMPLE_COINS: tuple[Coin, ...] = (
    Coin(
        id="bitcoin",
        symbol="btc",
        name="Bitcoin",
        image="https://assets.coingecko.com/coins/images/1/large/bitcoin.png?1547033579",
        current_price=20000.00,
    ),
    Coin(
        id="ethereum",
        symbol="eth",
        name="Ethereum",
        image="https://assets.coingecko.com/coins/images/279/large/ethereum.png?1595348880",
        current_price=1500.00,
    ),
)


class FixtureMarketDataSource:
    """
    Returns a fixed coin list after an optional simulated delay.

    Pass `error` to make every fetch fail with it instead.
    """

    def __init__(
        self,
        coins: Optional[Sequence[Coin]] = None,
        *,
        delay_seconds: float = 0.0,
        error: Optional[FetchError] = None,
    ):
        self._coins = tuple(SAMPLE_COINS if coins is None else coins)
        self._delay = max(0.0, float(delay_seconds))
        self._error = error
        self.calls = 0

    async def fetch_coins(self) -> List[Coin]:
        self.calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._coins)
