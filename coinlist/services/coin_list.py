# coinlist/services/coin_list.py
from __future__ import annotations

import asyncio
import concurrent.futures
import itertools
import logging
import threading
import time
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from coinlist.models.coin import Coin
from coinlist.services.market_data import FetchError, MarketDataSource
from coinlist.utils.time import iso_z, utcnow

logger = logging.getLogger("coinlist.controller")

CoinsObserver = Callable[[Tuple[Coin, ...]], Any]
ErrorObserver = Callable[[FetchError], Any]


class LoadOutcome(str, Enum):
    APPLIED = "applied"
    FAILED = "failed"
    DISCARDED = "discarded"

    def __bool__(self) -> bool:
        return self is LoadOutcome.APPLIED


class CoinListController:
    """
    Owns the current coin list and mediates fetches against a MarketDataSource.

    Construction does no I/O. The owner calls `initialize()` from inside the
    event loop that should own the state; every later write to `coins` and
    every observer callback runs on that loop, even when `load()` itself is
    awaited from another thread's loop.

    Overlapping loads are not de-duplicated. With `discard_stale=True` each
    load is tagged with a generation number and a response is dropped when a
    newer load has already published; with `discard_stale=False` the last
    completion wins.

    `load()` and `refresh()` return a LoadOutcome: APPLIED, FAILED, or
    DISCARDED for a response that lost to a newer one.
    """

    def __init__(self, source: MarketDataSource, *, discard_stale: bool = True):
        self._source = source
        self._discard_stale = discard_stale

        self._coins: Tuple[Coin, ...] = ()
        self._last_error: Optional[FetchError] = None
        self._last_updated: Optional[datetime] = None
        self._update_loop: Optional[asyncio.AbstractEventLoop] = None

        self._generations = itertools.count(1)
        self._published_generation = 0
        self._in_flight = 0
        self._in_flight_lock = threading.Lock()

        self._observers: List[CoinsObserver] = []
        self._error_observers: List[ErrorObserver] = []

    # ----------------------------
    # observable state
    # ----------------------------
    @property
    def coins(self) -> Tuple[Coin, ...]:
        return self._coins

    @property
    def last_error(self) -> Optional[FetchError]:
        return self._last_error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._last_updated

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def initialized(self) -> bool:
        return self._update_loop is not None

    @property
    def generation(self) -> int:
        return self._published_generation

    def get(self, coin_id: str) -> Optional[Coin]:
        for coin in self._coins:
            if coin.id == coin_id:
                return coin
        return None

    def subscribe(self, callback: CoinsObserver) -> Callable[[], None]:
        self._observers.append(callback)
        return lambda: _discard(self._observers, callback)

    def subscribe_errors(self, callback: ErrorObserver) -> Callable[[], None]:
        self._error_observers.append(callback)
        return lambda: _discard(self._error_observers, callback)

    def status(self) -> Dict[str, Any]:
        err = self._last_error
        return {
            "initialized": self.initialized,
            "loading": self.loading,
            "count": len(self._coins),
            "generation": self._published_generation,
            "last_updated_iso": iso_z(self._last_updated),
            "last_error": None
            if err is None
            else {"type": type(err).__name__, "message": str(err)},
        }

    # ----------------------------
    # operations
    # ----------------------------
    async def initialize(self) -> LoadOutcome:
        """Bind the update context to the running loop and perform the first load."""
        if self._update_loop is None:
            self._update_loop = asyncio.get_running_loop()
        return await self.load()

    async def load(self) -> LoadOutcome:
        """
        Fetch and publish. The outcome is truthy only when the fetched list
        was applied. Fetch failures are recorded and reported, never raised.
        """
        generation = next(self._generations)
        with self._in_flight_lock:
            self._in_flight += 1
        t0 = time.perf_counter()
        try:
            try:
                coins = await self._source.fetch_coins()
            except FetchError as exc:
                dt_ms = int((time.perf_counter() - t0) * 1000)
                logger.warning("coin list load failed | gen=%s | %dms | %s", generation, dt_ms, exc)
                await self._on_update_context(self._record_error, exc)
                return LoadOutcome.FAILED

            return await self._on_update_context(self._publish, tuple(coins), generation)
        finally:
            with self._in_flight_lock:
                self._in_flight -= 1

    async def refresh(self) -> LoadOutcome:
        """Explicit re-fetch (pull-to-refresh); same contract as `load()`."""
        return await self.load()

    # ----------------------------
    # update context
    # ----------------------------
    async def _on_update_context(self, fn: Callable[..., Any], *args: Any) -> Any:
        loop = self._update_loop
        running = asyncio.get_running_loop()
        # a stopped loop would never run the queued write
        if loop is not None and loop is not running and (loop.is_closed() or not loop.is_running()):
            logger.warning("update loop not running; rebinding to current loop")
            self._update_loop = loop = running
        if loop is None or loop is running:
            return fn(*args)

        done: concurrent.futures.Future = concurrent.futures.Future()

        def _apply() -> None:
            try:
                done.set_result(fn(*args))
            except BaseException as exc:
                done.set_exception(exc)

        loop.call_soon_threadsafe(_apply)
        return await asyncio.wrap_future(done)

    def _publish(self, coins: Sequence[Coin], generation: int) -> LoadOutcome:
        if self._discard_stale and generation < self._published_generation:
            logger.info(
                "stale coin list dropped | gen=%s | published=%s",
                generation,
                self._published_generation,
            )
            return LoadOutcome.DISCARDED

        self._coins = tuple(coins)
        self._published_generation = max(self._published_generation, generation)
        self._last_updated = utcnow()
        self._last_error = None
        logger.info("coin list updated | gen=%s | coins=%s", generation, len(self._coins))

        for callback in list(self._observers):
            try:
                callback(self._coins)
            except Exception:
                logger.exception("coins observer failed | %r", callback)
        return LoadOutcome.APPLIED

    def _record_error(self, exc: FetchError) -> None:
        self._last_error = exc
        for callback in list(self._error_observers):
            try:
                callback(exc)
            except Exception:
                logger.exception("error observer failed | %r", callback)


def _discard(items: list, item: Any) -> None:
    try:
        items.remove(item)
    except ValueError:
        return
