"""Market data source contract and the fetch failure taxonomy."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from coinlist.models.coin import Coin


class FetchError(RuntimeError):
    """A fetch that did not produce a coin list."""


class InvalidURL(FetchError):
    def __init__(self, url: str, reason: str = "invalid request target"):
        super().__init__(f"Invalid markets URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class BadResponse(FetchError):
    """Non-200 status, or no status at all when the transport failed."""

    def __init__(self, status_code: Optional[int] = None, detail: Optional[str] = None):
        if status_code is None:
            message = f"No response from markets endpoint: {detail or 'transport error'}"
        else:
            message = f"Markets endpoint returned HTTP {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class DecodeError(FetchError):
    def __init__(self, detail: str):
        super().__init__(f"Could not decode markets payload: {detail}")
        self.detail = detail


@runtime_checkable
class MarketDataSource(Protocol):
    async def fetch_coins(self) -> List[Coin]:
        """Return the current market list in upstream order, or raise FetchError."""
        ...
