# coinlist/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from coinlist.config.endpoints import COINS_MARKETS_PARAMS, COINS_MARKETS_URL


def parse_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return default
    items = [x.strip() for x in value.split(",")]
    return [x for x in items if x]


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: Optional[float]) -> Optional[float]:
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    MARKETS_URL: str
    VS_CURRENCY: str
    ORDER: str
    PER_PAGE: int
    PAGE: int
    SPARKLINE: bool
    PRICE_CHANGE_PERCENTAGE: List[str]
    HTTP_TIMEOUT_SECONDS: Optional[float]
    DATA_SOURCE: str
    FIXTURE_DELAY_SECONDS: float
    DISCARD_STALE: bool
    LOAD_ON_STARTUP: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            MARKETS_URL=os.getenv("COINLIST_MARKETS_URL", COINS_MARKETS_URL),
            VS_CURRENCY=os.getenv("COINLIST_VS_CURRENCY", COINS_MARKETS_PARAMS["vs_currency"]),
            ORDER=os.getenv("COINLIST_ORDER", COINS_MARKETS_PARAMS["order"]),
            PER_PAGE=parse_int(os.getenv("COINLIST_PER_PAGE"), 100),
            PAGE=parse_int(os.getenv("COINLIST_PAGE"), 1),
            SPARKLINE=parse_bool(os.getenv("COINLIST_SPARKLINE"), True),
            PRICE_CHANGE_PERCENTAGE=parse_csv(os.getenv("COINLIST_PRICE_CHANGE_PERCENTAGE"), ["24h", "1h"]),
            HTTP_TIMEOUT_SECONDS=parse_float(os.getenv("COINLIST_HTTP_TIMEOUT_SECONDS"), None),
            DATA_SOURCE=os.getenv("COINLIST_DATA_SOURCE", "coingecko").strip().lower(),
            FIXTURE_DELAY_SECONDS=parse_float(os.getenv("COINLIST_FIXTURE_DELAY_SECONDS"), 0.0) or 0.0,
            DISCARD_STALE=parse_bool(os.getenv("COINLIST_DISCARD_STALE"), True),
            LOAD_ON_STARTUP=parse_bool(os.getenv("COINLIST_LOAD_ON_STARTUP"), True),
        )

    def markets_params(self) -> dict[str, str]:
        """Query string for the markets endpoint, in the same shape as COINS_MARKETS_PARAMS."""
        return {
            "vs_currency": self.VS_CURRENCY,
            "order": self.ORDER,
            "per_page": str(self.PER_PAGE),
            "page": str(self.PAGE),
            "sparkline": str(self.SPARKLINE).lower(),
            "price_change_percentage": ",".join(self.PRICE_CHANGE_PERCENTAGE),
        }


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
