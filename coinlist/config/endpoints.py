"""Fixed upstream endpoint for the coin market list."""

from __future__ import annotations

from typing import Dict

COINS_MARKETS_URL = "https://api.coingecko.com/api/v3/coins/markets"

# Order of the returned list follows `order`; callers must not re-sort it.
COINS_MARKETS_PARAMS: Dict[str, str] = {
    "vs_currency": "usd",
    "order": "market_cap_desc",
    "per_page": "100",
    "page": "1",
    "sparkline": "true",
    "price_change_percentage": "24h,1h",
}

REQUEST_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}
