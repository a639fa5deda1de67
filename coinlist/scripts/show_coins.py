# coinlist/scripts/show_coins.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from coinlist.config.settings import Settings, get_settings
from coinlist.models.coin import Coin
from coinlist.services.coin_list import CoinListController
from coinlist.services.sources import DATA_SOURCES, build_http_client, build_market_data_source


@dataclass
class DashboardResult:
    source: str
    ok: bool
    coins: List[Coin] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "ok": self.ok,
            "count": len(self.coins),
            "coins": [coin.model_dump() for coin in self.coins],
            "error": self.error,
        }


async def load_dashboard(settings: Settings, limit: Optional[int] = None) -> DashboardResult:
    async with build_http_client(settings) as http:
        source = build_market_data_source(settings, http)
        controller = CoinListController(source, discard_stale=settings.DISCARD_STALE)
        ok = bool(await controller.initialize())

    coins = list(controller.coins)
    if limit is not None:
        coins = coins[: max(0, limit)]

    err = controller.last_error
    return DashboardResult(
        source=settings.DATA_SOURCE,
        ok=ok,
        coins=coins,
        error=None if err is None else str(err),
    )


def render_table(coins: List[Coin]) -> str:
    if not coins:
        return "(no coins)"

    name_w = max(len(c.name) for c in coins)
    sym_w = max(len(c.display_symbol) for c in coins)
    lines = []
    for rank, coin in enumerate(coins, start=1):
        lines.append(
            f"{rank:>3}  {coin.name:<{name_w}}  {coin.display_symbol:<{sym_w}}  {coin.display_price:>16}"
        )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Print the current coin market list")
    parser.add_argument("--source", choices=DATA_SOURCES, default=None)
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--json", action="store_true", dest="as_json")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    if args.source is not None:
        settings = replace(settings, DATA_SOURCE=args.source)

    result = asyncio.run(load_dashboard(settings, limit=args.limit))

    if args.as_json or not result.ok:
        print(json.dumps(result.to_dict()))
    else:
        print(render_table(result.coins))

    raise SystemExit(0 if result.ok else 1)


if __name__ == "__main__":
    main()
