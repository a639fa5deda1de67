from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request

from coinlist.models.coin import Coin
from coinlist.services.coin_list import CoinListController, LoadOutcome

router = APIRouter(prefix="/coins", tags=["coins"])


def get_controller(request: Request) -> CoinListController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Coin list not configured")
    return controller


def _row(coin: Coin) -> Dict[str, Any]:
    return {
        "id": coin.id,
        "symbol": coin.symbol,
        "display_symbol": coin.display_symbol,
        "name": coin.name,
        "image": coin.image,
        "current_price": coin.current_price,
        "display_price": coin.display_price,
    }


@router.get("")
async def list_coins(request: Request) -> List[Dict[str, Any]]:
    """Current list in upstream (market cap) order."""
    controller = get_controller(request)
    return [_row(coin) for coin in controller.coins]


@router.post("/refresh")
async def refresh_coins(request: Request) -> Dict[str, Any]:
    """
    Pull-to-refresh. Waits for the fetch; a failed fetch still answers 200
    with the previous list left in place and the error reported. A result
    dropped for a newer one reports no error.
    """
    controller = get_controller(request)
    if controller.initialized:
        outcome = await controller.refresh()
    else:
        outcome = await controller.initialize()
    err = controller.last_error if outcome is LoadOutcome.FAILED else None
    return {
        "refreshed": bool(outcome),
        "outcome": outcome.value,
        "count": len(controller.coins),
        "error": None if err is None else str(err),
    }


@router.get("/{coin_id}")
async def get_coin(coin_id: str, request: Request) -> Dict[str, Any]:
    controller = get_controller(request)
    coin = controller.get(coin_id)
    if coin is None:
        raise HTTPException(status_code=404, detail=f"Unknown coin: {coin_id}")
    return _row(coin)
