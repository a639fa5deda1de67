# coinlist/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, Response

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request, response: Response):
    """
    Ready once the controller has been initialized and holds a list.
    A failed refresh with an older list still in place is reported but
    does not make the service unready.
    """
    payload: Dict[str, Any] = {"status": "ok", **_now_meta()}

    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        payload.update(status="degraded", degraded_reasons=["controller_missing"])
        response.status_code = 503
        return payload

    coins_check = controller.status()
    payload["checks"] = {"coins": coins_check}

    degraded_reasons = []
    if not coins_check["initialized"]:
        degraded_reasons.append("not_initialized")
    elif coins_check["count"] == 0:
        degraded_reasons.append("coins_empty")

    if degraded_reasons:
        payload["status"] = "degraded"
        payload["degraded_reasons"] = degraded_reasons
        response.status_code = 503
    else:
        payload["degraded_reasons"] = []
    return payload


@router.get("/health")
async def health(request: Request, response: Response):
    return await ready(request, response)
