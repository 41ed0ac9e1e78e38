from __future__ import annotations
import logging
from typing import Dict, Any
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from pizzeria.app.dashboard.security import require_admin
from pizzeria.app.deps import get_engine
from pizzeria.infra.live_settings import (
    DEFAULTS, accepting_orders, get_all as ls_get_all, set_many as ls_set_many, set_one as ls_set_one,
)

router = APIRouter(dependencies=[Depends(require_admin)])
log = logging.getLogger("pizzeria.settings")

@router.get("/dashboard/api/settings")
def get_settings(engine: Engine = Depends(get_engine)) -> JSONResponse:
    return JSONResponse(ls_get_all(engine))

@router.post("/dashboard/api/settings")
def post_settings(payload: Dict[str, Any] = Body(...), engine: Engine = Depends(get_engine)) -> JSONResponse:
    filtered = {k: v for k, v in payload.items() if k in DEFAULTS}  # ignore unknown
    ok, msg = ls_set_many(engine, filtered)
    if ok:
        log.info(f"live settings updated: {sorted(filtered)}")
    return JSONResponse({"ok": ok, "message": msg}, status_code=200 if ok else 400)

@router.post("/dashboard/api/store/toggle")
def toggle_store(engine: Engine = Depends(get_engine)) -> JSONResponse:
    """Kill-switch: winkel open/dicht voor nieuwe bestellingen."""
    new = not accepting_orders(engine)
    ok, msg = ls_set_one(engine, "is_open", new)
    log.info(f"store {'opened' if new else 'closed'} via dashboard")
    return JSONResponse({"ok": ok, "message": msg, "is_open": new}, status_code=200 if ok else 400)
