from __future__ import annotations
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from pizzeria.app.dashboard.security import is_admin_header
from pizzeria.app.deps import USER_HEADERS
from pizzeria.app.serializers import admin_snapshot, customer_snapshot
from pizzeria.infra import live_settings
from pizzeria.workflows.order_sync import AdminOrdersView, CustomerOrdersView, OrderSync

router = APIRouter()
log = logging.getLogger("pizzeria.ws")


def _message(view, engine) -> dict:
    dt = live_settings.get(engine, "delivery_time")
    if isinstance(view, AdminOrdersView):
        return {"type": "orders", "scope": "admin", **admin_snapshot(view, dt)}
    return {"type": "orders", "scope": "customer", **customer_snapshot(view, dt)}


@router.websocket("/ws/orders")
async def ws_orders(ws: WebSocket):
    """
    Live bestellingen. Klant: eigen bestellingen (X-User-Id header).
    Beheer: ?scope=admin met Basic-auth header. Na elk event gaat de
    volledige, opnieuw opgehaalde lijst naar de client.
    """
    state = ws.app.state
    if ws.query_params.get("scope") == "admin":
        if not is_admin_header(ws.headers.get("authorization")):
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        view = AdminOrdersView(state.store)
    else:
        uid = ws.headers.get(USER_HEADERS["id"], "").strip()
        if not uid:
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        view = CustomerOrdersView(state.store, uid)

    await ws.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # draait in de thread van de schrijver; daarom via call_soon_threadsafe
    def on_refresh(v):
        loop.call_soon_threadsafe(queue.put_nowait, _message(v, state.engine))

    sync = await run_in_threadpool(OrderSync, state.feed, view, on_refresh)
    log.info(f"WS orders open scope={'admin' if view.user_id is None else 'customer'}")

    async def pump_in():
        # de client stuurt niets zinnigs; we luisteren alleen naar disconnect
        try:
            while True:
                await ws.receive_text()
        except WebSocketDisconnect:
            return

    async def pump_out():
        while True:
            msg = await queue.get()
            await ws.send_json(msg)

    try:
        await ws.send_json(await run_in_threadpool(_message, view, state.engine))
        tasks = [asyncio.create_task(pump_in()), asyncio.create_task(pump_out())]
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for t in pending:
            t.cancel()
        for t in done:
            exc = t.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                log.error(f"WS orders error: {exc}")
    except WebSocketDisconnect:
        log.info("WS orders client left before first message")
    finally:
        sync.close()
        log.info("WS orders closed")
