from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel
from sqlalchemy.engine import Engine

from pizzeria.app import status_labels
from pizzeria.app.dashboard.monitoring_page import esc
from pizzeria.app.dashboard.security import require_admin
from pizzeria.app.deps import get_engine, get_store
from pizzeria.app.serializers import admin_order_out, admin_snapshot
from pizzeria.core.orders.models import Order
from pizzeria.core.orders.status import (
    InvalidActionError, TerminalStatusError, UnknownStatusError, is_terminal,
)
from pizzeria.infra import live_settings
from pizzeria.infra.orders import OrderNotFound, OrderStore
from pizzeria.workflows.order_sync import ADMIN_TABS, AdminOrdersView

router = APIRouter(dependencies=[Depends(require_admin)])

TAB_LABELS = {
    "all": "Todos",
    "pending": "Pendentes",
    "active": "Em andamento",
    "done": "Finalizados",
}


def _tab(value: Optional[str]) -> str:
    tab = value or "all"
    if tab not in ADMIN_TABS:
        raise HTTPException(status_code=400, detail=f"unknown tab: {tab}")
    return tab


# -------- gedeelde handelingen (JSON + formulieren) --------

def _set_status(store: OrderStore, order_id: str, value: Optional[str]) -> Order:
    try:
        target = status_labels.canonical(value or "")
        return store.update_status(order_id, target)
    except UnknownStatusError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="order not found")
    except TerminalStatusError as e:
        raise HTTPException(status_code=409, detail=str(e))


def _run_action(store: OrderStore, order_id: str, action: str) -> Order:
    try:
        return store.apply_action(order_id, action)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="order not found")
    except (InvalidActionError, TerminalStatusError) as e:
        raise HTTPException(status_code=409, detail=str(e))


# -------- JSON API --------

class StatusIn(BaseModel):
    status: str


@router.get("/dashboard/api/orders")
def api_orders(tab: Optional[str] = None,
               store: OrderStore = Depends(get_store),
               engine: Engine = Depends(get_engine)):
    view = AdminOrdersView(store)
    view.refresh()
    out = admin_snapshot(view, live_settings.get(engine, "delivery_time"), _tab(tab))
    out["statuses"] = status_labels.selector_options()
    return out


@router.post("/dashboard/api/orders/{order_id}/status")
def api_set_status(order_id: str, payload: StatusIn,
                   store: OrderStore = Depends(get_store),
                   engine: Engine = Depends(get_engine)):
    order = _set_status(store, order_id, payload.status)
    return admin_order_out(order, live_settings.get(engine, "delivery_time"))


@router.post("/dashboard/api/orders/{order_id}/actions/{action}")
def api_action(order_id: str, action: str,
               store: OrderStore = Depends(get_store),
               engine: Engine = Depends(get_engine)):
    order = _run_action(store, order_id, action)
    return admin_order_out(order, live_settings.get(engine, "delivery_time"))


# -------- HTML --------

def _items_text(order: Order) -> str:
    return ", ".join(f"{i['quantity']}x {i['name']} ({i['size']})" for i in order.items)


def _row(o: dict, tab: str) -> str:
    oid = esc(o["id"])
    buttons = "".join(
        f'<form method="post" action="/dashboard/orders/{oid}/actions/{esc(a["action"])}?tab={esc(tab)}">'
        f'<button type="submit">{esc(a["label"])}</button></form>'
        for a in o["actions"]
    )
    options = "".join(
        f'<option value="{esc(s["value"])}"{" selected" if s["value"] == o["status"] else ""}>{esc(s["label"])}</option>'
        for s in status_labels.selector_options()
    )
    picker = ""
    if not is_terminal(o["status"]):
        picker = (
            f'<form method="post" action="/dashboard/orders/{oid}/status?tab={esc(tab)}">'
            f'<select name="status">{options}</select><button type="submit">Salvar</button></form>'
        )
    return (
        f"<tr><td>{esc(o['created_at'][:16].replace('T', ' '))}</td>"
        f"<td>{esc(o['customer_name'])}<br><small>{esc(o['customer_phone'])}</small></td>"
        f"<td>{esc(o['delivery_address'])}</td>"
        f"<td>{esc(o['_items'])}</td>"
        f"<td>R$ {o['total']:.2f}<br><small>{esc(o['payment_method'])}</small></td>"
        f'<td><span class="badge" style="background:{esc(o["status_color"])}">{esc(o["status_label"])}</span></td>'
        f"<td>{buttons}{picker}</td></tr>"
    )


@router.get("/dashboard/orders", response_class=HTMLResponse)
def dashboard_orders(request: Request,
                     store: OrderStore = Depends(get_store),
                     engine: Engine = Depends(get_engine)):
    tab = _tab(request.query_params.get("tab"))
    view = AdminOrdersView(store)
    view.refresh()
    counts = view.counts
    dt = live_settings.get(engine, "delivery_time")

    rows = []
    for order in view.filter(tab):
        o = admin_order_out(order, dt)
        o["_items"] = _items_text(order)
        rows.append(_row(o, tab))

    tabs = "".join(
        f'<a class="tab {"active" if t == tab else ""}" href="/dashboard/orders?tab={t}">{esc(label)}</a>'
        for t, label in TAB_LABELS.items()
    )
    empty = '<tr><td colspan="7">Nenhum pedido</td></tr>'

    html_doc = f"""
    <html><head><meta charset="utf-8"><title>Pedidos</title>
    <style>
      body{{font-family:system-ui;margin:24px}}
      a.tab{{display:inline-block;margin-right:8px;padding:8px 12px;border-radius:10px;text-decoration:none;border:1px solid #ccc}}
      a.tab.active{{background:#512da8;color:#fff;border-color:#512da8}}
      table{{border-collapse:collapse;width:100%;margin-top:12px}}
      td,th{{border:1px solid #ddd;padding:8px;font-size:14px;vertical-align:top}}
      th{{background:#eee;text-align:left}}
      .badge{{color:#fff;padding:2px 8px;border-radius:8px}}
      form{{display:inline-block;margin:2px}}
    </style>
    </head>
    <body>
      <h3>Pedidos (beveiligd)</h3>
      <p>Pendentes: <b>{counts['pending']}</b> · Em andamento: <b>{counts['active']}</b> · Total: <b>{counts['total']}</b></p>
      <div>{tabs}</div>
      <table>
        <thead><tr><th>Data</th><th>Cliente</th><th>Endereço</th><th>Itens</th><th>Total</th><th>Status</th><th>Ações</th></tr></thead>
        <tbody>{''.join(rows) or empty}</tbody>
      </table>
      <p><a href="/dashboard">Terug</a></p>
    </body></html>
    """
    return HTMLResponse(html_doc)


@router.post("/dashboard/orders/{order_id}/status")
async def form_set_status(order_id: str, request: Request,
                          store: OrderStore = Depends(get_store)):
    form = await request.form()
    tab = _tab(request.query_params.get("tab"))
    await run_in_threadpool(_set_status, store, order_id, form.get("status"))
    return RedirectResponse(f"/dashboard/orders?tab={tab}", status_code=303)


@router.post("/dashboard/orders/{order_id}/actions/{action}")
def form_action(order_id: str, action: str, request: Request,
                store: OrderStore = Depends(get_store)):
    tab = _tab(request.query_params.get("tab"))
    _run_action(store, order_id, action)
    return RedirectResponse(f"/dashboard/orders?tab={tab}", status_code=303)
