from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.engine import Engine
import html
import json

from pizzeria.app.deps import get_engine
from pizzeria.app.dashboard.security import require_admin
from pizzeria.infra.logs import get_events, get_order_events

router = APIRouter()

PAGE_SIZE = 100


def esc(v):
    return html.escape("" if v is None else str(v), quote=True)


@router.get("/dashboard/monitoring", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
def dashboard_monitoring(request: Request, engine: Engine = Depends(get_engine)):
    qp = request.query_params
    tab = qp.get("tab", "logs")
    q = qp.get("q")
    level = qp.get("level")
    start = qp.get("start")
    end = qp.get("end")
    order_id = qp.get("order_id")
    try:
        page = max(0, int(qp.get("page", "0")))
    except ValueError:
        page = 0

    if tab == "orders":
        rows = get_order_events(engine, limit=PAGE_SIZE, order_id=order_id,
                                event=q, offset=page * PAGE_SIZE)
    else:
        rows = get_events(engine, limit=PAGE_SIZE, level=level, q=q, start=start, end=end,
                          offset=page * PAGE_SIZE)

    def table_logs(items):
        head = "<tr><th>Tijd</th><th>Niveau</th><th>Bericht</th></tr>"
        body = "".join(
            f"<tr><td>{esc(i['ts'])}</td><td>{esc(i['level'])}</td><td>{esc(i['msg'])}</td></tr>"
            for i in items
        )
        return f"<table><thead>{head}</thead><tbody>{body}</tbody></table>"

    def table_orders(items):
        head = "<tr><th>Tijd</th><th>Pedido</th><th>Event</th><th>Data</th></tr>"
        body = "".join(
            f"<tr><td>{esc(i['ts'])}</td>"
            f"<td><a href=\"/dashboard/monitoring?tab=orders&order_id={esc(i['order_id'])}\">{esc(i['order_id'])}</a></td>"
            f"<td>{esc(i['event'])}</td><td><code>{esc(json.dumps(i['data'], ensure_ascii=False) if i['data'] else '')}</code></td></tr>"
            for i in items
        )
        return f"<table><thead>{head}</thead><tbody>{body}</tbody></table>"

    more = ""
    if len(rows) == PAGE_SIZE:
        more = f'<a href="/dashboard/monitoring?tab={esc(tab)}&page={page + 1}">Volgende</a>'

    html_doc = f"""
    <html><head><meta charset="utf-8"><title>Monitoring</title>
    <style>
      body{{font-family:system-ui;margin:24px}}
      a.tab{{display:inline-block;margin-right:8px;padding:8px 12px;border-radius:10px;text-decoration:none;border:1px solid #ccc}}
      a.tab.active{{background:#512da8;color:#fff;border-color:#512da8}}
      table{{border-collapse:collapse;width:100%;margin-top:12px}}
      td,th{{border:1px solid #ddd;padding:8px;font-size:14px}}
      th{{background:#eee;text-align:left}}
    </style>
    </head>
    <body>
      <h3>Monitoring (beveiligd)</h3>
      <div>
        <a class="tab {'active' if tab=='logs' else ''}" href="/dashboard/monitoring?tab=logs">Logs</a>
        <a class="tab {'active' if tab=='orders' else ''}" href="/dashboard/monitoring?tab=orders">Pedidos</a>
      </div>
      <p><form method="get">
        <input type="hidden" name="tab" value="{esc(tab)}">
        <label>Zoek:</label>
        <input name="q" value="{esc(q or '')}">
        <label>Level:</label>
        <input name="level" value="{esc(level or '')}">
        <label>Start:</label>
        <input type="datetime-local" name="start" value="{esc(start or '')}">
        <label>Einde:</label>
        <input type="datetime-local" name="end" value="{esc(end or '')}">
        <button type="submit">Filter</button>
      </form></p>
      {(table_orders(rows) if tab=='orders' else table_logs(rows))}
      <p>{more}</p>
      <p><a href="/dashboard">Terug</a></p>
    </body></html>
    """
    return HTMLResponse(html_doc)
