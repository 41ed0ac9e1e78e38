from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine

from pizzeria.app import status_labels
from pizzeria.app.dashboard.security import require_admin
from pizzeria.app.deps import get_engine
from pizzeria.core.orders.status import OrderStatus

router = APIRouter()


def order_stats(engine: Engine) -> dict:
    # created_at is ISO-tekst (UTC); prefix-vergelijking werkt op SQLite en PG
    today = datetime.now(timezone.utc).date().isoformat()
    with engine.connect() as conn:
        total = conn.execute(text("SELECT COUNT(*) FROM orders")).scalar() or 0
        today_count = conn.execute(
            text("SELECT COUNT(*) FROM orders WHERE created_at LIKE :d"), {"d": f"{today}%"}
        ).scalar() or 0
        revenue = conn.execute(
            text("SELECT COALESCE(SUM(total), 0) FROM orders WHERE status = :st"),
            {"st": OrderStatus.DELIVERED.value},
        ).scalar() or 0
        by_status = dict(conn.execute(
            text("SELECT status, COUNT(*) FROM orders GROUP BY status")
        ).all())
        avg_rating = conn.execute(text("SELECT AVG(rating) FROM order_ratings")).scalar()
    return {
        "total_orders": int(total),
        "orders_today": int(today_count),
        "revenue_delivered": round(float(revenue), 2),
        "by_status": {s.value: int(by_status.get(s.value, 0)) for s in OrderStatus},
        "avg_rating": round(float(avg_rating), 2) if avg_rating is not None else None,
    }


@router.get("/dashboard/reports", response_class=HTMLResponse, dependencies=[Depends(require_admin)])
def dashboard_reports(engine: Engine = Depends(get_engine)):
    stats = order_stats(engine)
    rating = f"{stats['avg_rating']:.1f}" if stats["avg_rating"] is not None else "-"
    per_status = "".join(
        f'<div class="card"><div>{status_labels.LABELS[OrderStatus(s)]}</div><div class="big">{n}</div></div>'
        for s, n in stats["by_status"].items()
    )

    return HTMLResponse(f"""
    <html><head><meta charset="utf-8"><title>Rapportage</title>
    <style>
      body{{font-family:system-ui;margin:24px}}
      .cards{{display:flex;gap:12px;flex-wrap:wrap;margin-bottom:12px}}
      .card{{padding:16px 20px;border:1px solid #ddd;border-radius:12px;min-width:160px}}
      .big{{font-size:28px;font-weight:700}}
    </style></head>
    <body>
      <h3>Rapportage</h3>
      <div class="cards">
        <div class="card"><div>Totaal bestellingen</div><div class="big">{stats['total_orders']}</div></div>
        <div class="card"><div>Bestellingen vandaag</div><div class="big">{stats['orders_today']}</div></div>
        <div class="card"><div>Omzet (geleverd)</div><div class="big">R$ {stats['revenue_delivered']:.2f}</div></div>
        <div class="card"><div>Gem. beoordeling</div><div class="big">{rating}</div></div>
      </div>
      <div class="cards">{per_status}</div>
      <p><a href="/dashboard">Terug</a></p>
    </body></html>
    """)


@router.get("/dashboard/api/reports", dependencies=[Depends(require_admin)])
def api_reports(engine: Engine = Depends(get_engine)):
    return order_stats(engine)
