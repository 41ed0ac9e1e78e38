import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

# ---------- DB logging handler ----------

class DBHandler(logging.Handler):
    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine

    def emit(self, record: logging.LogRecord) -> None:
        msg = self.format(record)
        lvl = record.levelname
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    text("INSERT INTO logs (ts, level, msg) VALUES (:ts, :lvl, :msg)"),
                    {"ts": utcnow(), "lvl": lvl, "msg": msg},
                )
        except Exception:
            self.handleError(record)


def setup_logging(engine: Engine) -> None:
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(logging.StreamHandler())
    # één DBHandler per proces, altijd op de actuele engine
    for h in [h for h in root.handlers if isinstance(h, DBHandler)]:
        root.removeHandler(h)
    dbh = DBHandler(engine)
    dbh.setFormatter(logging.Formatter("%(name)s %(message)s"))
    root.addHandler(dbh)


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()

# ---------- Queries voor dashboard ----------

def get_events(
    engine: Engine,
    limit: int = 300,
    level: Optional[str] = None,
    q: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    sql = "SELECT ts, level, msg FROM logs"
    conds: List[str] = []
    params: Dict[str, Any] = {}
    if level in ("INFO", "WARNING", "ERROR"):
        conds.append("level = :lvl")
        params["lvl"] = level
    if q:
        conds.append("LOWER(msg) LIKE :q")
        params["q"] = f"%{q.lower()}%"
    if start:
        conds.append("ts >= :start")
        params["start"] = start
    if end:
        conds.append("ts <= :end")
        params["end"] = end
    if conds:
        sql += " WHERE " + " AND ".join(conds)
    sql += " ORDER BY id DESC"
    sql += f" LIMIT {int(limit)} OFFSET {int(max(0, offset))}"
    with engine.connect() as conn:
        rows = conn.execute(text(sql), params).mappings().all()
    return [dict(r) for r in rows]


def get_order_events(
    engine: Engine,
    limit: int = 100,
    order_id: Optional[str] = None,
    event: Optional[str] = None,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    sql = "SELECT order_id, ts, event, level, data_json FROM order_events"
    conds: List[str] = []
    params: Dict[str, Any] = {}
    if order_id:
        conds.append("order_id = :oid")
        params["oid"] = order_id
    if event:
        conds.append("event = :evt")
        params["evt"] = event
    if conds:
        sql += " WHERE " + " AND ".join(conds)
    sql += " ORDER BY id DESC"
    sql += f" LIMIT {int(limit)} OFFSET {int(max(0, offset))}"
    with engine.connect() as conn:
        rows = conn.execute(text(sql), params).mappings().all()
    out = []
    for r in rows:
        d = dict(r)
        d["data"] = json.loads(d.pop("data_json")) if d.get("data_json") else None
        out.append(d)
    return out

# ---------- Order-logging helpers ----------

def _jsonable(data: Any) -> Optional[str]:
    if data is None:
        return None
    try:
        return json.dumps(data)
    except (TypeError, ValueError):
        return json.dumps({"_repr": str(data)})


def mask_phone(nr: Optional[str]) -> Optional[str]:
    if not nr:
        return None
    s = nr.strip()
    return s[:-6] + "******" + s[-2:] if len(s) > 8 else "****"


def log_order_event(
    conn: Connection,
    order_id: str,
    event: str,
    level: str = "INFO",
    data: Any = None,
) -> None:
    """Schrijft binnen de transactie van de aanroeper."""
    conn.execute(
        text("""
        INSERT INTO order_events (order_id, ts, event, level, data_json)
        VALUES (:oid, :ts, :evt, :lvl, :data)
        """),
        {
            "oid": order_id,
            "ts": utcnow(),
            "evt": event,
            "lvl": level,
            "data": _jsonable(data),
        },
    )
