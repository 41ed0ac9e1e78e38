from __future__ import annotations
from typing import Any, Dict, Tuple, Optional
import json
import re

from sqlalchemy import text
from sqlalchemy.engine import Engine

from pizzeria.infra.logs import utcnow

# ---- Defaults: één bron van waarheid ----
DEFAULTS: Dict[str, Any] = {
    "name": "Bella Napoli",
    "address": "Rua das Pizzas, 123 - Centro",
    "phone": "(11) 99999-9999",
    "opening_hours": {"start": "18:00", "end": "23:30"},
    "delivery_time": "30-45 min",
    "minimum_order": 30.0,
    "delivery_fee": 5.99,
    "is_open": True,           # winkel neemt bestellingen aan
}

_MONEY_KEYS = {"delivery_fee", "minimum_order"}
_BOOL_KEYS = {"is_open"}
_TEXT_KEYS = {"name", "address", "phone", "delivery_time"}
_TIME_RANGE_KEYS = {"opening_hours"}
_TIME_RE = re.compile(r"^\d{2}:\d{2}$")  # HH:MM

# ---- Validatie ----
def _validate_payload(updates: Dict[str, Any]) -> Optional[str]:
    for k, v in updates.items():
        if k in _MONEY_KEYS:
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not (0 <= v <= 1000):
                return f"{k} must be number 0..1000"
        elif k in _BOOL_KEYS:
            if not isinstance(v, bool):
                return f"{k} must be boolean"
        elif k in _TEXT_KEYS:
            if not isinstance(v, str) or not v.strip():
                return f"{k} must be non-empty text"
        elif k in _TIME_RANGE_KEYS:
            if not isinstance(v, dict) or "start" not in v or "end" not in v:
                return f"{k} must be object with start,end"
            if not (_TIME_RE.match(v["start"]) and _TIME_RE.match(v["end"])):
                return f"{k} time format must be HH:MM"
        else:
            return f"unknown key: {k}"
    return None

def _merge_defaults(db_values: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(DEFAULTS)
    merged.update(db_values)
    return merged

# ---- CRUD ----
def get_all(engine: Engine) -> Dict[str, Any]:
    with engine.begin() as conn:
        rows = conn.execute(text("SELECT key, value FROM live_settings")).all()
    db_vals = {k: json.loads(v) for k, v in rows if k in DEFAULTS}
    return _merge_defaults(db_vals)

def get(engine: Engine, key: str) -> Any:
    if key not in DEFAULTS:
        raise KeyError(f"unknown key: {key}")
    with engine.begin() as conn:
        row = conn.execute(
            text("SELECT value FROM live_settings WHERE key=:k"), {"k": key}
        ).first()
    if row:
        return json.loads(row[0])
    return DEFAULTS[key]

def set_many(engine: Engine, updates: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Slaat meerdere settings atomair op. Retourneert (ok, message).
    """
    err = _validate_payload(updates)
    if err:
        return False, err

    now = utcnow()
    with engine.begin() as conn:
        for k, v in updates.items():
            # portable upsert: eerst update, anders insert
            res = conn.execute(
                text("UPDATE live_settings SET value=:v, updated_at=:ts WHERE key=:k"),
                {"k": k, "v": json.dumps(v), "ts": now},
            )
            if res.rowcount == 0:
                conn.execute(
                    text("INSERT INTO live_settings(key, value, updated_at) VALUES (:k, :v, :ts)"),
                    {"k": k, "v": json.dumps(v), "ts": now},
                )
    return True, "saved"

def set_one(engine: Engine, key: str, value: Any) -> Tuple[bool, str]:
    return set_many(engine, {key: value})

# ---- Runtime helpers ----
def is_within_opening_hours(engine: Engine, now_hhmm: str) -> bool:
    """
    Controleert of HH:MM binnen de openingstijden valt.
    Een venster over middernacht (bv. 18:00-01:00) wordt ondersteund.
    """
    tr = get(engine, "opening_hours")
    s, e = tr["start"], tr["end"]
    if s <= e:
        return s <= now_hhmm <= e
    return now_hhmm >= s or now_hhmm <= e

def accepting_orders(engine: Engine) -> bool:
    """Kill-switch vanuit het dashboard."""
    return bool(get(engine, "is_open"))
