from __future__ import annotations
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from pizzeria.core.orders.models import Address

_COLS = "id, user_id, label, cep, street, city, number, complement, phone, is_default"


def _row_to_address(r) -> Address:
    return Address(
        id=r["id"],
        user_id=r["user_id"],
        label=r["label"],
        street=r["street"],
        number=r["number"],
        city=r["city"],
        complement=r["complement"],
        phone=r["phone"] or "",
        cep=r["cep"],
        is_default=bool(r["is_default"]),
    )


def resolve_address(engine: Engine, user_id: str, address_id: Optional[str] = None) -> Optional[Address]:
    """Gekozen adres van deze gebruiker, anders het standaardadres (of het eerste)."""
    with engine.connect() as conn:
        if address_id:
            row = conn.execute(
                text(f"SELECT {_COLS} FROM addresses WHERE id = :id AND user_id = :uid"),
                {"id": address_id, "uid": user_id},
            ).mappings().first()
            if row:
                return _row_to_address(row)
        row = conn.execute(
            text(f"""
            SELECT {_COLS} FROM addresses
             WHERE user_id = :uid
             ORDER BY is_default DESC, label
             LIMIT 1
            """),
            {"uid": user_id},
        ).mappings().first()
    return _row_to_address(row) if row else None
