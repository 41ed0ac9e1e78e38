"""Weergave van statussen (pt-BR) en synoniemen uit oudere schermen."""
from __future__ import annotations
from typing import Dict, List

from pizzeria.core.orders.status import OrderStatus, parse_status

LABELS: Dict[OrderStatus, str] = {
    OrderStatus.RECEIVED: "Recebido",
    OrderStatus.PREPARING: "Preparando",
    OrderStatus.DELIVERING: "Saiu para entrega",
    OrderStatus.DELIVERED: "Entregue",
    OrderStatus.CANCELLED: "Cancelado",
}

COLORS: Dict[OrderStatus, str] = {
    OrderStatus.RECEIVED: "#eab308",
    OrderStatus.PREPARING: "#f97316",
    OrderStatus.DELIVERING: "#a855f7",
    OrderStatus.DELIVERED: "#22c55e",
    OrderStatus.CANCELLED: "#ef4444",
}

ALIASES: Dict[str, OrderStatus] = {
    "pending": OrderStatus.RECEIVED,
    "confirmed": OrderStatus.PREPARING,
    "delivery": OrderStatus.DELIVERING,
}

ACTION_LABELS: Dict[str, str] = {
    "accept": "Aceitar",
    "reject": "Recusar",
    "ship": "Saiu para entrega",
    "deliver": "Entregue",
}


def canonical(value: str) -> OrderStatus:
    """Vertaalt ook 'pending', 'confirmed' en 'delivery' naar de vaste status."""
    key = (value or "").strip().lower()
    if key in ALIASES:
        return ALIASES[key]
    return parse_status(key)


def label(status) -> str:
    return LABELS[parse_status(status)]


def selector_options() -> List[Dict[str, str]]:
    return [{"value": s.value, "label": LABELS[s], "color": COLORS[s]} for s in OrderStatus]
