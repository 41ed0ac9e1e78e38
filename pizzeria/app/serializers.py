from __future__ import annotations
from dataclasses import asdict
from typing import Dict

from pizzeria.app import status_labels
from pizzeria.core.menu.catalog import is_sweet
from pizzeria.core.menu.models import MenuItem
from pizzeria.core.orders import status as machine
from pizzeria.core.orders.models import Order
from pizzeria.workflows.order_sync import AdminOrdersView, CustomerOrdersView


def item_out(it: MenuItem) -> dict:
    d = asdict(it)
    d["sweet"] = is_sweet(it)
    return d


def order_out(order: Order, delivery_time: str) -> dict:
    d = order.to_dict()
    d["status_label"] = status_labels.label(order.status)
    d["tracker"] = machine.tracker_steps(order.status)
    d["estimated_time"] = machine.estimated_time(order.status, delivery_time)
    d["can_rate"] = machine.can_rate(order.status) and order.rating is None
    return d


def admin_order_out(order: Order, delivery_time: str) -> dict:
    # snelknoppen die vanuit de huidige status mogen
    d = order_out(order, delivery_time)
    d["status_color"] = status_labels.COLORS[order.status]
    d["actions"] = [
        {"action": a, "label": status_labels.ACTION_LABELS[a]}
        for a in machine.available_actions(order.status)
    ]
    return d


def customer_snapshot(view: CustomerOrdersView, delivery_time: str) -> Dict[str, object]:
    return {
        "active": order_out(view.active, delivery_time) if view.active else None,
        "open": [order_out(o, delivery_time) for o in view.open],
        "history": [order_out(o, delivery_time) for o in view.history],
    }


def admin_snapshot(view: AdminOrdersView, delivery_time: str, tab: str = "all") -> Dict[str, object]:
    return {
        "tab": tab,
        "counts": view.counts,
        "orders": [admin_order_out(o, delivery_time) for o in view.filter(tab)],
    }
