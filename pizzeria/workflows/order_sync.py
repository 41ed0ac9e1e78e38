"""
Leesmodellen voor klant en beheer, bijgewerkt via het wijzigingskanaal.

Een ChangeEvent is alleen een signaal: bij elk event haalt de view de
volledige lijst opnieuw op. De payload wordt nooit gebruikt.
"""
from __future__ import annotations
import logging
import threading
from typing import Callable, Dict, List, Optional

from pizzeria.core.orders.models import Order
from pizzeria.core.orders.status import OrderStatus, is_terminal
from pizzeria.infra.changes import ChangeEvent, ChangeFeed, Subscription
from pizzeria.infra.orders import OrderStore

log = logging.getLogger("pizzeria.sync")

TABLES = ("orders", "order_ratings")

ACTIVE_STATUSES = frozenset({OrderStatus.PREPARING, OrderStatus.DELIVERING})

ADMIN_TABS: Dict[str, Callable[[Order], bool]] = {
    "all": lambda o: True,
    "pending": lambda o: o.status == OrderStatus.RECEIVED,
    "active": lambda o: o.status in ACTIVE_STATUSES,
    "done": lambda o: is_terminal(o.status),
}


class CustomerOrdersView:
    """'Mijn bestellingen': lopende bestelling + geschiedenis van één gebruiker."""

    def __init__(self, store: OrderStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self.orders: List[Order] = []

    def refresh(self) -> None:
        self.orders = self.store.list_for_user(self.user_id)

    @property
    def active(self) -> Optional[Order]:
        return next((o for o in self.orders if not is_terminal(o.status)), None)

    @property
    def open(self) -> List[Order]:
        """Alle lopende bestellingen, nieuwste eerst; active is de eerste hiervan."""
        return [o for o in self.orders if not is_terminal(o.status)]

    @property
    def history(self) -> List[Order]:
        return [o for o in self.orders if is_terminal(o.status)]


class AdminOrdersView:
    """Alle bestellingen met tellers voor badges en tabbladen."""

    def __init__(self, store: OrderStore):
        self.store = store
        self.user_id = None
        self.orders: List[Order] = []

    def refresh(self) -> None:
        self.orders = self.store.list_all()

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "pending": sum(1 for o in self.orders if o.status == OrderStatus.RECEIVED),
            "active": sum(1 for o in self.orders if o.status in ACTIVE_STATUSES),
            "total": len(self.orders),
        }

    def filter(self, tab: str = "all") -> List[Order]:
        pred = ADMIN_TABS.get(tab, ADMIN_TABS["all"])
        return [o for o in self.orders if pred(o)]


class OrderSync:
    """
    Koppelt een view aan het wijzigingskanaal. Bij elk passend event:
    view.refresh() en daarna on_refresh(view). close() zegt het abonnement op.
    """

    def __init__(self, feed: ChangeFeed, view, on_refresh: Optional[Callable] = None):
        self.view = view
        self.on_refresh = on_refresh
        self._lock = threading.Lock()
        self.view.refresh()
        self.subscription: Subscription = feed.subscribe(
            self._on_change, tables=TABLES, user_id=view.user_id
        )

    def _on_change(self, event: ChangeEvent) -> None:
        with self._lock:
            self.view.refresh()
        log.debug(f"view refreshed after {event.table} {event.type}")
        if self.on_refresh is not None:
            self.on_refresh(self.view)

    @property
    def closed(self) -> bool:
        return not self.subscription.active

    def close(self) -> None:
        self.subscription.unsubscribe()

    def __enter__(self) -> "OrderSync":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
