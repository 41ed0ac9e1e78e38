"""
Wijzigingskanaal voor rijen in de database.

Na elke geslaagde schrijfactie publiceert de store een ChangeEvent. Abonnees
krijgen alleen het signaal; de inhoud van de rij moeten ze zelf opnieuw
ophalen.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

log = logging.getLogger("pizzeria.changes")

INSERT = "INSERT"
UPDATE = "UPDATE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    type: str  # INSERT | UPDATE
    row_id: str
    user_id: Optional[str] = None


Callback = Callable[[ChangeEvent], None]


class Subscription:
    def __init__(self, feed: "ChangeFeed", callback: Callback,
                 tables: frozenset, user_id: Optional[str]):
        self._feed = feed
        self.callback = callback
        self.tables = tables
        self.user_id = user_id
        self.active = True

    def matches(self, event: ChangeEvent) -> bool:
        if event.table not in self.tables:
            return False
        return self.user_id is None or event.user_id == self.user_id

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._subs: List[Subscription] = []

    def subscribe(self, callback: Callback, tables: Iterable[str] = ("orders",),
                  user_id: Optional[str] = None) -> Subscription:
        sub = Subscription(self, callback, frozenset(tables), user_id)
        with self._lock:
            self._subs.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [s for s in self._subs if s.matches(event)]
        for sub in targets:
            try:
                sub.callback(event)
            except Exception:
                # fouten van abonnees bereiken de schrijver niet
                log.exception(f"subscriber failed on {event.table} {event.type} {event.row_id}")
