from __future__ import annotations
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from pizzeria.core.cart import CartStore
from pizzeria.core.notifications import NotificationCenter


@dataclass
class ClientSession:
    """Winkelwagen en meldingen van één browsersessie; niets wordt opgeslagen."""
    id: str
    cart: CartStore = field(default_factory=CartStore)
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)


class SessionRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, ClientSession] = {}

    def get_or_create(self, session_id: Optional[str]) -> ClientSession:
        with self._lock:
            if session_id and session_id in self._sessions:
                return self._sessions[session_id]
            sess = ClientSession(id=uuid.uuid4().hex)
            self._sessions[sess.id] = sess
            return sess

    def drop(self, session_id: Optional[str]) -> None:
        with self._lock:
            self._sessions.pop(session_id or "", None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
