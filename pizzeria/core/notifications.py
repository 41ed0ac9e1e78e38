from __future__ import annotations
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List

TYPES = ("default", "success", "error", "warning")


@dataclass
class Notification:
    title: str
    description: str = ""
    type: str = "default"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    read: bool = False


@dataclass
class NotificationCenter:
    """Lokale meldingen van één sessie, nieuwste eerst."""
    notifications: List[Notification] = field(default_factory=list)

    def add(self, title: str, description: str = "", type: str = "default") -> Notification:
        n = Notification(title=title, description=description,
                         type=type if type in TYPES else "default")
        self.notifications.insert(0, n)
        return n

    def mark_as_read(self, notification_id: str) -> None:
        for n in self.notifications:
            if n.id == notification_id:
                n.read = True

    def mark_all_as_read(self) -> None:
        for n in self.notifications:
            n.read = True

    def clear(self) -> None:
        self.notifications = []

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.read)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notifications": [asdict(n) for n in self.notifications],
            "unread_count": self.unread_count,
        }
