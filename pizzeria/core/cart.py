from __future__ import annotations
import copy
import threading
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core import pricing

MAX_NOTES = 200


class CartError(Exception):
    pass


class InvalidCartLine(CartError):
    pass


# -------------------------------------------------
#  Winkelwagenregel
# -------------------------------------------------
@dataclass
class CartLine:
    name: str
    size: str
    flavors: List[str]
    crust: str
    extras: List[str]
    price: float          # stukprijs, bevroren bij toevoegen
    quantity: int = 1
    image: str = ""
    notes: Optional[str] = None
    id: str = ""

    @property
    def total(self) -> float:
        return pricing.line_total(self.price, self.quantity)

    def to_order_item(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "quantity": self.quantity,
            "price": self.price,
            "flavors": list(self.flavors),
            "crust": self.crust,
            "extras": list(self.extras),
            "notes": self.notes,
        }


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    notes = notes.strip()
    if len(notes) > MAX_NOTES:
        raise InvalidCartLine(f"notes longer than {MAX_NOTES} characters")
    return notes or None


def build_line(
    catalog: MenuCatalog,
    flavor_ids: Sequence[str],
    size: str,
    crust_id: Optional[str] = None,
    extra_ids: Iterable[str] = (),
    quantity: int = 1,
    notes: Optional[str] = None,
) -> CartLine:
    """Maakt een volledig geprijsde regel uit de keuzes in het pizza-dialoog."""
    flavors = pricing.resolve_flavors(catalog, flavor_ids)
    if not flavors:
        raise InvalidCartLine("unknown flavor")
    if size not in flavors[0].prices:
        raise InvalidCartLine(f"unknown size: {size}")
    if quantity < 1:
        raise InvalidCartLine("quantity must be >= 1")

    q = pricing.quote(catalog, [f.id for f in flavors], size, crust_id, extra_ids, quantity)
    size_opt = catalog.size(size)
    crust = catalog.crust(crust_id)
    # onbekende extra's worden overgeslagen
    extras = [e.label for e in (catalog.extra(i) for i in pricing.unique_ids(extra_ids)) if e]
    return CartLine(
        name=" / ".join(f.name for f in flavors),
        size=size_opt.label if size_opt else size,
        flavors=[f.name for f in flavors],
        crust=crust.label if crust else "",
        extras=extras,
        price=q.unit_price,
        quantity=q.quantity,
        image=flavors[0].image_url or "",
        notes=_clean_notes(notes),
    )


# -------------------------------------------------
#  Winkelwagen (per sessie, alleen in geheugen)
# -------------------------------------------------
@dataclass
class CartStore:
    lines: List[CartLine] = field(default_factory=list)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    @property
    def items(self) -> List[CartLine]:
        return list(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(l.quantity for l in self.lines)

    @property
    def total_price(self) -> float:
        return round(sum(l.total for l in self.lines), 2)

    def get(self, line_id: str) -> Optional[CartLine]:
        return next((l for l in self.lines if l.id == line_id), None)

    def add_item(self, line: CartLine) -> CartLine:
        stored = copy.deepcopy(line)
        stored.id = uuid.uuid4().hex
        stored.quantity = max(1, int(stored.quantity))
        stored.notes = _clean_notes(stored.notes)
        with self._lock:
            self.lines.append(stored)
        return stored

    def update_quantity(self, line_id: str, quantity: int) -> Optional[CartLine]:
        with self._lock:
            line = self.get(line_id)
            if line is not None:
                line.quantity = max(1, int(quantity))
        return line

    def remove_item(self, line_id: str) -> None:
        self.remove_lines([line_id])

    def remove_lines(self, line_ids: Iterable[str]) -> None:
        drop = set(line_ids)
        with self._lock:
            self.lines = [l for l in self.lines if l.id not in drop]

    def clear_cart(self) -> None:
        with self._lock:
            self.lines = []

    def snapshot(self) -> List[Dict[str, Any]]:
        """Structurele kopie voor de bestelling, geen live verwijzingen."""
        return [l.to_order_item() for l in self.lines]

    def freeze(self) -> Tuple[List[str], List[Dict[str, Any]], float]:
        """Regel-ids, orderregels en subtotaal uit één en dezelfde stand van de winkelwagen."""
        with self._lock:
            lines = list(self.lines)
            return ([l.id for l in lines], [l.to_order_item() for l in lines],
                    round(sum(l.total for l in lines), 2))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [asdict(l) for l in self.lines],
            "total_items": self.total_items,
            "total_price": self.total_price,
        }
