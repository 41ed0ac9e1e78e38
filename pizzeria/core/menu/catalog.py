from __future__ import annotations
from typing import Dict, List, Optional
from .models import Menu, MenuItem, SizeOption, CrustOption, ExtraOption

# categorie-ids voor zoete pizza's (beide spellingen komen voor)
SWEET_CATEGORIES = frozenset({"doce", "doces"})

def is_sweet(item: MenuItem) -> bool:
    return item.category.strip().lower() in SWEET_CATEGORIES

class MenuCatalog:
    def __init__(self, menu: Menu):
        self.menu = menu
        self.by_id: Dict[str, MenuItem] = {it.id: it for it in menu.items}
        self.sizes: Dict[str, SizeOption] = {s.id: s for s in menu.sizes}
        self.crusts: Dict[str, CrustOption] = {c.id: c for c in menu.crusts}
        self.extras: Dict[str, ExtraOption] = {e.id: e for e in menu.extras}

    def get(self, item_id: str) -> Optional[MenuItem]:
        return self.by_id.get(item_id)

    def available(self) -> List[MenuItem]:
        return sorted((it for it in self.menu.items if it.is_available),
                      key=lambda it: it.sort_order)

    def by_category(self, category: str) -> List[MenuItem]:
        if category == "all":
            return self.available()
        return [it for it in self.available() if it.category == category]

    def size(self, size_id: str) -> Optional[SizeOption]:
        return self.sizes.get(size_id)

    def crust(self, crust_id: Optional[str]) -> Optional[CrustOption]:
        return self.crusts.get(crust_id) if crust_id else None

    def extra(self, extra_id: str) -> Optional[ExtraOption]:
        return self.extras.get(extra_id)

    # Onbekende ids (verouderde verwijzing) kosten niets
    def crust_delta(self, crust_id: Optional[str]) -> float:
        c = self.crust(crust_id)
        return float(c.price) if c else 0.0

    def extra_delta(self, extra_id: str) -> float:
        e = self.extra(extra_id)
        return float(e.price) if e else 0.0

    def eligible_second_flavors(self, first: MenuItem) -> List[MenuItem]:
        """Zoet alleen met zoet, hartig alleen met hartig."""
        sweet = is_sweet(first)
        return [it for it in self.available()
                if it.id != first.id and is_sweet(it) == sweet]
