"""
Prijsberekening voor een winkelwagenregel.

    unit_price = basisprijs(maat) + rand + som(extra's)
    line_total = unit_price * aantal

Bij twee smaken geldt de prijs van de duurste smaak. Onbekende rand- of
extra-ids (verouderde menukaart) tellen als 0; deze module gooit nooit.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.menu.models import MenuItem


@dataclass(frozen=True)
class PriceQuote:
    base_price: float
    crust_delta: float
    extras_delta: float
    unit_price: float
    quantity: int
    line_total: float


def _money(v: float) -> float:
    return round(max(0.0, float(v)), 2)


def unique_ids(ids: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for i in ids:
        if i not in seen:
            seen.append(i)
    return seen


def base_price(flavors: Sequence[MenuItem], size: str) -> float:
    if not flavors:
        return 0.0
    return _money(max(f.price_for(size) for f in flavors[:2]))


def resolve_flavors(catalog: MenuCatalog, flavor_ids: Sequence[str]) -> List[MenuItem]:
    """
    Eerste smaak + (optioneel) tweede smaak. Een tweede smaak uit de verkeerde
    categorie (zoet/hartig) of een onbekende id valt weg.
    """
    if not flavor_ids:
        return []
    first = catalog.get(flavor_ids[0])
    if first is None:
        return []
    flavors = [first]
    if len(flavor_ids) > 1:
        allowed = {it.id for it in catalog.eligible_second_flavors(first)}
        if flavor_ids[1] in allowed:
            flavors.append(catalog.by_id[flavor_ids[1]])
    return flavors


def line_total(unit_price: float, quantity: int) -> float:
    return _money(unit_price * max(1, int(quantity)))


def quote(
    catalog: MenuCatalog,
    flavor_ids: Sequence[str],
    size: str,
    crust_id: Optional[str] = None,
    extra_ids: Iterable[str] = (),
    quantity: int = 1,
) -> PriceQuote:
    flavors = resolve_flavors(catalog, flavor_ids)
    base = base_price(flavors, size)
    crust = _money(catalog.crust_delta(crust_id))
    extras = _money(sum(catalog.extra_delta(e) for e in unique_ids(extra_ids)))
    unit = _money(base + crust + extras)
    qty = max(1, int(quantity))
    return PriceQuote(
        base_price=base,
        crust_delta=crust,
        extras_delta=extras,
        unit_price=unit,
        quantity=qty,
        line_total=line_total(unit, qty),
    )
