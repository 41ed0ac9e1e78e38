from __future__ import annotations
from typing import Dict, Any, List, Set

from .models import SIZE_IDS

def _is_price(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and v >= 0

def validate(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    cats: Set[str] = set(data.get("categories", []))
    seen_ids: Set[str] = set()

    if not cats:
        errors.append("categories list is empty")

    for idx, it in enumerate(data.get("items", []), start=1):
        item_id = it.get("id")
        name = it.get("name")
        cat = it.get("category")
        if not item_id or not isinstance(item_id, str):
            errors.append(f"item[{idx}] missing id")
        elif item_id in seen_ids:
            errors.append(f"duplicate id: {item_id}")
        else:
            seen_ids.add(item_id)

        if not name:
            errors.append(f"{item_id}: missing name")
        if cat not in cats:
            errors.append(f"{item_id}: unknown category '{cat}'")

        prices = it.get("prices") or {}
        for size in SIZE_IDS:
            if not _is_price(prices.get(size)):
                errors.append(f"{item_id}: prices.{size} must be a number >= 0")

    for group in ("crusts", "extras"):
        seen: Set[str] = set()
        for opt in data.get(group, []):
            oid = opt.get("id")
            if not oid:
                errors.append(f"{group}: option without id")
                continue
            if oid in seen:
                errors.append(f"{group}: duplicate id {oid}")
            seen.add(oid)
            if not _is_price(opt.get("price", 0)):
                errors.append(f"{group}.{oid}: price must be a number >= 0")

    for s in data.get("sizes", []):
        if s.get("id") not in SIZE_IDS:
            errors.append(f"sizes: unknown size '{s.get('id')}'")

    return errors
