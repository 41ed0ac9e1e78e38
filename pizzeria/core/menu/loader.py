from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict
from .models import Menu, MenuItem, SizeOption, CrustOption, ExtraOption
from .validator import validate

def _to_item(d: Dict[str, Any], position: int) -> MenuItem:
    return MenuItem(
        id=d["id"],
        name=d["name"],
        category=d["category"],
        prices={k: float(v) for k, v in d["prices"].items()},
        description=d.get("description", ""),
        image_url=d.get("image_url") or None,
        is_popular=d.get("is_popular", False),
        is_available=d.get("is_available", True),
        sort_order=d.get("sort_order", position),
    )

def menu_from_dict(data: Dict[str, Any]) -> Menu:
    errors = validate(data)
    if errors:
        raise ValueError("Menu validation failed:\n" + "\n".join(errors))
    items = [_to_item(x, i) for i, x in enumerate(data.get("items", []))]
    return Menu(meta=data.get("meta", {}),
                categories=data.get("categories", []),
                items=items,
                sizes=[SizeOption(**s) for s in data.get("sizes", [])],
                crusts=[CrustOption(**c) for c in data.get("crusts", [])],
                extras=[ExtraOption(**e) for e in data.get("extras", [])])

def load_menu(path: str | Path) -> Menu:
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    return menu_from_dict(data)
