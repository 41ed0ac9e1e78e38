from __future__ import annotations
import json, logging, os
from typing import Dict, Any

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.menu.loader import load_menu
from pizzeria.core.menu.models import Menu, MenuItem
from pizzeria.infra.settings import settings

log = logging.getLogger("pizzeria.menu")

def _pizza(id_, name, category, description, prices, popular=False) -> Dict[str, Any]:
    small, medium, large, family = prices
    return {
        "id": id_, "name": name, "category": category, "description": description,
        "prices": {"small": small, "medium": medium, "large": large, "family": family},
        "is_popular": popular,
    }

DEFAULT_MENU: Dict[str, Any] = {
    "meta": {"currency": "BRL"},
    "categories": ["tradicional", "especial", "premium", "doce"],
    "items": [
        _pizza("1", "Margherita", "tradicional",
               "Molho de tomate, mussarela, manjericão fresco e azeite", (32, 42, 52, 65), True),
        _pizza("2", "Calabresa", "tradicional",
               "Molho de tomate, mussarela, calabresa fatiada e cebola", (35, 45, 55, 68), True),
        _pizza("3", "Quatro Queijos", "tradicional",
               "Mussarela, provolone, parmesão e gorgonzola", (38, 48, 58, 72)),
        _pizza("4", "Portuguesa", "tradicional",
               "Presunto, ovos, cebola, azeitona, ervilha e mussarela", (36, 46, 56, 70), True),
        _pizza("5", "Frango com Catupiry", "especial",
               "Frango desfiado, catupiry cremoso e mussarela", (40, 50, 60, 75), True),
        _pizza("6", "Pepperoni", "especial",
               "Molho de tomate, mussarela e pepperoni importado", (42, 52, 62, 78)),
        _pizza("7", "Napolitana", "premium",
               "Tomate fatiado, mussarela de búfala, manjericão e azeite", (48, 58, 68, 85)),
        _pizza("8", "Filé Mignon", "premium",
               "Filé mignon em cubos, mussarela, champignon e molho madeira", (55, 65, 75, 95)),
        _pizza("9", "Chocolate", "doce",
               "Chocolate ao leite derretido com granulado", (35, 45, 55, 68)),
        _pizza("10", "Romeu e Julieta", "doce",
               "Goiabada cremosa e queijo minas derretido", (38, 48, 58, 72)),
    ],
    "sizes": [
        {"id": "small", "label": "Pequena", "slices": "4 fatias", "serves": "1-2 pessoas"},
        {"id": "medium", "label": "Média", "slices": "6 fatias", "serves": "2-3 pessoas"},
        {"id": "large", "label": "Grande", "slices": "8 fatias", "serves": "3-4 pessoas"},
        {"id": "family", "label": "Família", "slices": "12 fatias", "serves": "5-6 pessoas"},
    ],
    "crusts": [
        {"id": "tradicional", "label": "Tradicional", "price": 0},
        {"id": "catupiry", "label": "Catupiry", "price": 8},
        {"id": "cheddar", "label": "Cheddar", "price": 8},
        {"id": "chocolate", "label": "Chocolate", "price": 10},
    ],
    "extras": [
        {"id": "bacon", "label": "Bacon", "price": 6},
        {"id": "cebola", "label": "Cebola Caramelizada", "price": 4},
        {"id": "rucula", "label": "Rúcula", "price": 5},
        {"id": "tomate-seco", "label": "Tomate Seco", "price": 7},
        {"id": "azeitona", "label": "Azeitonas Extra", "price": 4},
    ],
}

def _ensure_file(path: str) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(DEFAULT_MENU, f, ensure_ascii=False, indent=2)

def load_json_catalog(path: str | None = None) -> MenuCatalog:
    path = path or settings.MENU_JSON
    _ensure_file(path)
    return MenuCatalog(load_menu(path))

def _row_to_item(r) -> MenuItem:
    return MenuItem(
        id=str(r["id"]),
        name=r["name"],
        category=r["category"],
        prices={
            "small": float(r["price_small"]),
            "medium": float(r["price_medium"]),
            "large": float(r["price_large"]),
            "family": float(r["price_family"]),
        },
        description=r["description"] or "",
        image_url=r["image_url"],
        is_popular=bool(r["is_popular"]),
        is_available=bool(r["is_available"]),
        sort_order=int(r["sort_order"]),
    )

def load_catalog(engine: Engine, json_path: str | None = None,
                 fallback: MenuCatalog | None = None) -> MenuCatalog:
    """
    Menukaart uit de database; maten, randen en extra's komen uit de JSON-kaart.
    Lege tabel of DB-fout -> volledige JSON-kaart.
    Wordt per verzoek aangeroepen zodat wijzigingen in menu_items direct zichtbaar zijn.
    """
    if fallback is None:
        fallback = load_json_catalog(json_path)
    try:
        with engine.connect() as conn:
            rows = conn.execute(text(
                "SELECT * FROM menu_items WHERE is_available = :avail ORDER BY sort_order"
            ), {"avail": True}).mappings().all()
    except SQLAlchemyError as e:
        log.warning(f"menu_items niet leesbaar, fallback naar JSON: {e}")
        return fallback
    if not rows:
        return fallback
    menu = fallback.menu
    items = [_row_to_item(r) for r in rows]
    cats = sorted({it.category for it in items} | set(menu.categories))
    return MenuCatalog(Menu(meta=menu.meta, categories=cats, items=items,
                            sizes=menu.sizes, crusts=menu.crusts, extras=menu.extras))
