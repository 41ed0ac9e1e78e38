import json

import pytest
from sqlalchemy import text

from pizzeria.core.menu.loader import menu_from_dict
from pizzeria.infra import live_settings
from pizzeria.infra.menu import DEFAULT_MENU, load_catalog


def test_defaults_without_rows(engine):
    assert live_settings.get_all(engine) == live_settings.DEFAULTS
    assert live_settings.get(engine, "delivery_fee") == 5.99
    assert live_settings.accepting_orders(engine)


def test_set_many_is_validated_and_atomic(engine):
    ok, msg = live_settings.set_many(engine, {"delivery_fee": 8.5, "is_open": "nee"})
    assert not ok
    assert "is_open" in msg
    assert live_settings.get(engine, "delivery_fee") == 5.99

    assert live_settings.set_many(engine, {"delivery_fee": 8.5, "is_open": False}) == (True, "saved")
    assert live_settings.set_one(engine, "delivery_fee", 9) == (True, "saved")
    s = live_settings.get_all(engine)
    assert s["delivery_fee"] == 9
    assert s["is_open"] is False
    assert not live_settings.accepting_orders(engine)


def test_unknown_key_rejected(engine):
    ok, msg = live_settings.set_many(engine, {"tip": 3})
    assert not ok
    with pytest.raises(KeyError):
        live_settings.get(engine, "tip")


@pytest.mark.parametrize("window, now, expected", [
    ({"start": "18:00", "end": "23:30"}, "19:15", True),
    ({"start": "18:00", "end": "23:30"}, "12:00", False),
    ({"start": "18:00", "end": "01:00"}, "00:30", True),
    ({"start": "18:00", "end": "01:00"}, "02:00", False),
])
def test_opening_hours(engine, window, now, expected):
    live_settings.set_one(engine, "opening_hours", window)
    assert live_settings.is_within_opening_hours(engine, now) is expected


def test_menu_validation_errors():
    bad = json.loads(json.dumps(DEFAULT_MENU))
    bad["items"][0]["prices"]["family"] = -1
    bad["items"][1]["id"] = bad["items"][0]["id"]
    with pytest.raises(ValueError) as e:
        menu_from_dict(bad)
    assert "prices.family" in str(e.value)
    assert "duplicate id" in str(e.value)


def test_catalog_falls_back_to_json(engine, tmp_path):
    path = tmp_path / "kaart" / "menu.json"
    catalog = load_catalog(engine, str(path))
    assert path.exists()
    assert len(catalog.available()) == len(DEFAULT_MENU["items"])
    assert catalog.crust_delta("catupiry") == 8


def test_catalog_prefers_database_rows(engine, tmp_path):
    with engine.begin() as conn:
        conn.execute(text("""
            INSERT INTO menu_items (id, name, description, image_url, category,
                price_small, price_medium, price_large, price_family,
                is_popular, is_available, sort_order)
            VALUES (:id, :name, '', NULL, :cat, 20, 30, 40, 50, :pop, :avail, :so)
        """), [
            {"id": "m1", "name": "Da Casa", "cat": "especial", "pop": True, "avail": True, "so": 2},
            {"id": "m2", "name": "Banana", "cat": "doce", "pop": False, "avail": True, "so": 1},
            {"id": "m3", "name": "Sumiu", "cat": "especial", "pop": False, "avail": False, "so": 0},
        ])
    catalog = load_catalog(engine, str(tmp_path / "menu.json"))
    assert [it.id for it in catalog.available()] == ["m2", "m1"]
    assert catalog.get("m1").price_for("large") == 40
    assert catalog.eligible_second_flavors(catalog.get("m1")) == []
    # maten en randen blijven uit de JSON-kaart komen
    assert catalog.size("family").label == "Família"


def test_by_category_and_pairings(catalog):
    assert [it.name for it in catalog.by_category("doce")] == ["Chocolate", "Romeu e Julieta"]
    assert len(catalog.by_category("all")) == 10
    pairs = catalog.eligible_second_flavors(catalog.get("9"))
    assert [it.id for it in pairs] == ["10"]
