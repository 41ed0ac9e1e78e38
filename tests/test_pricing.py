import pytest

from pizzeria.core import pricing
from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.menu.loader import menu_from_dict


def _menu(*items):
    return MenuCatalog(menu_from_dict({
        "categories": ["tradicional", "doce"],
        "items": list(items),
        "sizes": [{"id": "large", "label": "Grande"}],
        "crusts": [{"id": "catupiry", "label": "Catupiry", "price": 8}],
        "extras": [{"id": "bacon", "label": "Bacon", "price": 6}],
    }))


def _item(id_, category, large):
    return {"id": id_, "name": f"Pizza {id_}", "category": category,
            "prices": {"small": 10, "medium": 20, "large": large, "family": 70}}


def test_single_flavor_with_crust_and_extra(catalog):
    q = pricing.quote(catalog, ["1"], "large", "catupiry", ["bacon"], 2)
    assert q.base_price == 52
    assert q.crust_delta == 8
    assert q.extras_delta == 6
    assert q.unit_price == 66
    assert q.line_total == 132


def test_two_flavors_use_most_expensive():
    cat = _menu(_item("a", "tradicional", 40), _item("b", "tradicional", 55))
    assert pricing.quote(cat, ["a", "b"], "large").base_price == 55
    assert pricing.quote(cat, ["b", "a"], "large").base_price == 55


def test_sweet_and_savoury_do_not_mix(catalog):
    # Margherita (hartig) + Chocolate (zoet): tweede smaak valt weg
    flavors = pricing.resolve_flavors(catalog, ["1", "9"])
    assert [f.id for f in flavors] == ["1"]
    assert pricing.quote(catalog, ["1", "9"], "large").base_price == 52


def test_unknown_options_cost_nothing(catalog):
    q = pricing.quote(catalog, ["1"], "large", "verdwenen-rand", ["bacon", "oud-extra"])
    assert q.crust_delta == 0
    assert q.extras_delta == 6
    assert q.unit_price == 58


def test_unknown_flavor_gives_zero_base(catalog):
    q = pricing.quote(catalog, ["999"], "large")
    assert q.base_price == 0
    assert q.unit_price == 0


def test_duplicate_extras_count_once(catalog):
    q = pricing.quote(catalog, ["1"], "medium", None, ["bacon", "bacon"])
    assert q.extras_delta == 6


def test_quote_is_deterministic(catalog):
    args = (catalog, ["5", "2"], "family", "cheddar", ["rucula", "azeitona"], 3)
    assert pricing.quote(*args) == pricing.quote(*args)


@pytest.mark.parametrize("qty, expected", [(1, 66.0), (3, 198.0), (0, 66.0), (-2, 66.0)])
def test_line_total_floors_quantity(qty, expected):
    assert pricing.line_total(66.0, qty) == expected


def test_money_is_rounded_to_cents():
    assert pricing.line_total(5.99, 2) == 11.98
