import pytest

from pizzeria.core.cart import CartStore, InvalidCartLine, MAX_NOTES, build_line
from pizzeria.core.notifications import NotificationCenter


def test_build_line_prices_and_labels(catalog):
    line = build_line(catalog, ["1", "2"], "large", "catupiry", ["bacon", "onbekend"], 2, " sem cebola ")
    assert line.name == "Margherita / Calabresa"
    assert line.size == "Grande"
    assert line.crust == "Catupiry"
    assert line.extras == ["Bacon"]
    # Calabresa grande (55) is duurder dan Margherita (52)
    assert line.price == 55 + 8 + 6
    assert line.total == 138
    assert line.notes == "sem cebola"


@pytest.mark.parametrize("kwargs", [
    {"flavor_ids": ["999"], "size": "large"},
    {"flavor_ids": ["1"], "size": "gigante"},
    {"flavor_ids": ["1"], "size": "large", "quantity": 0},
    {"flavor_ids": ["1"], "size": "large", "notes": "x" * (MAX_NOTES + 1)},
])
def test_build_line_rejects_bad_input(catalog, kwargs):
    with pytest.raises(InvalidCartLine):
        build_line(catalog, **kwargs)


def test_add_update_remove(catalog):
    cart = CartStore()
    a = cart.add_item(build_line(catalog, ["1"], "large"))
    b = cart.add_item(build_line(catalog, ["1"], "large"))
    assert a.id != b.id
    assert cart.total_items == 2
    assert cart.total_price == 104

    cart.update_quantity(a.id, 3)
    assert cart.total_items == 4
    cart.update_quantity(a.id, 0)
    assert cart.get(a.id).quantity == 1

    cart.remove_item(b.id)
    cart.remove_item(b.id)
    cart.remove_item("bestaat-niet")
    assert [l.id for l in cart.items] == [a.id]


def test_update_unknown_line_is_noop(catalog):
    cart = CartStore()
    cart.add_item(build_line(catalog, ["1"], "small"))
    assert cart.update_quantity("nope", 5) is None
    assert cart.total_items == 1


def test_added_line_is_a_copy(catalog):
    cart = CartStore()
    line = build_line(catalog, ["1"], "large")
    stored = cart.add_item(line)
    line.quantity = 9
    line.extras.append("Bacon")
    assert stored.quantity == 1
    assert stored.extras == []


def test_snapshot_does_not_follow_cart(catalog):
    cart = CartStore()
    stored = cart.add_item(build_line(catalog, ["1"], "large", extra_ids=["bacon"]))
    snap = cart.snapshot()
    cart.update_quantity(stored.id, 4)
    cart.get(stored.id).extras.append("Rúcula")
    assert snap[0]["quantity"] == 1
    assert snap[0]["extras"] == ["Bacon"]


def test_clear_cart(catalog):
    cart = CartStore()
    cart.add_item(build_line(catalog, ["3"], "family"))
    cart.clear_cart()
    assert cart.is_empty
    assert cart.to_dict() == {"items": [], "total_items": 0, "total_price": 0}


def test_notifications_newest_first_and_read_state():
    center = NotificationCenter()
    first = center.add("Um")
    second = center.add("Dois", type="success")
    center.add("Três", type="raro")
    assert [n.title for n in center.notifications] == ["Três", "Dois", "Um"]
    assert center.notifications[0].type == "default"
    assert center.unread_count == 3

    center.mark_as_read(first.id)
    assert center.unread_count == 2
    center.mark_all_as_read()
    assert center.unread_count == 0
    assert second.read
    center.clear()
    assert center.to_dict() == {"notifications": [], "unread_count": 0}


def test_remove_lines_keeps_the_rest(catalog):
    cart = CartStore()
    a = cart.add_item(build_line(catalog, ["1"], "large"))
    ids, items, subtotal = cart.freeze()
    b = cart.add_item(build_line(catalog, ["2"], "small"))
    assert ids == [a.id]
    assert subtotal == 52
    assert [i["name"] for i in items] == ["Margherita"]
    cart.remove_lines(ids)
    assert [l.id for l in cart.items] == [b.id]
