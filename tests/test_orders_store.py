import pytest

from pizzeria.core.orders.status import OrderStatus, TerminalStatusError
from pizzeria.infra.changes import INSERT, UPDATE
from pizzeria.infra.logs import get_order_events
from pizzeria.infra.orders import OrderNotFound, RatingError


def _collect(feed, tables=("orders", "order_ratings")):
    events = []
    feed.subscribe(events.append, tables=tables)
    return events


def test_create_and_read_back(store, make_order):
    order = make_order(items=[{"name": "Margherita", "size": "Grande", "quantity": 2,
                               "price": 66.0, "flavors": ["Margherita"], "crust": "Catupiry",
                               "extras": ["Bacon"], "notes": "bem assada"}], total=137.0)
    store.create(order)
    got = store.get(order.id)
    assert got.status == OrderStatus.RECEIVED
    assert got.items == order.items
    assert got.total == 137.0
    assert got.rating is None
    assert store.get("bestaat-niet") is None


def test_lists_newest_first_per_user(store, make_order):
    a = store.create(make_order("u1"))
    b = store.create(make_order("u2"))
    c = store.create(make_order("u1"))
    assert [o.id for o in store.list_for_user("u1")] == [c.id, a.id]
    assert [o.id for o in store.list_all()] == [c.id, b.id, a.id]


def test_writes_publish_after_commit(store, feed, make_order):
    events = _collect(feed)
    order = store.create(make_order())
    store.apply_action(order.id, "accept")
    assert [(e.table, e.type, e.row_id) for e in events] == [
        ("orders", INSERT, order.id),
        ("orders", UPDATE, order.id),
    ]
    assert events[0].user_id == "user-1"


def test_status_changes_are_recorded(store, engine, make_order):
    order = store.create(make_order())
    store.apply_action(order.id, "accept")
    store.apply_action(order.id, "ship")
    evs = get_order_events(engine, order_id=order.id)
    assert [e["event"] for e in evs] == ["status_changed", "status_changed", "order_created"]
    assert evs[0]["data"] == {"from": "preparing", "to": "delivering", "source": "ship"}


def test_same_status_is_noop(store, feed, make_order):
    order = store.create(make_order())
    events = _collect(feed)
    assert store.update_status(order.id, "received").status == OrderStatus.RECEIVED
    assert events == []


def test_terminal_order_cannot_move(store, make_order):
    order = store.create(make_order())
    store.apply_action(order.id, "reject")
    with pytest.raises(TerminalStatusError):
        store.update_status(order.id, "preparing")
    with pytest.raises(TerminalStatusError):
        store.apply_action(order.id, "accept")
    assert store.get(order.id).status == OrderStatus.CANCELLED


def test_stale_write_does_not_reopen_terminal_order(store, make_order):
    order = store.create(make_order())
    stale = store.get(order.id)
    store.apply_action(order.id, "reject")
    # tweede beheerder met een verouderde lijst
    with pytest.raises(TerminalStatusError):
        store._write_status(stale, OrderStatus.PREPARING, source="manual")
    assert store.get(order.id).status == OrderStatus.CANCELLED


def test_unknown_order(store):
    with pytest.raises(OrderNotFound):
        store.update_status("nope", "preparing")
    with pytest.raises(OrderNotFound):
        store.apply_action("nope", "accept")


def _deliver(store, order_id):
    for action in ("accept", "ship", "deliver"):
        store.apply_action(order_id, action)


def test_rating_after_delivery(store, feed, make_order):
    order = store.create(make_order())
    with pytest.raises(RatingError):
        store.add_rating(order.id, "user-1", 5)
    _deliver(store, order.id)
    events = _collect(feed, tables=("order_ratings",))

    rating = store.add_rating(order.id, "user-1", 4, "  boa  ")
    assert rating.comment == "boa"
    assert [(e.table, e.type) for e in events] == [("order_ratings", INSERT)]
    assert store.get(order.id).rating.rating == 4

    with pytest.raises(RatingError):
        store.add_rating(order.id, "user-1", 5)


@pytest.mark.parametrize("value", [0, 6, 3.5, True])
def test_rating_range(store, make_order, value):
    order = store.create(make_order())
    _deliver(store, order.id)
    with pytest.raises(RatingError):
        store.add_rating(order.id, "user-1", value)


def test_rating_only_by_owner(store, make_order):
    order = store.create(make_order())
    _deliver(store, order.id)
    with pytest.raises(OrderNotFound):
        store.add_rating(order.id, "someone-else", 5)
