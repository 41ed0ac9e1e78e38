import pytest

from pizzeria.app import status_labels
from pizzeria.core.orders import status as machine
from pizzeria.core.orders.status import (
    InvalidActionError, OrderStatus, TerminalStatusError, UnknownStatusError,
)


@pytest.mark.parametrize("action, source, target", [
    ("accept", "received", OrderStatus.PREPARING),
    ("reject", "received", OrderStatus.CANCELLED),
    ("reject", "preparing", OrderStatus.CANCELLED),
    ("ship", "preparing", OrderStatus.DELIVERING),
    ("deliver", "delivering", OrderStatus.DELIVERED),
])
def test_quick_actions(action, source, target):
    assert machine.apply_action(source, action) == target


@pytest.mark.parametrize("action, source", [
    ("ship", "received"),
    ("accept", "preparing"),
    ("reject", "delivering"),
    ("teleport", "received"),
])
def test_quick_action_from_wrong_status(action, source):
    with pytest.raises(InvalidActionError):
        machine.apply_action(source, action)


@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
def test_terminal_status_is_final(terminal):
    for target in OrderStatus:
        if target.value == terminal:
            assert machine.transition(terminal, target) == target
            continue
        with pytest.raises(TerminalStatusError):
            machine.transition(terminal, target)
    with pytest.raises(TerminalStatusError):
        machine.apply_action(terminal, "accept")
    assert machine.available_actions(terminal) == []


def test_manual_jump_between_open_statuses():
    assert machine.transition("received", "delivering") == OrderStatus.DELIVERING
    assert machine.transition("delivering", "preparing") == OrderStatus.PREPARING


def test_unknown_status():
    with pytest.raises(UnknownStatusError):
        machine.parse_status("lost")


def test_tracker_and_estimate():
    steps = machine.tracker_steps("preparing")
    assert [s["completed"] for s in steps] == [True, True, False, False]
    assert [s["current"] for s in steps] == [False, True, False, False]
    assert all(not s["completed"] for s in machine.tracker_steps("cancelled"))
    assert machine.estimated_time("received", "30-45 min") == "30-45 min"
    assert machine.estimated_time("delivering", "30-45 min") == machine.DELIVERING_ESTIMATE
    assert machine.estimated_time("delivered", "30-45 min") is None


def test_available_actions():
    assert machine.available_actions("received") == ["accept", "reject"]
    assert machine.available_actions("preparing") == ["reject", "ship"]
    assert machine.available_actions("delivering") == ["deliver"]


@pytest.mark.parametrize("raw, expected", [
    ("pending", OrderStatus.RECEIVED),
    ("confirmed", OrderStatus.PREPARING),
    ("delivery", OrderStatus.DELIVERING),
    ("Delivered", OrderStatus.DELIVERED),
])
def test_legacy_aliases(raw, expected):
    assert status_labels.canonical(raw) == expected


def test_labels_cover_every_status():
    values = [o["value"] for o in status_labels.selector_options()]
    assert values == [s.value for s in OrderStatus]
    assert status_labels.label("delivering") == "Saiu para entrega"
