"""
Levenscyclus van een bestelling.

    received -> preparing -> delivering -> delivered
    received | preparing -> cancelled

De snelknoppen in het dashboard volgen het normale pad. Via de statuskeuze
mag een beheerder vanuit elke niet-eindstatus naar elke andere status
springen; alleen een eindstatus (delivered, cancelled) verlaten kan niet.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional, Tuple


class OrderStatus(str, Enum):
    RECEIVED = "received"
    PREPARING = "preparing"
    DELIVERING = "delivering"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


INITIAL = OrderStatus.RECEIVED
TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# volgorde voor de voortgangsbalk (cancelled staat erbuiten)
TRACK = (
    OrderStatus.RECEIVED,
    OrderStatus.PREPARING,
    OrderStatus.DELIVERING,
    OrderStatus.DELIVERED,
)

# actie -> (toegestane bronstatussen, doelstatus)
ACTIONS: Dict[str, Tuple[frozenset, OrderStatus]] = {
    "accept": (frozenset({OrderStatus.RECEIVED}), OrderStatus.PREPARING),
    "reject": (frozenset({OrderStatus.RECEIVED, OrderStatus.PREPARING}), OrderStatus.CANCELLED),
    "ship": (frozenset({OrderStatus.PREPARING}), OrderStatus.DELIVERING),
    "deliver": (frozenset({OrderStatus.DELIVERING}), OrderStatus.DELIVERED),
}

DELIVERING_ESTIMATE = "10-15 min"


class StatusError(Exception):
    pass


class UnknownStatusError(StatusError):
    pass


class TerminalStatusError(StatusError):
    def __init__(self, status: OrderStatus):
        super().__init__(f"order is {status.value}; no further transitions")
        self.status = status


class InvalidActionError(StatusError):
    def __init__(self, action: str, status: OrderStatus):
        super().__init__(f"action '{action}' not possible from '{status.value}'")
        self.action = action
        self.status = status


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        raise UnknownStatusError(f"unknown status: {value}") from None


def is_terminal(status) -> bool:
    return parse_status(status) in TERMINAL


def transition(current, target) -> OrderStatus:
    """Handmatige statuskeuze. Geeft de nieuwe status terug."""
    cur = parse_status(current)
    new = parse_status(target)
    if cur in TERMINAL and new != cur:
        raise TerminalStatusError(cur)
    return new


def apply_action(current, action: str) -> OrderStatus:
    cur = parse_status(current)
    if cur in TERMINAL:
        raise TerminalStatusError(cur)
    if action not in ACTIONS:
        raise InvalidActionError(action, cur)
    sources, target = ACTIONS[action]
    if cur not in sources:
        raise InvalidActionError(action, cur)
    return target


def available_actions(status) -> List[str]:
    cur = parse_status(status)
    return [a for a, (sources, _) in ACTIONS.items() if cur in sources]


def step_index(status) -> int:
    """Positie in TRACK; -1 voor cancelled."""
    cur = parse_status(status)
    return TRACK.index(cur) if cur in TRACK else -1


def tracker_steps(status) -> List[Dict[str, object]]:
    idx = step_index(status)
    return [
        {"status": s.value, "completed": i <= idx, "current": i == idx}
        for i, s in enumerate(TRACK)
    ]


def estimated_time(status, delivery_time: str) -> Optional[str]:
    cur = parse_status(status)
    if cur in (OrderStatus.RECEIVED, OrderStatus.PREPARING):
        return delivery_time
    if cur == OrderStatus.DELIVERING:
        return DELIVERING_ESTIMATE
    return None


def can_rate(status) -> bool:
    return parse_status(status) == OrderStatus.DELIVERED
