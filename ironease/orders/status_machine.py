"""Order status machine: legal transitions, actor permissions and status semantics.

Every status-related decision in the portal goes through this module; views
and the dispatcher never compare status strings themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Union

from ironease.core.exceptions import InvalidTransitionError, UnknownStatusError
from ironease.orders.types import Order, OrderStatus, Role

logger = logging.getLogger(__name__)

S = OrderStatus

_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    S.PENDING: frozenset({S.ACCEPTED, S.CANCELLED}),
    S.ACCEPTED: frozenset({S.PICKED_UP, S.CANCELLED}),
    S.PICKED_UP: frozenset({S.IN_PROGRESS, S.CANCELLED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED, S.CANCELLED}),
    S.COMPLETED: frozenset({S.DELIVERED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
}

# Customers may only withdraw an order the shop has not accepted yet.
_CUSTOMER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    S.PENDING: frozenset({S.CANCELLED}),
}


@dataclass(frozen=True)
class StatusInfo:
    tag: str
    label: str
    description: str
    color: str


_INFO: Dict[OrderStatus, StatusInfo] = {
    S.PENDING: StatusInfo("pending", "Pending", "Waiting for the shop to accept", "yellow"),
    S.ACCEPTED: StatusInfo("accepted", "Accepted", "Order accepted, arranging pickup", "indigo"),
    S.PICKED_UP: StatusInfo("pickedUp", "Picked up", "Clothes picked up from your address", "blue"),
    S.IN_PROGRESS: StatusInfo("inProgress", "In progress", "Your clothes are being ironed", "purple"),
    S.COMPLETED: StatusInfo("completed", "Ready", "Ironing done, ready for delivery", "green"),
    S.DELIVERED: StatusInfo("delivered", "Delivered", "Order delivered", "teal"),
    S.CANCELLED: StatusInfo("cancelled", "Cancelled", "Order cancelled", "red"),
}

# Button captions for the action that moves an order into a status.
ACTION_LABELS: Dict[OrderStatus, str] = {
    S.ACCEPTED: "Accept",
    S.PICKED_UP: "Mark picked up",
    S.IN_PROGRESS: "Start ironing",
    S.COMPLETED: "Mark ready",
    S.DELIVERED: "Mark delivered",
    S.CANCELLED: "Cancel",
}


def _normalize(raw: str) -> str:
    return raw.strip().replace("_", "").replace("-", "").replace(" ", "").lower()


_BY_NORMALIZED: Dict[str, OrderStatus] = {_normalize(s.value): s for s in OrderStatus}


def parse_status(raw: Union[str, OrderStatus]) -> OrderStatus:
    """Map a backend status tag to OrderStatus; unknown tags raise UnknownStatusError.

    Matching ignores case and ``_``/``-`` separators ("in_progress", "INPROGRESS").
    """
    if isinstance(raw, OrderStatus):
        return raw
    if not isinstance(raw, str):
        raise UnknownStatusError(f"Order status must be a string, got {raw!r}", details={"status": raw})
    status = _BY_NORMALIZED.get(_normalize(raw))
    if status is None:
        raise UnknownStatusError(f"Unknown order status {raw!r}", details={"status": raw})
    return status


def legal_next_statuses(status: Union[str, OrderStatus]) -> FrozenSet[OrderStatus]:
    return _TRANSITIONS[parse_status(status)]


def is_terminal(status: Union[str, OrderStatus]) -> bool:
    return not legal_next_statuses(status)


def status_info(status: Union[str, OrderStatus]) -> StatusInfo:
    return _INFO[parse_status(status)]


def describe(status: Union[str, OrderStatus]) -> str:
    """Human status sentence, e.g. "Order accepted, arranging pickup"."""
    return status_info(status).description


def permitted_transitions(role: Role, status: Union[str, OrderStatus]) -> FrozenSet[OrderStatus]:
    """Next statuses this actor may request from ``status``."""
    current = parse_status(status)
    if role is Role.SHOP_OWNER:
        return _TRANSITIONS[current]
    return _CUSTOMER_TRANSITIONS.get(current, frozenset())


def can_transition(role: Role, current: Union[str, OrderStatus], requested: Union[str, OrderStatus]) -> bool:
    return parse_status(requested) in permitted_transitions(role, current)


def apply_transition(order: Order, requested: Union[str, OrderStatus]) -> Order:
    """Return ``order`` moved to ``requested`` or raise InvalidTransitionError.

    This is a local legality check only; the backend stays the authority and
    the returned value is never written back without a refetch.
    """
    target = parse_status(requested)
    allowed = _TRANSITIONS[order.status]
    if target not in allowed:
        logger.debug(
            "StatusMachine: rejected %s -> %s for order %s",
            order.status.value, target.value, order.id,
        )
        raise InvalidTransitionError(
            f"Order {order.id} cannot move from {_INFO[order.status].label} "
            f"to {_INFO[target].label}",
            details={
                "order_id": order.id,
                "from": order.status.value,
                "to": target.value,
                "allowed": sorted(s.value for s in allowed),
            },
        )
    return order.with_status(target)
