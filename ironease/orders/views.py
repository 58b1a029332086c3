"""Per-role view adapters over the shared order core.

The customer and shop portals render the same board (tabs with counts, the
narrowed order list, status badges and action buttons); they differ only in
who the counterpart is and which transitions the actor may request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ironease.orders.search import DateLike
from ironease.orders.status_machine import ACTION_LABELS, permitted_transitions, status_info
from ironease.orders.store import OrderStore
from ironease.orders.tabs import bucket_label, bucket_of
from ironease.orders.types import Bucket, Order, OrderStatus, Role

_LIFECYCLE = list(OrderStatus)

# (order id, action) -> whether that request is still in flight
PendingCheck = Callable[[str, str], bool]


@dataclass(frozen=True)
class RoleView:
    role: Role
    title: str
    counterpart_label: str
    default_tab: Bucket = Bucket.NEW

    def actions_for(self, order: Order, pending: Optional[PendingCheck] = None) -> List[Dict[str, Any]]:
        allowed = sorted(permitted_transitions(self.role, order.status), key=_LIFECYCLE.index)
        return [
            {
                "status": s.value,
                "label": ACTION_LABELS[s],
                "pending": bool(pending and pending(order.id, s.value)),
            }
            for s in allowed
        ]

    def order_card(self, order: Order, pending: Optional[PendingCheck] = None) -> Dict[str, Any]:
        info = status_info(order.status)
        card = order.to_dict()
        card.update(
            {
                "counterpart_label": self.counterpart_label,
                "bucket": bucket_of(order.status).value,
                "status_label": info.label,
                "status_description": info.description,
                "status_color": info.color,
                "actions": self.actions_for(order, pending),
            }
        )
        return card

    def board(
        self,
        store: OrderStore,
        tab: Optional[Bucket] = None,
        query: Optional[str] = None,
        on: DateLike = None,
        *,
        pending: Optional[PendingCheck] = None,
    ) -> Dict[str, Any]:
        """Tabs with counts over every order, plus the narrowed list for ``tab``.

        ``pending`` marks actions whose request is still in flight so the
        control can be disabled.
        """
        tab = tab or self.default_tab
        counts = store.counts
        return {
            "role": self.role.value,
            "title": self.title,
            "active_tab": tab.value,
            "loading": store.loading,
            "tabs": [
                {"bucket": b.value, "label": bucket_label(b), "count": counts[b]}
                for b in Bucket
            ],
            "orders": [self.order_card(o, pending) for o in store.view(tab, query, on)],
        }


CUSTOMER_VIEW = RoleView(Role.CUSTOMER, title="My orders", counterpart_label="Shop")
SHOP_VIEW = RoleView(Role.SHOP_OWNER, title="Shop orders", counterpart_label="Customer")

_VIEWS = {view.role: view for view in (CUSTOMER_VIEW, SHOP_VIEW)}


def view_for(role: Role) -> RoleView:
    return _VIEWS[role]
