"""
Order lifecycle core shared by the customer and shop portals.

Pure parts (status machine, tabs, search, stats) import nothing from the
transport; the dispatcher talks to the backend only through OrderService.
"""
from ironease.orders.search import filter_by_date, filter_orders, filter_shops, narrow
from ironease.orders.status_machine import (
    apply_transition,
    can_transition,
    describe,
    is_terminal,
    legal_next_statuses,
    parse_status,
    permitted_transitions,
    status_info,
)
from ironease.orders.tabs import bucket_of, counts_by_bucket, is_active, orders_in_bucket
from ironease.orders.types import (
    Address,
    Bucket,
    Order,
    OrderItem,
    OrderStatus,
    Role,
    Service,
    Shop,
    Timeframe,
)

__all__ = [
    "Address",
    "Bucket",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Role",
    "Service",
    "Shop",
    "Timeframe",
    "apply_transition",
    "can_transition",
    "describe",
    "is_terminal",
    "legal_next_statuses",
    "parse_status",
    "permitted_transitions",
    "status_info",
    "bucket_of",
    "counts_by_bucket",
    "is_active",
    "orders_in_bucket",
    "filter_orders",
    "filter_by_date",
    "filter_shops",
    "narrow",
]
