"""Tab aggregator: status -> bucket mapping, bucket counts and bucket contents.

One mapping is shared by the customer and the shop portal:

    NEW        pending
    PROCESSING accepted, pickedUp, inProgress
    READY      completed
    HISTORY    delivered, cancelled

Counts are always taken over the whole order set, never over a searched
subset, and bucket contents keep the order in which the backend returned them.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Union

from ironease.orders.status_machine import parse_status
from ironease.orders.types import Bucket, Order, OrderStatus

_BUCKETS: Dict[OrderStatus, Bucket] = {
    OrderStatus.PENDING: Bucket.NEW,
    OrderStatus.ACCEPTED: Bucket.PROCESSING,
    OrderStatus.PICKED_UP: Bucket.PROCESSING,
    OrderStatus.IN_PROGRESS: Bucket.PROCESSING,
    OrderStatus.COMPLETED: Bucket.READY,
    OrderStatus.DELIVERED: Bucket.HISTORY,
    OrderStatus.CANCELLED: Bucket.HISTORY,
}

_LABELS: Dict[Bucket, str] = {
    Bucket.NEW: "New",
    Bucket.PROCESSING: "Processing",
    Bucket.READY: "Ready",
    Bucket.HISTORY: "History",
}


def bucket_of(status: Union[str, OrderStatus]) -> Bucket:
    return _BUCKETS[parse_status(status)]


def bucket_label(bucket: Bucket) -> str:
    return _LABELS[bucket]


def is_active(status: Union[str, OrderStatus]) -> bool:
    """Everything outside HISTORY; splits the customer active and history listings."""
    return bucket_of(status) is not Bucket.HISTORY


def counts_by_bucket(orders: Iterable[Order]) -> Dict[Bucket, int]:
    """Population of every bucket, zero included."""
    counts = {bucket: 0 for bucket in Bucket}
    for order in orders:
        counts[bucket_of(order.status)] += 1
    return counts


def orders_in_bucket(orders: Sequence[Order], bucket: Bucket) -> List[Order]:
    return [order for order in orders if bucket_of(order.status) is bucket]
