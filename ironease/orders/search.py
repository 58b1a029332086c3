"""Search and date filters over an order list (and shop lookup by name)."""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Union

from ironease.core.exceptions import ValidationError
from ironease.orders.tabs import orders_in_bucket
from ironease.orders.types import Bucket, Order, Shop

DateLike = Union[date, str, None]


def _coerce_date(on: DateLike) -> Optional[date]:
    if on is None or isinstance(on, date):
        return on
    text = on.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValidationError(
            f"Invalid date {on!r}, expected YYYY-MM-DD",
            details={"field": "date"},
            cause=exc,
        ) from exc


def filter_orders(orders: Sequence[Order], query: Optional[str]) -> List[Order]:
    """Case-insensitive substring match on order id or counterpart name.

    A blank query returns every order, in the same order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(orders)
    return [
        order for order in orders
        if needle in order.id.lower() or needle in (order.counterpart_name or "").lower()
    ]


def filter_by_date(orders: Sequence[Order], on: DateLike) -> List[Order]:
    """Orders whose pickup date equals ``on``; ``None`` or "" keeps all."""
    day = _coerce_date(on)
    if day is None:
        return list(orders)
    return [order for order in orders if order.pickup_date == day]


def narrow(
    orders: Sequence[Order],
    bucket: Optional[Bucket] = None,
    query: Optional[str] = None,
    on: DateLike = None,
) -> List[Order]:
    """Bucket first, then search text, then pickup date."""
    selected = orders_in_bucket(orders, bucket) if bucket is not None else list(orders)
    return filter_by_date(filter_orders(selected, query), on)


def filter_shops(shops: Sequence[Shop], query: Optional[str]) -> List[Shop]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(shops)
    return [shop for shop in shops if needle in shop.name.lower()]
