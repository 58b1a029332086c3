"""Shop dashboard statistics derived from the order list.

The window is anchored on ``today`` and covers ``timeframe.days`` calendar
days ending today. An order is dated by its creation time, falling back to
its pickup date when the backend did not send one.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Union

from ironease.orders.tabs import bucket_of
from ironease.orders.types import Bucket, Order, OrderStatus, Timeframe


@dataclass
class Overview:
    total_orders: int = 0
    new_orders: int = 0
    processing_orders: int = 0
    ready_orders: int = 0
    completed_orders: int = 0
    total_revenue: float = 0.0


@dataclass
class DashboardStats:
    timeframe: Timeframe
    overview: Overview = field(default_factory=Overview)
    revenue_by_day: List[Dict[str, Any]] = field(default_factory=list)
    orders_by_status: List[Dict[str, Any]] = field(default_factory=list)
    top_services: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeframe": self.timeframe.value,
            "overview": vars(self.overview).copy(),
            "revenue_by_day": self.revenue_by_day,
            "orders_by_status": self.orders_by_status,
            "top_services": self.top_services,
        }


def _order_day(order: Order) -> Optional[date]:
    if order.created_at is not None:
        return order.created_at.date()
    return order.pickup_date


def dashboard_stats(
    orders: Iterable[Order],
    timeframe: Union[Timeframe, str] = Timeframe.WEEK,
    *,
    today: Optional[date] = None,
    top_n: int = 5,
) -> DashboardStats:
    timeframe = Timeframe(timeframe)
    today = today or date.today()
    start = today - timedelta(days=timeframe.days - 1)

    window: List[Order] = []
    for order in orders:
        day = _order_day(order)
        if day is not None and start <= day <= today:
            window.append(order)

    stats = DashboardStats(timeframe=timeframe)
    ov = stats.overview
    revenue: Dict[date, float] = {start + timedelta(days=i): 0.0 for i in range(timeframe.days)}
    by_status: Counter = Counter()
    by_service: Counter = Counter()

    for order in window:
        ov.total_orders += 1
        by_status[order.status] += 1
        bucket = bucket_of(order.status)
        if bucket is Bucket.NEW:
            ov.new_orders += 1
        elif bucket is Bucket.PROCESSING:
            ov.processing_orders += 1
        elif bucket is Bucket.READY:
            ov.ready_orders += 1
        if order.status in (OrderStatus.COMPLETED, OrderStatus.DELIVERED):
            ov.completed_orders += 1
        if order.status is not OrderStatus.CANCELLED:
            ov.total_revenue += order.total_amount
            revenue[_order_day(order)] += order.total_amount
        for item in order.items:
            by_service[item.item_type] += item.count

    stats.revenue_by_day = [
        {"date": day.isoformat(), "revenue": amount} for day, amount in revenue.items()
    ]
    stats.orders_by_status = [
        {"status": status.value, "count": by_status[status]} for status in OrderStatus
    ]
    ranked = sorted(
        ((name, count) for name, count in by_service.items() if count > 0),
        key=lambda pair: (-pair[1], pair[0]),
    )
    stats.top_services = [{"name": name, "count": count} for name, count in ranked[:top_n]]
    return stats
