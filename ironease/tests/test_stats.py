"""Tests for shop dashboard statistics."""
from __future__ import annotations

import unittest
from datetime import date, datetime

from ironease.orders.stats import dashboard_stats
from ironease.orders.types import Order, OrderItem, OrderStatus, Timeframe

S = OrderStatus
TODAY = date(2024, 1, 20)


def _order(order_id, status, amount, *, created=None, pickup=None, items=()):
    return Order(
        id=order_id,
        status=status,
        total_amount=amount,
        created_at=created,
        pickup_date=pickup,
        items=tuple(items),
    )


class TestDashboardStats(unittest.TestCase):
    def setUp(self):
        self.orders = [
            _order("A", S.PENDING, 100.0, created=datetime(2024, 1, 20, 9, 0),
                   items=[OrderItem("Shirt", 4, 25.0)]),
            _order("B", S.IN_PROGRESS, 200.0, created=datetime(2024, 1, 19, 9, 0),
                   items=[OrderItem("Saree", 2, 100.0)]),
            _order("C", S.DELIVERED, 150.0, pickup=date(2024, 1, 18),
                   items=[OrderItem("Shirt", 6, 25.0)]),
            _order("D", S.CANCELLED, 80.0, created=datetime(2024, 1, 17, 9, 0),
                   items=[OrderItem("Pants", 2, 40.0)]),
            _order("E", S.COMPLETED, 60.0, created=datetime(2024, 1, 1, 9, 0)),
        ]

    def test_overview_for_week(self):
        stats = dashboard_stats(self.orders, Timeframe.WEEK, today=TODAY)
        ov = stats.overview
        self.assertEqual(ov.total_orders, 4)
        self.assertEqual(ov.new_orders, 1)
        self.assertEqual(ov.processing_orders, 1)
        self.assertEqual(ov.ready_orders, 0)
        self.assertEqual(ov.completed_orders, 1)
        self.assertEqual(ov.total_revenue, 450.0)

    def test_revenue_by_day_is_zero_filled(self):
        stats = dashboard_stats(self.orders, "week", today=TODAY)
        self.assertEqual(len(stats.revenue_by_day), 7)
        self.assertEqual(stats.revenue_by_day[0]["date"], "2024-01-14")
        self.assertEqual(stats.revenue_by_day[-1], {"date": "2024-01-20", "revenue": 100.0})
        by_day = {row["date"]: row["revenue"] for row in stats.revenue_by_day}
        self.assertEqual(by_day["2024-01-18"], 150.0)
        self.assertEqual(by_day["2024-01-17"], 0.0)

    def test_month_window_includes_older_orders(self):
        stats = dashboard_stats(self.orders, Timeframe.MONTH, today=TODAY)
        self.assertEqual(stats.overview.total_orders, 5)
        self.assertEqual(stats.overview.ready_orders, 1)
        self.assertEqual(len(stats.revenue_by_day), 30)

    def test_orders_by_status_lists_every_status(self):
        stats = dashboard_stats(self.orders, Timeframe.WEEK, today=TODAY)
        self.assertEqual([row["status"] for row in stats.orders_by_status], [s.value for s in OrderStatus])
        counts = {row["status"]: row["count"] for row in stats.orders_by_status}
        self.assertEqual(counts["cancelled"], 1)
        self.assertEqual(counts["completed"], 0)

    def test_top_services_ranked_by_count(self):
        stats = dashboard_stats(self.orders, Timeframe.WEEK, today=TODAY, top_n=2)
        self.assertEqual(stats.top_services, [{"name": "Shirt", "count": 10}, {"name": "Pants", "count": 2}])

    def test_undated_orders_are_skipped(self):
        stats = dashboard_stats([_order("X", S.PENDING, 10.0)], Timeframe.WEEK, today=TODAY)
        self.assertEqual(stats.overview.total_orders, 0)

    def test_to_dict(self):
        out = dashboard_stats([], Timeframe.YEAR, today=TODAY).to_dict()
        self.assertEqual(out["timeframe"], "year")
        self.assertEqual(out["overview"]["total_orders"], 0)
        self.assertEqual(len(out["revenue_by_day"]), 365)
        self.assertEqual(out["top_services"], [])


if __name__ == "__main__":
    unittest.main()
