"""Tests for order search, pickup-date filtering and shop lookup."""
from __future__ import annotations

import unittest
from datetime import date

from ironease.core.exceptions import ValidationError
from ironease.orders.search import filter_by_date, filter_orders, filter_shops, narrow
from ironease.orders.types import Bucket, Order, OrderStatus, Shop

S = OrderStatus

ORDERS = [
    Order(id="ORD001", status=S.PENDING, counterpart_name="Priya Sharma", pickup_date=date(2024, 1, 15)),
    Order(id="ORD002", status=S.PENDING, counterpart_name="Rahul Verma", pickup_date=date(2024, 1, 16)),
    Order(id="ORD003", status=S.ACCEPTED, counterpart_name="Anita Desai", pickup_date=date(2024, 1, 15)),
    Order(id="ORD004", status=S.DELIVERED, counterpart_name="Priya Sharma", pickup_date=date(2024, 1, 10)),
]


class TestFilterOrders(unittest.TestCase):
    def test_matches_counterpart_case_insensitively(self):
        result = filter_orders(ORDERS, "priya")
        self.assertEqual([o.id for o in result], ["ORD001", "ORD004"])

    def test_matches_order_id(self):
        self.assertEqual([o.id for o in filter_orders(ORDERS, "ord003")], ["ORD003"])

    def test_blank_query_is_identity(self):
        self.assertEqual(filter_orders(ORDERS, ""), ORDERS)
        self.assertEqual(filter_orders(ORDERS, "   "), ORDERS)
        self.assertEqual(filter_orders(ORDERS, None), ORDERS)

    def test_result_is_subsequence(self):
        result = filter_orders(ORDERS, "a")
        positions = [ORDERS.index(o) for o in result]
        self.assertEqual(positions, sorted(positions))

    def test_idempotent(self):
        once = filter_orders(ORDERS, "sharma")
        self.assertEqual(filter_orders(once, "sharma"), once)

    def test_counterpart_substring(self):
        pair = [Order(id="A", status=S.PENDING, counterpart_name="Premium Pressers"),
                Order(id="B", status=S.PENDING, counterpart_name="Swift Iron")]
        self.assertEqual([o.id for o in filter_orders(pair, "premium")], ["A"])

    def test_no_match(self):
        self.assertEqual(filter_orders(ORDERS, "zzz"), [])


class TestFilterByDate(unittest.TestCase):
    def test_exact_pickup_date(self):
        self.assertEqual([o.id for o in filter_by_date(ORDERS, date(2024, 1, 15))], ["ORD001", "ORD003"])

    def test_iso_string(self):
        self.assertEqual([o.id for o in filter_by_date(ORDERS, "2024-01-16")], ["ORD002"])

    def test_empty_keeps_all(self):
        self.assertEqual(filter_by_date(ORDERS, None), ORDERS)
        self.assertEqual(filter_by_date(ORDERS, ""), ORDERS)

    def test_malformed_date_raises(self):
        with self.assertRaises(ValidationError) as ctx:
            filter_by_date(ORDERS, "15/01/2024")
        self.assertEqual(ctx.exception.details, {"field": "date"})


class TestNarrow(unittest.TestCase):
    def test_bucket_then_query(self):
        result = narrow(ORDERS, Bucket.NEW, "rahul")
        self.assertEqual([o.id for o in result], ["ORD002"])

    def test_bucket_query_and_date(self):
        self.assertEqual(narrow(ORDERS, Bucket.HISTORY, "priya", "2024-01-15"), [])
        self.assertEqual([o.id for o in narrow(ORDERS, Bucket.HISTORY, "priya", "2024-01-10")], ["ORD004"])

    def test_no_bucket(self):
        self.assertEqual(len(narrow(ORDERS, None, "priya")), 2)


class TestFilterShops(unittest.TestCase):
    def test_by_name(self):
        shops = [Shop(id="1", name="Quick Iron Services"), Shop(id="2", name="Perfect Press")]
        self.assertEqual([s.id for s in filter_shops(shops, "press")], ["2"])
        self.assertEqual(filter_shops(shops, ""), shops)


if __name__ == "__main__":
    unittest.main()
