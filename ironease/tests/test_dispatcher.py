"""Unit tests for ActionDispatcher with a mocked OrderService."""
from __future__ import annotations

import asyncio
import unittest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from ironease.clients.session import SessionContext
from ironease.core.exceptions import (
    DispatchError,
    DuplicateSubmissionError,
    InvalidTransitionError,
    NetworkError,
    UnknownStatusError,
    ValidationError,
)
from ironease.orders.dispatcher import ActionDispatcher, RequestState
from ironease.orders.draft import OrderDraft
from ironease.orders.notifications import CollectingNotifier
from ironease.orders.store import OrderStore
from ironease.orders.types import Address, Bucket, Order, OrderStatus, Role, Service, Shop

S = OrderStatus
TODAY = date(2024, 1, 15)
ADDRESS = Address(street="12 MG Road", city="Pune", state="MH", pincode="411001")


def _run(coro):
    return asyncio.run(coro)


def _orders_service():
    svc = MagicMock()
    svc.update_status = AsyncMock(return_value={"ok": True})
    svc.cancel = AsyncMock(return_value={"ok": True})
    svc.create = AsyncMock(return_value="ORD009")
    return svc


def _dispatcher(role, *, orders=None, fetched=None, **kwargs):
    orders = orders or _orders_service()
    fetch = AsyncMock(return_value=fetched if fetched is not None else [])
    store = OrderStore(fetch)
    notifier = CollectingNotifier()
    dispatcher = ActionDispatcher(
        orders, store, role=role, notifier=notifier, today=lambda: TODAY, **kwargs
    )
    return dispatcher, orders, fetch, notifier


def _draft(**counts):
    shop = Shop(id="shop-1", name="Quick Iron", services=(Service("s1", "Shirt", 15.0), Service("s2", "Saree", 50.0)))
    draft = OrderDraft.for_shop(shop)
    for item_type, count in counts.items():
        draft.set_count(item_type, count)
    return draft


# ─── status transitions ───────────────────────────────────────────────────────

class TestShopTransitions(unittest.TestCase):
    def test_accept_pending_order(self):
        accepted = Order("ORD001", S.ACCEPTED, "Priya Sharma")
        dispatcher, orders, fetch, notifier = _dispatcher(Role.SHOP_OWNER, fetched=[accepted])

        _run(dispatcher.request_transition(Order("ORD001", S.PENDING, "Priya Sharma"), "accepted"))

        orders.update_status.assert_awaited_once_with("ORD001", S.ACCEPTED)
        orders.cancel.assert_not_awaited()
        fetch.assert_awaited_once()
        self.assertIs(dispatcher.state("ORD001", "accepted"), RequestState.SETTLED_OK)
        self.assertEqual(notifier.notices[-1].kind, "success")
        self.assertIn("arranging pickup", notifier.notices[-1].message)

    def test_cancel_completed_order_is_rejected_locally(self):
        dispatcher, orders, fetch, notifier = _dispatcher(Role.SHOP_OWNER)

        with self.assertRaises(InvalidTransitionError):
            _run(dispatcher.request_transition(Order("ORD002", S.COMPLETED), S.CANCELLED))

        orders.update_status.assert_not_awaited()
        fetch.assert_not_awaited()
        self.assertEqual(notifier.notices[-1].kind, "error")
        self.assertEqual(notifier.notices[-1].code, "INVALID_TRANSITION")
        self.assertIs(dispatcher.state("ORD002", "cancelled"), RequestState.IDLE)

    def test_unknown_target_is_an_invalid_transition(self):
        dispatcher, orders, _, notifier = _dispatcher(Role.SHOP_OWNER)

        with self.assertRaises(InvalidTransitionError):
            _run(dispatcher.request_transition(Order("ORD003", S.PENDING), "shipped"))

        orders.update_status.assert_not_awaited()
        self.assertEqual(len(notifier.notices), 1)

    def test_backend_failure_is_notified_and_raised(self):
        orders = _orders_service()
        orders.update_status = AsyncMock(side_effect=NetworkError("Network error. Please check your connection."))
        dispatcher, _, fetch, notifier = _dispatcher(Role.SHOP_OWNER, orders=orders)

        with self.assertRaises(NetworkError):
            _run(dispatcher.request_transition(Order("ORD004", S.ACCEPTED), S.PICKED_UP))

        fetch.assert_not_awaited()
        self.assertIs(dispatcher.state("ORD004", "pickedUp"), RequestState.SETTLED_ERROR)
        self.assertEqual(notifier.notices[-1].code, "NETWORK_ERROR")

    def test_failed_refresh_after_success_is_reported(self):
        dispatcher, orders, fetch, notifier = _dispatcher(Role.SHOP_OWNER)
        fetch.side_effect = NetworkError("offline")

        with self.assertRaises(NetworkError):
            _run(dispatcher.request_transition(Order("ORD005", S.IN_PROGRESS), S.COMPLETED))

        orders.update_status.assert_awaited_once()
        self.assertIs(dispatcher.state("ORD005", "completed"), RequestState.SETTLED_OK)
        self.assertEqual([n.kind for n in notifier.notices], ["success", "error"])

    def test_unknown_status_in_refresh_is_reported(self):
        dispatcher, _, fetch, notifier = _dispatcher(Role.SHOP_OWNER)
        fetch.side_effect = UnknownStatusError("Unknown order status 'shipped'")

        with self.assertRaises(UnknownStatusError):
            _run(dispatcher.request_transition(Order("ORD006", S.PENDING), S.ACCEPTED))

        self.assertEqual([n.kind for n in notifier.notices], ["success", "error"])
        self.assertEqual(notifier.notices[-1].code, "UNKNOWN_STATUS")

    def test_unexpected_failure_settles_and_allows_retry(self):
        orders = _orders_service()
        orders.update_status = AsyncMock(side_effect=[ValueError("bad gzip body"), {"ok": True}])
        dispatcher, _, _, notifier = _dispatcher(Role.SHOP_OWNER, orders=orders)
        order = Order("ORD008", S.PENDING)

        with self.assertRaises(DispatchError) as ctx:
            _run(dispatcher.request_transition(order, S.ACCEPTED))

        self.assertIsInstance(ctx.exception.cause, ValueError)
        self.assertIs(dispatcher.state("ORD008", "accepted"), RequestState.SETTLED_ERROR)
        self.assertEqual(notifier.notices[-1].code, "DISPATCH_ERROR")

        _run(dispatcher.request_transition(order, S.ACCEPTED))
        self.assertEqual(orders.update_status.await_count, 2)
        self.assertIs(dispatcher.state("ORD008", "accepted"), RequestState.SETTLED_OK)


class TestCustomerTransitions(unittest.TestCase):
    def test_cancel_pending_order(self):
        dispatcher, orders, fetch, _ = _dispatcher(Role.CUSTOMER)

        _run(dispatcher.request_transition(Order("ORD010", S.PENDING), S.CANCELLED))

        orders.cancel.assert_awaited_once_with("ORD010")
        orders.update_status.assert_not_awaited()
        fetch.assert_awaited_once()

    def test_cannot_cancel_accepted_order(self):
        dispatcher, orders, _, notifier = _dispatcher(Role.CUSTOMER)

        with self.assertRaises(InvalidTransitionError):
            _run(dispatcher.request_transition(Order("ORD011", S.ACCEPTED), S.CANCELLED))

        orders.cancel.assert_not_awaited()
        self.assertEqual(notifier.notices[-1].kind, "error")

    def test_cannot_accept(self):
        dispatcher, orders, _, _ = _dispatcher(Role.CUSTOMER)
        with self.assertRaises(InvalidTransitionError):
            _run(dispatcher.request_transition(Order("ORD012", S.PENDING), S.ACCEPTED))
        orders.cancel.assert_not_awaited()


class TestDuplicateSubmission(unittest.TestCase):
    def test_second_submission_while_pending_is_refused(self):
        async def scenario():
            gate = asyncio.Event()
            orders = _orders_service()

            async def slow_update(order_id, status):
                await gate.wait()
                return {"ok": True}

            orders.update_status = AsyncMock(side_effect=slow_update)
            dispatcher, _, _, notifier = _dispatcher(Role.SHOP_OWNER, orders=orders)
            order = Order("ORD020", S.PENDING)

            first = asyncio.create_task(dispatcher.request_transition(order, S.ACCEPTED))
            await asyncio.sleep(0)
            self.assertTrue(dispatcher.is_pending("ORD020", "accepted"))
            with self.assertRaises(DuplicateSubmissionError):
                await dispatcher.request_transition(order, S.ACCEPTED)
            gate.set()
            await first
            return dispatcher, orders, notifier

        dispatcher, orders, notifier = _run(scenario())
        self.assertEqual(orders.update_status.await_count, 1)
        self.assertIs(dispatcher.state("ORD020", "accepted"), RequestState.SETTLED_OK)
        self.assertIn("DUPLICATE_SUBMISSION", [n.code for n in notifier.notices])

    def test_resubmission_after_settle_is_allowed(self):
        dispatcher, orders, _, _ = _dispatcher(Role.SHOP_OWNER)
        order = Order("ORD021", S.PENDING)
        _run(dispatcher.request_transition(order, S.ACCEPTED))
        _run(dispatcher.request_transition(order, S.ACCEPTED))
        self.assertEqual(orders.update_status.await_count, 2)

    def test_dispatchers_sharing_states_refuse_each_other(self):
        states = {("ORD022", "accepted"): RequestState.PENDING}
        dispatcher, orders, _, notifier = _dispatcher(Role.SHOP_OWNER, states=states)

        self.assertTrue(dispatcher.is_pending("ORD022", "accepted"))
        with self.assertRaises(DuplicateSubmissionError):
            _run(dispatcher.request_transition(Order("ORD022", S.PENDING), S.ACCEPTED))

        orders.update_status.assert_not_awaited()
        self.assertEqual(notifier.notices[-1].code, "DUPLICATE_SUBMISSION")


# ─── end-to-end board scenarios ───────────────────────────────────────────────

class TestBoardScenarios(unittest.TestCase):
    def test_accepting_moves_order_from_new_to_processing(self):
        before = [Order("ORD001", S.PENDING), Order("ORD007", S.ACCEPTED)]
        after = [Order("ORD001", S.ACCEPTED), Order("ORD007", S.ACCEPTED)]
        orders = _orders_service()
        fetch = AsyncMock(return_value=after)
        store = OrderStore(fetch, orders=before)
        dispatcher = ActionDispatcher(orders, store, role=Role.SHOP_OWNER, notifier=CollectingNotifier())
        counts_before = store.counts

        _run(dispatcher.request_transition(store.get("ORD001"), S.ACCEPTED))

        self.assertEqual(store.counts[Bucket.NEW], counts_before[Bucket.NEW] - 1)
        self.assertEqual(store.counts[Bucket.PROCESSING], counts_before[Bucket.PROCESSING] + 1)
        self.assertIn("ORD001", [o.id for o in store.view(Bucket.PROCESSING)])

    def test_rejected_cancel_leaves_order_in_ready(self):
        orders = _orders_service()
        store = OrderStore(AsyncMock(), orders=[Order("ORD002", S.COMPLETED)])
        dispatcher = ActionDispatcher(orders, store, role=Role.SHOP_OWNER, notifier=CollectingNotifier())

        with self.assertRaises(InvalidTransitionError):
            _run(dispatcher.request_transition(store.get("ORD002"), S.CANCELLED))

        self.assertIs(store.get("ORD002").status, S.COMPLETED)
        self.assertEqual([o.id for o in store.view(Bucket.READY)], ["ORD002"])
        orders.update_status.assert_not_awaited()


# ─── order creation ───────────────────────────────────────────────────────────

class TestCreateOrder(unittest.TestCase):
    def _assert_rejected(self, message, *, draft, pickup=TODAY, address=ADDRESS):
        dispatcher, orders, _, notifier = _dispatcher(Role.CUSTOMER)
        with self.assertRaises(ValidationError) as ctx:
            _run(dispatcher.create_order(pickup, address, draft=draft))
        self.assertIn(message, ctx.exception.message)
        orders.create.assert_not_awaited()
        self.assertEqual(notifier.notices[-1].kind, "error")
        return ctx.exception

    def test_missing_draft(self):
        self._assert_rejected("Order data not found", draft=None)

    def test_empty_draft(self):
        self._assert_rejected("at least one item", draft=_draft())

    def test_missing_pickup_date(self):
        self._assert_rejected("pickup date", draft=_draft(Shirt=2), pickup=None)

    def test_pickup_date_outside_window(self):
        self._assert_rejected("within the next 14 days", draft=_draft(Shirt=2), pickup=date(2024, 1, 29))
        self._assert_rejected("within the next 14 days", draft=_draft(Shirt=2), pickup=date(2024, 1, 14))

    def test_incomplete_address(self):
        exc = self._assert_rejected(
            "address", draft=_draft(Shirt=2), address=Address(street="12 MG Road", city="Pune")
        )
        self.assertEqual(exc.details["missing"], ["state", "pincode"])

    def test_success_clears_draft_and_navigates(self):
        session = SessionContext(token="tok")
        session.draft = _draft(Shirt=2, Saree=1)
        visited = []
        dispatcher, orders, fetch, notifier = _dispatcher(
            Role.CUSTOMER, session=session, navigate=visited.append
        )

        order_id = _run(dispatcher.create_order(date(2024, 1, 28), ADDRESS, "Starch collars"))

        self.assertEqual(order_id, "ORD009")
        payload = orders.create.await_args.args[0]
        self.assertEqual(payload["shop_id"], "shop-1")
        self.assertEqual(payload["total_amount"], 80.0)
        self.assertEqual(payload["pickup_date"], "2024-01-28")
        self.assertEqual(payload["special_instructions"], "Starch collars")
        self.assertIsNone(session.draft)
        self.assertEqual(visited, ["orders"])
        self.assertEqual(notifier.notices[-1].message, "Order placed successfully!")
        fetch.assert_awaited_once()

    def test_backend_failure_keeps_draft(self):
        session = SessionContext(token="tok")
        session.draft = _draft(Shirt=1)
        orders = _orders_service()
        orders.create = AsyncMock(side_effect=NetworkError("offline"))
        dispatcher, _, _, _ = _dispatcher(Role.CUSTOMER, orders=orders, session=session)

        with self.assertRaises(NetworkError):
            _run(dispatcher.create_order(TODAY, ADDRESS))

        self.assertIsNotNone(session.draft)
        self.assertIs(dispatcher.state("shop-1", "create"), RequestState.SETTLED_ERROR)

    def test_unexpected_failure_settles_create(self):
        orders = _orders_service()
        orders.create = AsyncMock(side_effect=[RuntimeError("connection pool closed"), "ORD010"])
        dispatcher, _, _, notifier = _dispatcher(Role.CUSTOMER, orders=orders)

        with self.assertRaises(DispatchError):
            _run(dispatcher.create_order(TODAY, ADDRESS, draft=_draft(Shirt=1)))
        self.assertIs(dispatcher.state("shop-1", "create"), RequestState.SETTLED_ERROR)
        self.assertEqual(notifier.notices[-1].kind, "error")

        self.assertEqual(_run(dispatcher.create_order(TODAY, ADDRESS, draft=_draft(Shirt=1))), "ORD010")

    def test_negative_counts_do_not_make_an_order(self):
        draft = _draft(Shirt=1)
        draft.lines[0].count = 0
        draft.lines[1].count = -3
        self._assert_rejected("at least one item", draft=draft)


if __name__ == "__main__":
    unittest.main()
