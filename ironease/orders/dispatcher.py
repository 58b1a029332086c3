"""Action dispatcher: validate locally, mutate through the backend, then refetch.

This is the only place where backend failures become user notices. Every
failure is also re-raised so the caller can stop its own flow.
"""
from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, MutableMapping, Optional, Tuple, Union

from ironease.core.exceptions import (
    DispatchError,
    DuplicateSubmissionError,
    InvalidTransitionError,
    ProjectError,
    UnknownStatusError,
    ValidationError,
)
from ironease.orders.draft import OrderDraft, available_pickup_dates
from ironease.orders.notifications import BaseNotifier, LoggingNotifier
from ironease.orders.status_machine import apply_transition, can_transition, parse_status, status_info
from ironease.orders.store import OrderStore
from ironease.orders.types import Address, Order, OrderStatus, Role

if TYPE_CHECKING:
    from ironease.clients.session import SessionContext
    from ironease.services.order_service import OrderService

logger = logging.getLogger(__name__)

_CREATE = "create"


class RequestState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SETTLED_OK = "settled_ok"
    SETTLED_ERROR = "settled_error"


class ActionDispatcher:
    """Issues order mutations for one actor.

    Each (order id, action) pair moves ``idle -> pending -> settled_ok |
    settled_error``. While a pair is pending a second submission is refused
    without touching the network; views use :meth:`is_pending` to disable
    the control. Dispatchers that share one ``states`` mapping also refuse
    each other's in-flight pairs.
    """

    def __init__(
        self,
        orders: "OrderService",
        store: OrderStore,
        *,
        role: Role,
        notifier: Optional[BaseNotifier] = None,
        session: Optional["SessionContext"] = None,
        navigate: Optional[Callable[[str], None]] = None,
        pickup_window_days: int = 14,
        today: Callable[[], date] = date.today,
        states: Optional[MutableMapping[Tuple[str, str], RequestState]] = None,
    ) -> None:
        self._orders = orders
        self._store = store
        self._role = role
        self._notifier = notifier or LoggingNotifier()
        self._session = session
        self._navigate = navigate
        self._pickup_window_days = pickup_window_days
        self._today = today
        self._states: MutableMapping[Tuple[str, str], RequestState] = {} if states is None else states

    def state(self, order_id: str, action: str) -> RequestState:
        return self._states.get((order_id, action), RequestState.IDLE)

    def is_pending(self, order_id: str, action: str) -> bool:
        return self.state(order_id, action) is RequestState.PENDING

    def _guard(self, key: Tuple[str, str]) -> None:
        """Refuse a second submission while the first is in flight."""
        if self.is_pending(*key):
            exc = DuplicateSubmissionError(
                "This request is already being processed",
                details={"order_id": key[0], "action": key[1]},
            )
            self._fail(exc)
            raise exc

    def _fail(self, exc: ProjectError, key: Optional[Tuple[str, str]] = None) -> None:
        if key is not None:
            self._states[key] = RequestState.SETTLED_ERROR
        logger.info(
            "Dispatcher: %s (%s)", exc.message, exc.code,
            extra={"order_id": key[0] if key else None, "action": key[1] if key else None},
        )
        self._notifier.error(exc)

    async def _submit(self, key: Tuple[str, str], call: Awaitable[Any]) -> Any:
        """Await one backend mutation; ``key`` always leaves the pending state."""
        self._states[key] = RequestState.PENDING
        try:
            result = await call
        except DispatchError as exc:
            self._fail(exc, key)
            raise
        except Exception as exc:
            logger.exception("Dispatcher: unexpected failure for %s %s", key[0], key[1])
            err = DispatchError(
                "Something went wrong, please try again",
                details={"order_id": key[0], "action": key[1]},
                cause=exc,
            )
            self._fail(err, key)
            raise err from exc
        else:
            self._states[key] = RequestState.SETTLED_OK
            return result
        finally:
            if self._states.get(key) is RequestState.PENDING:
                self._states[key] = RequestState.SETTLED_ERROR

    # ── Status transitions ─────────────────────────────────────────────────────

    async def request_transition(self, order: Order, new_status: Union[str, OrderStatus]) -> None:
        try:
            target = parse_status(new_status)
        except UnknownStatusError as exc:
            err = InvalidTransitionError(exc.message, details=exc.details, cause=exc)
            self._fail(err)
            raise err from exc

        key = (order.id, target.value)
        self._guard(key)
        try:
            apply_transition(order, target)
            if not can_transition(self._role, order.status, target):
                raise InvalidTransitionError(
                    f"You cannot mark order {order.id} as {status_info(target).label}",
                    details={"order_id": order.id, "from": order.status.value, "to": target.value},
                )
        except InvalidTransitionError as exc:
            self._fail(exc)
            raise

        if self._role is Role.SHOP_OWNER:
            await self._submit(key, self._orders.update_status(order.id, target))
        else:
            await self._submit(key, self._orders.cancel(order.id))
        logger.info(
            "Dispatcher: order %s %s -> %s", order.id, order.status.value, target.value,
            extra={"order_id": order.id, "status": target.value},
        )
        self._notifier.success(f"Order {order.id}: {status_info(target).description}")
        await self._refresh()

    # ── Order creation ─────────────────────────────────────────────────────────

    def validate_new_order(self, draft: Optional[OrderDraft], pickup_date: Optional[date], address: Address) -> OrderDraft:
        if draft is None:
            raise ValidationError("Order data not found", details={"field": "draft"})
        if draft.total_items <= 0:
            raise ValidationError("Add at least one item to your order", details={"field": "items"})
        if pickup_date is None:
            raise ValidationError("Please select a pickup date", details={"field": "pickup_date"})
        if pickup_date not in available_pickup_dates(self._today(), self._pickup_window_days):
            raise ValidationError(
                "Pickup date must be within the next "
                f"{self._pickup_window_days} days",
                details={"field": "pickup_date", "value": pickup_date.isoformat()},
            )
        missing = address.missing_fields()
        if missing:
            raise ValidationError(
                "Please fill in the required address fields",
                details={"field": "pickup_address", "missing": missing},
            )
        return draft

    async def create_order(
        self,
        pickup_date: Optional[date],
        address: Address,
        special_instructions: Optional[str] = None,
        *,
        draft: Optional[OrderDraft] = None,
    ) -> str:
        """Create an order from ``draft`` (or the session draft) and return its id."""
        if draft is None and self._session is not None:
            draft = self._session.draft
        try:
            draft = self.validate_new_order(draft, pickup_date, address)
        except ValidationError as exc:
            self._fail(exc)
            raise

        key = (draft.shop_id, _CREATE)
        self._guard(key)
        order_id = await self._submit(
            key, self._orders.create(draft.to_payload(pickup_date, address, special_instructions))
        )

        if self._session is not None:
            self._session.draft = None
        self._notifier.success("Order placed successfully!")
        if self._navigate is not None:
            self._navigate("orders")
        await self._refresh()
        return order_id

    async def _refresh(self) -> None:
        try:
            await self._store.refresh()
        except ProjectError as exc:
            self._fail(exc)
            raise
