"""OrderService: list, create and move orders through the marketplace backend."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as RecordValidationError

from ironease.clients.http import ApiClient
from ironease.core.exceptions import ServerError
from ironease.orders.store import OrderFetcher
from ironease.orders.tabs import is_active
from ironease.orders.types import Order, OrderStatus, Role
from ironease.services.records import OrderRecord

logger = logging.getLogger(__name__)


def _order_rows(payload: Any) -> List[Dict[str, Any]]:
    """Accept a bare list or ``{orders, counts}``; backend counts are ignored."""
    if payload is None:
        return []
    if isinstance(payload, dict):
        payload = payload.get("orders", [])
    if not isinstance(payload, list):
        raise ServerError("Backend sent an unexpected order list", code="MALFORMED_RECORD")
    return payload


def _created_id(payload: Any) -> str:
    if isinstance(payload, (str, int)):
        return str(payload)
    if isinstance(payload, dict):
        for key in ("id", "_id", "order_id", "orderId"):
            if payload.get(key) is not None:
                return str(payload[key])
    raise ServerError("Backend did not return the new order id", code="MALFORMED_RECORD")


class OrderService:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list_orders(self, role: Role, *, history: Optional[bool] = None) -> List[Order]:
        """Orders of the signed-in actor, in backend order.

        ``history`` narrows the customer listing (True -> ?type=history,
        False -> ?type=active); the shop listing has no such filter. Rows on
        the wrong side of the split are dropped even when the backend ignores
        the parameter.
        """
        if role is Role.CUSTOMER:
            params = None if history is None else {"type": "history" if history else "active"}
            payload = await self._client.get("/customer/orders", params=params)
        else:
            payload = await self._client.get("/shop/orders")

        orders: List[Order] = []
        for row in _order_rows(payload):
            try:
                record = OrderRecord.model_validate(row)
            except RecordValidationError as exc:
                raise ServerError(
                    "Backend sent a malformed order record",
                    code="MALFORMED_RECORD",
                    details={"errors": exc.errors(include_url=False)},
                    cause=exc,
                ) from exc
            orders.append(record.to_order(role))
        if role is Role.CUSTOMER and history is not None:
            orders = [o for o in orders if is_active(o.status) != history]
        logger.debug("OrderService: fetched %d orders for %s", len(orders), role.value)
        return orders

    def fetcher(self, role: Role, *, history: Optional[bool] = None) -> OrderFetcher:
        """Bind list_orders for an OrderStore."""
        async def _fetch() -> List[Order]:
            return await self.list_orders(role, history=history)
        return _fetch

    async def update_status(self, order_id: str, status: OrderStatus) -> Any:
        return await self._client.put(f"/shop/orders/{order_id}/status", {"status": status.value})

    async def cancel(self, order_id: str) -> Any:
        return await self._client.put(f"/customer/orders/{order_id}/cancel", {})

    async def create(self, payload: Dict[str, Any]) -> str:
        created = await self._client.post("/orders", payload)
        order_id = _created_id(created)
        logger.info("OrderService: created order %s", order_id, extra={"order_id": order_id})
        return order_id
