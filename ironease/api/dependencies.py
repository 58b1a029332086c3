"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from fastapi import Depends, Header, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ironease.clients.http import ApiClient
from ironease.clients.session import SessionContext
from ironease.config import PortalConfig
from ironease.core.exceptions import AuthError, ClientRequestError
from ironease.orders.dispatcher import ActionDispatcher
from ironease.orders.notifications import CollectingNotifier, LoggingNotifier
from ironease.orders.search import DateLike
from ironease.orders.store import OrderStore
from ironease.orders.types import Bucket, Order, Role
from ironease.orders.views import RoleView, view_for
from ironease.services.order_service import OrderService

limiter = Limiter(key_func=get_remote_address)


def mutation_limit() -> str:
    """Rate limit for endpoints that change backend state (PORTAL_RATE_LIMIT)."""
    return PortalConfig.from_env().rate_limit


def get_config(request: Request) -> PortalConfig:
    return request.app.state.config


def _bearer_token(authorization: Optional[str]) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Authentication required")
    return token.strip()


async def get_anonymous_client(
    request: Request,
    config: PortalConfig = Depends(get_config),
) -> AsyncGenerator[ApiClient, None]:
    """Backend client without credentials, for login and registration."""
    transport = getattr(request.app.state, "backend_transport", None)
    async with ApiClient(config, transport=transport) as client:
        yield client


async def get_api_client(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    config: PortalConfig = Depends(get_config),
) -> AsyncGenerator[ApiClient, None]:
    """Yield a backend client carrying the caller's token for this request only."""
    session = SessionContext(token=_bearer_token(authorization))
    transport = getattr(request.app.state, "backend_transport", None)
    async with ApiClient(config, session, transport=transport) as client:
        yield client


@dataclass
class PortalContext:
    """Everything a board endpoint needs for one actor and one request."""

    view: RoleView
    orders: OrderService
    store: OrderStore
    notifier: CollectingNotifier
    dispatcher: ActionDispatcher
    redirects: List[str] = field(default_factory=list)

    def require(self, order_id: str) -> Order:
        order = self.store.get(order_id)
        if order is None:
            raise ClientRequestError("Order not found", http_status=404, details={"order_id": order_id})
        return order

    def notices(self) -> list:
        return [n.to_dict() for n in self.notifier.notices]

    def board(self, tab: Optional[Bucket] = None, query: Optional[str] = None, on: DateLike = None) -> dict:
        return self.view.board(self.store, tab, query, on, pending=self.dispatcher.is_pending)


def portal_context(role: Role) -> Callable[..., PortalContext]:
    async def _dependency(
        request: Request,
        client: ApiClient = Depends(get_api_client),
        config: PortalConfig = Depends(get_config),
    ) -> PortalContext:
        orders = OrderService(client)
        store = OrderStore(orders.fetcher(role))
        notifier = CollectingNotifier(forward=LoggingNotifier())
        redirects: List[str] = []
        dispatcher = ActionDispatcher(
            orders,
            store,
            role=role,
            notifier=notifier,
            session=client.session,
            navigate=redirects.append,
            pickup_window_days=config.pickup_window_days,
            states=request.app.state.request_states,
        )
        return PortalContext(view_for(role), orders, store, notifier, dispatcher, redirects)

    return _dependency
