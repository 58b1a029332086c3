"""Customer portal router: order board, cancellation, checkout and shop search."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ironease.api.dependencies import PortalContext, get_api_client, limiter, mutation_limit, portal_context
from ironease.api.schemas.orders import CreateOrderRequest, shop_out
from ironease.clients.http import ApiClient
from ironease.orders.search import filter_shops
from ironease.orders.tabs import bucket_of
from ironease.orders.types import Bucket, OrderStatus, Role
from ironease.services.shop_service import ShopService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/customer", tags=["customer"])

_customer = portal_context(Role.CUSTOMER)


# ── Orders ────────────────────────────────────────────────────────────────────

@router.get("/orders")
async def customer_orders(
    tab: Optional[Bucket] = None,
    q: Optional[str] = None,
    on: Optional[str] = Query(default=None, alias="date"),
    ctx: PortalContext = Depends(_customer),
):
    """Tabs with counts and the orders of ``tab`` narrowed by text and pickup date."""
    await ctx.store.refresh()
    return ctx.board(tab, q, on)


@router.post("/orders/{order_id}/cancel")
@limiter.limit(mutation_limit)
async def cancel_order(
    request: Request,
    order_id: str,
    ctx: PortalContext = Depends(_customer),
):
    await ctx.store.refresh()
    order = ctx.require(order_id)
    await ctx.dispatcher.request_transition(order, OrderStatus.CANCELLED)
    board = ctx.board(bucket_of(OrderStatus.CANCELLED))
    board["notices"] = ctx.notices()
    return board


@router.post("/orders", status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_limit)
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    ctx: PortalContext = Depends(_customer),
    client: ApiClient = Depends(get_api_client),
):
    """Place an order from the checkout counts, priced from the shop's current catalog."""
    shop = await ShopService(client).get_shop(body.shop_id)
    order_id = await ctx.dispatcher.create_order(
        body.pickup_date,
        body.pickup_address.to_address(),
        body.special_instructions,
        draft=body.to_draft(shop),
    )
    return {
        "order_id": order_id,
        "redirect": ctx.redirects[-1] if ctx.redirects else None,
        "notices": ctx.notices(),
        "board": ctx.board(),
    }


# ── Shops ─────────────────────────────────────────────────────────────────────

@router.get("/shops")
async def search_shops(
    q: Optional[str] = None,
    client: ApiClient = Depends(get_api_client),
):
    shops = filter_shops(await ShopService(client).list_shops(), q)
    return [shop_out(s) for s in shops]
