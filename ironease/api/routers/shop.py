"""Shop portal router: order board, status updates, dashboard and service catalog."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ironease.api.dependencies import (
    PortalContext,
    get_api_client,
    get_config,
    limiter,
    mutation_limit,
    portal_context,
)
from ironease.api.schemas.orders import ServiceIn, StatusUpdateRequest, service_out
from ironease.clients.http import ApiClient
from ironease.config import PortalConfig
from ironease.orders.stats import dashboard_stats
from ironease.orders.status_machine import parse_status
from ironease.orders.tabs import bucket_of
from ironease.orders.types import Bucket, Role, Service, Timeframe
from ironease.services.shop_service import ShopService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/shop", tags=["shop"])

_shop = portal_context(Role.SHOP_OWNER)


# ── Orders ────────────────────────────────────────────────────────────────────

@router.get("/orders")
async def shop_orders(
    tab: Optional[Bucket] = None,
    q: Optional[str] = None,
    on: Optional[str] = Query(default=None, alias="date"),
    ctx: PortalContext = Depends(_shop),
):
    await ctx.store.refresh()
    return ctx.board(tab, q, on)


@router.put("/orders/{order_id}/status")
@limiter.limit(mutation_limit)
async def update_order_status(
    request: Request,
    order_id: str,
    body: StatusUpdateRequest,
    ctx: PortalContext = Depends(_shop),
):
    """Move one order to the requested status and return the refreshed board."""
    await ctx.store.refresh()
    order = ctx.require(order_id)
    await ctx.dispatcher.request_transition(order, body.status)
    board = ctx.board(bucket_of(parse_status(body.status)))
    board["notices"] = ctx.notices()
    return board


@router.get("/dashboard")
async def dashboard(
    timeframe: Timeframe = Timeframe.WEEK,
    ctx: PortalContext = Depends(_shop),
    config: PortalConfig = Depends(get_config),
):
    await ctx.store.refresh()
    return dashboard_stats(ctx.store.orders, timeframe, top_n=config.top_services).to_dict()


# ── Services ──────────────────────────────────────────────────────────────────

@router.get("/services")
async def list_services(client: ApiClient = Depends(get_api_client)):
    return [service_out(s) for s in await ShopService(client).list_services()]


@router.post("/services", status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_limit)
async def add_service(
    request: Request,
    body: ServiceIn,
    client: ApiClient = Depends(get_api_client),
):
    svc = ShopService(client)
    await svc.add_service(body.type, body.price, body.description)
    return [service_out(s) for s in await svc.list_services()]


@router.put("/services/{service_id}")
@limiter.limit(mutation_limit)
async def update_service(
    request: Request,
    service_id: str,
    body: ServiceIn,
    client: ApiClient = Depends(get_api_client),
):
    svc = ShopService(client)
    await svc.update_service(Service(service_id, body.type, body.price, body.description))
    return [service_out(s) for s in await svc.list_services()]


@router.delete("/services/{service_id}")
@limiter.limit(mutation_limit)
async def delete_service(
    request: Request,
    service_id: str,
    client: ApiClient = Depends(get_api_client),
):
    svc = ShopService(client)
    await svc.delete_service(service_id)
    logger.info("Shop API: service %s removed", service_id)
    return [service_out(s) for s in await svc.list_services()]
