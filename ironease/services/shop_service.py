"""ShopService: shop directory and the signed-in shop's service catalog."""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import ValidationError as RecordValidationError

from ironease.clients.http import ApiClient
from ironease.core.exceptions import ClientRequestError, ServerError, ValidationError
from ironease.orders.types import Service, Shop
from ironease.services.records import ServiceRecord, ShopRecord

logger = logging.getLogger(__name__)


def _rows(payload: Any, key: str) -> List[Any]:
    if isinstance(payload, dict):
        payload = payload.get(key, [])
    return payload if isinstance(payload, list) else []


def _validate_service(item_type: str, unit_price: float) -> None:
    missing = []
    if not (item_type or "").strip():
        missing.append("type")
    if unit_price is None or unit_price < 0:
        missing.append("price")
    if missing:
        raise ValidationError(
            "Service needs a type and a non-negative price",
            details={"fields": missing},
        )


class ShopService:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list_shops(self) -> List[Shop]:
        payload = await self._client.get("/shop")
        try:
            return [ShopRecord.model_validate(row).to_shop() for row in _rows(payload, "shops")]
        except RecordValidationError as exc:
            raise ServerError("Backend sent a malformed shop record", code="MALFORMED_RECORD", cause=exc) from exc

    async def get_shop(self, shop_id: str) -> Shop:
        """One shop with its current catalog, looked up in the directory."""
        for shop in await self.list_shops():
            if shop.id == shop_id:
                return shop
        raise ClientRequestError("Shop not found", http_status=404, details={"shop_id": shop_id})

    async def list_services(self) -> List[Service]:
        payload = await self._client.get("/shop/services")
        try:
            return [ServiceRecord.model_validate(row).to_service() for row in _rows(payload, "services")]
        except RecordValidationError as exc:
            raise ServerError("Backend sent a malformed service record", code="MALFORMED_RECORD", cause=exc) from exc

    async def add_service(
        self,
        item_type: str,
        unit_price: float,
        description: Optional[str] = None,
    ) -> Any:
        _validate_service(item_type, unit_price)
        body = Service(id="", item_type=item_type.strip(), unit_price=unit_price, description=description)
        result = await self._client.post("/shop/services", body.to_payload())
        logger.info("ShopService: added service %s", item_type)
        return result

    async def update_service(self, service: Service) -> Any:
        _validate_service(service.item_type, service.unit_price)
        return await self._client.put(f"/shop/services/{service.id}", service.to_payload())

    async def delete_service(self, service_id: str) -> Any:
        # Orders keep their own price snapshot, so deleting a service leaves history intact.
        result = await self._client.delete(f"/shop/services/{service_id}")
        logger.info("ShopService: deleted service %s", service_id)
        return result
