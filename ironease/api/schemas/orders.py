"""Pydantic v2 schemas for the portal order and catalog endpoints."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ironease.core.exceptions import ValidationError
from ironease.orders.draft import OrderDraft
from ironease.orders.types import Address, Service, Shop


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=32)


class AddressIn(BaseModel):
    street: str = ""
    landmark: Optional[str] = None
    city: str = ""
    state: str = ""
    pincode: str = ""

    def to_address(self) -> Address:
        return Address(
            street=self.street,
            city=self.city,
            state=self.state,
            pincode=self.pincode,
            landmark=self.landmark or None,
        )


class ItemIn(BaseModel):
    type: str = Field(..., min_length=1)
    count: int = Field(default=0, ge=0)


class CreateOrderRequest(BaseModel):
    shop_id: str = Field(..., min_length=1)
    items: List[ItemIn] = Field(default_factory=list)
    pickup_date: Optional[date] = None
    pickup_address: AddressIn = Field(default_factory=AddressIn)
    special_instructions: Optional[str] = Field(default=None, max_length=1000)

    def to_draft(self, shop: Shop) -> OrderDraft:
        """Counts from the request, unit prices from ``shop``'s catalog."""
        draft = OrderDraft.for_shop(shop)
        for item in self.items:
            try:
                draft.increment(item.type, item.count)
            except KeyError as exc:
                raise ValidationError(
                    f"{shop.name} does not offer {item.type}",
                    details={"field": "items", "type": item.type},
                ) from exc
        return draft


class ServiceIn(BaseModel):
    type: str = Field(..., min_length=1, max_length=128)
    price: float = Field(..., ge=0)
    description: Optional[str] = Field(default=None, max_length=500)


def service_out(service: Service) -> Dict[str, Any]:
    return dict(service.to_payload(), id=service.id)


def shop_out(shop: Shop) -> Dict[str, Any]:
    return {
        "id": shop.id,
        "name": shop.name,
        "rating": shop.rating,
        "distance": shop.distance,
        "services": [service_out(s) for s in shop.services],
        "address": shop.address,
        "total_orders": shop.total_orders,
        "delivery_time": shop.delivery_time,
    }
