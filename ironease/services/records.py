"""Pydantic v2 schemas for backend records, and their conversion to domain values.

Backend variants disagree on key casing (``customer_name`` vs ``customerName``)
and id keys (``id`` vs ``_id``); the aliases below accept both. Status tags
are not defaulted: an unknown tag raises UnknownStatusError.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, Any, List, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field

from ironease.orders.status_machine import parse_status
from ironease.orders.types import (
    Address,
    Order,
    OrderItem,
    Role,
    Service,
    Shop,
    UserProfile,
)

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _as_str(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _as_number(value: Any) -> Any:
    """Accept 250, "250" and "₹250" alike."""
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.replace(",", ""))
        return float(match.group()) if match else 0.0
    if value is None:
        return 0.0
    return value


def _as_role(value: Any) -> Any:
    if isinstance(value, str) and value.replace("_", "").lower() in ("shop", "shopowner"):
        return Role.SHOP_OWNER
    return value


StrId = Annotated[str, BeforeValidator(_as_str)]
Amount = Annotated[float, BeforeValidator(_as_number)]
RoleTag = Annotated[Role, BeforeValidator(_as_role)]


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    # Mongo-style exports wrap timestamps as {"$date": "..."}
    if isinstance(value, dict):
        value = value.get("$date")
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


class _Record(BaseModel):
    model_config = {"extra": "ignore", "populate_by_name": True}


class AddressRecord(_Record):
    street: str = ""
    landmark: Optional[str] = None
    city: str = ""
    state: str = ""
    pincode: StrId = ""

    def to_address(self) -> Address:
        return Address(
            street=self.street or "",
            city=self.city or "",
            state=self.state or "",
            pincode=self.pincode or "",
            landmark=self.landmark or None,
        )


class ItemRecord(_Record):
    type: str = Field(validation_alias=AliasChoices("type", "item_type", "itemType"))
    count: int = Field(default=0, ge=0)
    price: Amount = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("price", "unit_price", "unitPrice", "pricePerItem", "price_per_item"),
    )

    def to_item(self) -> OrderItem:
        return OrderItem(item_type=self.type, count=self.count, unit_price=self.price)


class OrderRecord(_Record):
    id: StrId = Field(validation_alias=AliasChoices("id", "_id", "order_id", "orderId"))
    status: str
    customer_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("customer_name", "customerName"))
    shop_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("shop_name", "shopName"))
    items: List[ItemRecord] = Field(default_factory=list)
    pickup_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("pickup_date", "pickupDate"))
    total_amount: Amount = Field(default=0.0, ge=0, validation_alias=AliasChoices("total_amount", "totalAmount"))
    pickup_address: Optional[AddressRecord] = Field(
        default=None, validation_alias=AliasChoices("pickup_address", "pickupAddress")
    )
    special_instructions: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("special_instructions", "specialInstructions")
    )
    created_at: Any = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))

    def to_order(self, role: Role) -> Order:
        counterpart = self.shop_name if role is Role.CUSTOMER else self.customer_name
        return Order(
            id=self.id,
            status=parse_status(self.status),
            counterpart_name=counterpart or "",
            items=tuple(item.to_item() for item in self.items),
            pickup_date=_parse_date(self.pickup_date),
            total_amount=self.total_amount,
            pickup_address=self.pickup_address.to_address() if self.pickup_address else None,
            special_instructions=self.special_instructions or None,
            created_at=_parse_datetime(self.created_at),
        )


class ServiceRecord(_Record):
    id: StrId = Field(validation_alias=AliasChoices("id", "_id", "service_id"))
    type: str = Field(validation_alias=AliasChoices("type", "item_type", "itemType"))
    price: Amount = Field(default=0.0, ge=0, validation_alias=AliasChoices("price", "unit_price", "unitPrice"))
    description: Optional[str] = None

    def to_service(self) -> Service:
        return Service(
            id=self.id,
            item_type=self.type,
            unit_price=self.price,
            description=self.description or None,
        )


class ShopRecord(_Record):
    id: StrId = Field(validation_alias=AliasChoices("id", "_id", "shop_id"))
    name: str = Field(validation_alias=AliasChoices("name", "shop_name", "shopName"))
    rating: float = 0.0
    distance: StrId = ""
    address: Optional[str] = None
    total_orders: int = Field(default=0, validation_alias=AliasChoices("total_orders", "totalOrders"))
    delivery_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("delivery_time", "deliveryTime"))
    services: List[ServiceRecord] = Field(default_factory=list)

    def to_shop(self) -> Shop:
        return Shop(
            id=self.id,
            name=self.name,
            rating=self.rating,
            distance=self.distance or "",
            services=tuple(s.to_service() for s in self.services),
            address=self.address,
            total_orders=self.total_orders,
            delivery_time=self.delivery_time,
        )


class ShopRef(_Record):
    shop_id: StrId
    shop_name: str = ""


class UserRecord(_Record):
    id: StrId = Field(validation_alias=AliasChoices("id", "_id", "user_id"))
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    user_type: RoleTag = Field(validation_alias=AliasChoices("user_type", "userType", "role"))
    shop: Optional[ShopRef] = None

    def to_profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.user_type,
            phone=self.phone,
            shop_id=self.shop.shop_id if self.shop else None,
            shop_name=self.shop.shop_name if self.shop else None,
        )


class AuthRecord(_Record):
    token: str
    user: UserRecord
