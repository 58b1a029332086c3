"""Core data structures for the order lifecycle."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class OrderStatus(str, Enum):
    """Lifecycle positions, in lifecycle order. Values are the backend wire tags."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    PICKED_UP = "pickedUp"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Role(str, Enum):
    """Which portal the current actor uses."""
    CUSTOMER = "customer"
    SHOP_OWNER = "shopOwner"


class Bucket(str, Enum):
    """Mutually exclusive tabs an order list is split into."""
    NEW = "new"
    PROCESSING = "processing"
    READY = "ready"
    HISTORY = "history"


class Timeframe(str, Enum):
    """Dashboard statistics window."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {"week": 7, "month": 30, "year": 365}[self.value]


_REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "pincode")


@dataclass(frozen=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    landmark: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Required fields that are empty or whitespace only."""
        return [
            name for name in _REQUIRED_ADDRESS_FIELDS
            if not (getattr(self, name) or "").strip()
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
        }
        if self.landmark:
            out["landmark"] = self.landmark
        return out


@dataclass(frozen=True)
class OrderItem:
    """One line of an order. ``unit_price`` is the snapshot taken at creation."""
    item_type: str
    count: int
    unit_price: float = 0.0

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"item count must be >= 0, got {self.count!r} for {self.item_type!r}")
        if self.unit_price < 0:
            raise ValueError(f"unit price must be >= 0, got {self.unit_price!r} for {self.item_type!r}")

    @property
    def subtotal(self) -> float:
        return self.count * self.unit_price


@dataclass(frozen=True)
class Order:
    """An order as seen by one actor.

    ``counterpart_name`` is the shop name in the customer portal and the
    customer name in the shop portal. Orders are values: a status change
    yields a new Order via :meth:`with_status`.
    """

    id: str
    status: OrderStatus
    counterpart_name: str = ""
    items: Tuple[OrderItem, ...] = ()
    pickup_date: Optional[date] = None
    total_amount: float = 0.0
    pickup_address: Optional[Address] = None
    special_instructions: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def total_items(self) -> int:
        return sum(item.count for item in self.items)

    def with_status(self, status: OrderStatus) -> "Order":
        return replace(self, status=status)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "id": self.id,
            "status": self.status.value,
            "counterpart_name": self.counterpart_name,
            "items": [
                {"type": i.item_type, "count": i.count, "price": i.unit_price}
                for i in self.items
            ],
            "total_items": self.total_items,
            "pickup_date": self.pickup_date.isoformat() if self.pickup_date else None,
            "total_amount": self.total_amount,
            "pickup_address": self.pickup_address.to_dict() if self.pickup_address else None,
            "special_instructions": self.special_instructions,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Service:
    """A shop catalog entry."""
    id: str
    item_type: str
    unit_price: float
    description: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Body for POST/PUT /shop/services."""
        return {
            "type": self.item_type,
            "price": self.unit_price,
            "description": self.description or "",
        }


@dataclass(frozen=True)
class Shop:
    id: str
    name: str
    rating: float = 0.0
    distance: str = ""
    services: Tuple[Service, ...] = ()
    address: Optional[str] = None
    total_orders: int = 0
    delivery_time: Optional[str] = None


@dataclass(frozen=True)
class UserProfile:
    """The authenticated user as returned by /auth/login."""
    id: str
    name: str
    email: str
    role: Role
    phone: Optional[str] = None
    shop_id: Optional[str] = None
    shop_name: Optional[str] = None


@dataclass(frozen=True)
class Notice:
    """A user-facing message handed to the notification sink."""
    kind: str  # "success" | "error" | "info"
    message: str
    code: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.code:
            out["code"] = self.code
        if self.details:
            out["details"] = self.details
        return out
