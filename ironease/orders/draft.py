"""New-order draft: item counts against one shop's catalog, with price snapshots."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ironease.orders.types import Address, OrderItem, Shop


@dataclass
class DraftLine:
    service_id: str
    item_type: str
    unit_price: float
    count: int = 0


@dataclass
class OrderDraft:
    """Counts picked by the customer before scheduling a pickup.

    Unit prices are copied from the catalog when the draft is built, so a
    later catalog edit does not change what the customer agreed to pay.
    """

    shop_id: str
    shop_name: str
    lines: List[DraftLine] = field(default_factory=list)

    @classmethod
    def for_shop(cls, shop: Shop) -> "OrderDraft":
        return cls(
            shop_id=shop.id,
            shop_name=shop.name,
            lines=[DraftLine(s.id, s.item_type, s.unit_price) for s in shop.services],
        )

    def _line(self, item_type: str) -> DraftLine:
        for line in self.lines:
            if line.item_type == item_type:
                return line
        raise KeyError(f"{self.shop_name} does not offer {item_type!r}")

    def increment(self, item_type: str, by: int = 1) -> int:
        line = self._line(item_type)
        line.count = max(0, line.count + by)
        return line.count

    def decrement(self, item_type: str, by: int = 1) -> int:
        line = self._line(item_type)
        line.count = max(0, line.count - by)
        return line.count

    def set_count(self, item_type: str, count: int) -> int:
        line = self._line(item_type)
        line.count = max(0, int(count))
        return line.count

    @property
    def total_items(self) -> int:
        return sum(line.count for line in self.lines if line.count > 0)

    @property
    def total_amount(self) -> float:
        return sum(line.count * line.unit_price for line in self.lines if line.count > 0)

    def selected_items(self) -> List[OrderItem]:
        return [
            OrderItem(line.item_type, line.count, line.unit_price)
            for line in self.lines
            if line.count > 0
        ]

    def to_payload(
        self,
        pickup_date: date,
        address: Address,
        special_instructions: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Body for POST /orders."""
        payload: Dict[str, Any] = {
            "shop_id": self.shop_id,
            "items": [
                {"type": i.item_type, "count": i.count, "price": i.unit_price}
                for i in self.selected_items()
            ],
            "pickup_date": pickup_date.isoformat(),
            "pickup_address": address.to_dict(),
            "total_amount": self.total_amount,
        }
        if special_instructions and special_instructions.strip():
            payload["special_instructions"] = special_instructions.strip()
        return payload


def available_pickup_dates(today: Optional[date] = None, days: int = 14) -> List[date]:
    """Bookable pickup days: today and the following ``days - 1`` days."""
    today = today or date.today()
    return [today + timedelta(days=i) for i in range(days)]
