"""OrderStore: the current actor's orders, refreshed by re-fetching."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ironease.orders.search import DateLike, narrow
from ironease.orders.tabs import counts_by_bucket
from ironease.orders.types import Bucket, Order

logger = logging.getLogger(__name__)

OrderFetcher = Callable[[], Awaitable[Sequence[Order]]]


class OrderStore:
    """In-memory order list with last-write-wins refreshes.

    Every ``refresh()`` takes a sequence token. When a fetch finishes after a
    newer one was started, its result is dropped, so a slow early response can
    never overwrite a later one. Bucket counts are recomputed on every
    replacement from the full list.
    """

    def __init__(self, fetch: Optional[OrderFetcher] = None, orders: Sequence[Order] = ()) -> None:
        self._fetch = fetch
        self._orders: List[Order] = list(orders)
        self._counts: Dict[Bucket, int] = counts_by_bucket(self._orders)
        self._issued = 0
        self._in_flight = 0

    @property
    def orders(self) -> List[Order]:
        return list(self._orders)

    @property
    def counts(self) -> Dict[Bucket, int]:
        return dict(self._counts)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def get(self, order_id: str) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def view(
        self,
        bucket: Optional[Bucket] = None,
        query: Optional[str] = None,
        on: DateLike = None,
    ) -> List[Order]:
        return narrow(self._orders, bucket, query, on)

    async def refresh(self) -> bool:
        """Fetch and replace the order list. Returns False if the result was superseded."""
        if self._fetch is None:
            raise RuntimeError("OrderStore has no fetcher")
        self._issued += 1
        token = self._issued
        self._in_flight += 1
        try:
            orders = await self._fetch()
        finally:
            self._in_flight -= 1
        if token != self._issued:
            logger.debug("OrderStore: dropped fetch #%d, #%d is newer", token, self._issued)
            return False
        self._replace(orders)
        return True

    def _replace(self, orders: Sequence[Order]) -> None:
        self._orders = list(orders)
        self._counts = counts_by_bucket(self._orders)
        logger.debug("OrderStore: %d orders loaded", len(self._orders))
