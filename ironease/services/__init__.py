"""Service layer: Order, Shop and Auth services over the marketplace backend."""
from ironease.services.auth_service import AuthService
from ironease.services.order_service import OrderService
from ironease.services.shop_service import ShopService

__all__ = [
    "OrderService",
    "ShopService",
    "AuthService",
]
