"""Pydantic v2 schemas for the portal auth endpoints."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ironease.orders.types import UserProfile


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegistrationRequest(BaseModel):
    """Registration form; field names follow the backend's camelCase."""

    model_config = ConfigDict(extra="allow")

    email: str = ""
    phone: str = ""
    password: str = ""
    name: Optional[str] = None
    shopName: Optional[str] = None
    ownerName: Optional[str] = None
    address: Optional[str] = None
    zipCode: Optional[str] = None
    confirmPassword: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def user_out(user: UserProfile) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "phone": user.phone,
        "shop_id": user.shop_id,
        "shop_name": user.shop_name,
    }
