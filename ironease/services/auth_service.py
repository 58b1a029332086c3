"""AuthService: login, registration and logout, driving the SessionContext."""
from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError as RecordValidationError

from ironease.clients.http import ApiClient
from ironease.core.exceptions import DispatchError, ServerError, ValidationError
from ironease.orders.types import UserProfile
from ironease.services.records import AuthRecord

logger = logging.getLogger(__name__)

_CUSTOMER_FIELDS = ("name", "email", "phone", "password")
_SHOP_FIELDS = ("shopName", "ownerName", "email", "phone", "address", "zipCode", "password")


def _require(data: Dict[str, Any], fields: tuple) -> None:
    missing = [f for f in fields if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError("Please fill in all required fields", details={"missing": missing})


class AuthService:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    @property
    def session(self):
        return self._client.session

    async def login(self, email: str, password: str) -> UserProfile:
        _require({"email": email, "password": password}, ("email", "password"))
        return await self._authenticate("/auth/login", {"email": email, "password": password})

    async def register_customer(self, data: Dict[str, Any]) -> UserProfile:
        _require(data, _CUSTOMER_FIELDS)
        return await self._authenticate("/auth/register/customer", data)

    async def register_shop(self, data: Dict[str, Any]) -> UserProfile:
        _require(data, _SHOP_FIELDS)
        body = dict(data)
        confirm = body.pop("confirmPassword", None)
        if confirm is not None and confirm != body["password"]:
            raise ValidationError("Passwords do not match", details={"field": "confirmPassword"})
        return await self._authenticate("/auth/register/shop", body)

    async def logout(self) -> None:
        """Tell the backend, then end the local session whatever it answered."""
        try:
            if self.session.is_authenticated:
                await self._client.post("/auth/logout", {})
        except DispatchError as exc:
            logger.warning("AuthService: logout request failed: %s", exc)
        finally:
            self.session.end()

    async def _authenticate(self, path: str, body: Dict[str, Any]) -> UserProfile:
        payload = await self._client.post(path, body)
        try:
            record = AuthRecord.model_validate(payload)
        except RecordValidationError as exc:
            raise ServerError("Backend sent a malformed login response", code="MALFORMED_RECORD", cause=exc) from exc
        user = record.user.to_profile()
        self.session.begin(record.token, user)
        return user
