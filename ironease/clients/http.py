"""Marketplace backend client: JSON over HTTP with classified failures."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ironease.clients.session import SessionContext
from ironease.config import PortalConfig
from ironease.core.exceptions import (
    AuthError,
    ClientRequestError,
    NetworkError,
    ServerError,
)

logger = logging.getLogger(__name__)

_NETWORK_MESSAGE = "Network error. Please check your connection."
_DEFAULT_MESSAGE = "An error occurred"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200] or _DEFAULT_MESSAGE
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return _DEFAULT_MESSAGE


def _unwrap(body: Any) -> Any:
    """Strip the ``{success, data, message}`` envelope when the backend uses it."""
    if isinstance(body, dict) and "success" in body and "data" in body:
        return body["data"]
    return body


class ApiClient:
    """get/post/put/delete against the backend; every failure is a DispatchError.

    - no usable response (refused, reset, timeout, undecodable body) -> NetworkError
    - 401 -> AuthError, after ending the session
    - 5xx -> ServerError, other 4xx -> ClientRequestError (status kept)

    Requests are never retried here.
    """

    def __init__(
        self,
        config: PortalConfig,
        session: Optional[SessionContext] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._session = session or SessionContext()
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @property
    def session(self) -> SessionContext:
        return self._session

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=body if body is not None else {})

    async def put(self, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("PUT", path, json=body if body is not None else {})

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=self._session.auth_headers(),
            )
        except httpx.RequestError as exc:
            logger.warning("ApiClient: %s %s failed: %s", method, path, exc, extra={"path": path})
            raise NetworkError(_NETWORK_MESSAGE, details={"path": path}, cause=exc) from exc

        status = response.status_code
        if status == 401:
            logger.info("ApiClient: %s %s unauthorized, ending session", method, path)
            self._session.end()
            raise AuthError(_error_message(response), details={"path": path})
        if status >= 500:
            logger.warning("ApiClient: %s %s -> %s", method, path, status, extra={"path": path})
            raise ServerError(_error_message(response), http_status=status, details={"path": path})
        if status >= 400:
            raise ClientRequestError(_error_message(response), http_status=status, details={"path": path})

        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise ServerError(
                f"Backend sent a non-JSON response for {path}", details={"path": path}, cause=exc
            ) from exc
        if isinstance(body, dict) and body.get("success") is False:
            raise ClientRequestError(body.get("message") or _DEFAULT_MESSAGE, details={"path": path})
        return _unwrap(body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()
