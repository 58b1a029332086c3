"""
Root of the portal error hierarchy.

Each error type declares a default code and HTTP status; instances may
override either. The API layer renders errors with to_response(), the logs
get the fuller to_dict(). New one-off types come from exception_factory().
"""
from __future__ import annotations

import traceback
from typing import Any, Dict, Optional, Type


class ProjectError(Exception):
    """
    Base exception for all portal errors.

    Attributes:
        message: Text safe to show to the signed-in user.
        code: Stable slug clients switch on (class default_code unless overridden).
        http_status: Status the portal API answers with.
        details: Structured context, e.g. {"field": "pickup_date"}.
        cause: Underlying exception, kept for logs only.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or type(self).default_code
        self.http_status = http_status or type(self).default_http_status
        self.details: Dict[str, Any] = dict(details or {})
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}, http_status={self.http_status})"

    def __str__(self) -> str:
        return self.message

    @property
    def retryable(self) -> bool:
        """Whether re-triggering the same action by hand may succeed."""
        return False

    def to_response(self) -> Dict[str, Any]:
        """JSON body for API error responses; never includes the cause."""
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        if self.retryable:
            body["retryable"] = True
        return body

    def to_dict(self) -> Dict[str, Any]:
        """Full serialization for structured logs."""
        out = dict(self.to_response(), http_status=self.http_status)
        if self.cause is not None:
            out["cause"] = repr(self.cause)
            out["cause_traceback"] = "".join(
                traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__)
            )
        return out


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[ProjectError] = ProjectError,
) -> Type[ProjectError]:
    """
    Build an error subclass without a class statement.

    Example:
        ClientRequestError = exception_factory(
            "ClientRequestError", code="CLIENT_REQUEST_ERROR", http_status=400, base=DispatchError
        )
        raise ClientRequestError("Shop is closed", http_status=422)
    """
    attrs = {
        "default_code": code or name.upper(),
        "default_http_status": http_status,
        "__doc__": f"{name} (code {code or name.upper()}).",
    }
    return type(name, (base,), attrs)
