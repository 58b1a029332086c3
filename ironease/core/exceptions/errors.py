"""
Built-in exception types. Add new ones here or via exception_factory().

Everything the action dispatcher may surface to the user derives from
DispatchError; UnknownStatusError and ConfigurationError are raised by the
pure core and the startup path respectively and are never notified.
"""
from __future__ import annotations

from ironease.core.exceptions.base import ProjectError, exception_factory


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class UnknownStatusError(ProjectError):
    """An order carries a status string outside the lifecycle enumeration."""

    default_code = "UNKNOWN_STATUS"
    default_http_status = 502


class DispatchError(ProjectError):
    """Base for every failure the action dispatcher reports to the user."""

    default_code = "DISPATCH_ERROR"
    default_http_status = 500


class InvalidTransitionError(DispatchError):
    """Requested status change is not in the legal-transition table."""

    default_code = "INVALID_TRANSITION"
    default_http_status = 409


class ValidationError(DispatchError):
    """Required fields missing or malformed; caught before dispatch."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class DuplicateSubmissionError(DispatchError):
    """Same action on the same order is already in flight."""

    default_code = "DUPLICATE_SUBMISSION"
    default_http_status = 409


class NetworkError(DispatchError):
    """Transport failure: no response received (refused, reset, timed out)."""

    default_code = "NETWORK_ERROR"
    default_http_status = 503

    @property
    def retryable(self) -> bool:
        return True


class AuthError(DispatchError):
    """Backend rejected the session (401)."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class ServerError(DispatchError):
    """Backend answered with a 5xx status."""

    default_code = "SERVER_ERROR"
    default_http_status = 502

    @property
    def retryable(self) -> bool:
        return True


# Any other 4xx answer; the backend's status is passed through as http_status.
ClientRequestError = exception_factory(
    "ClientRequestError",
    code="CLIENT_REQUEST_ERROR",
    http_status=400,
    base=DispatchError,
)
