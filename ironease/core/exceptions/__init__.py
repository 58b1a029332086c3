"""
Portal exception system.

Usage:
    from ironease.core.exceptions import ProjectError, ValidationError, exception_factory

    # Built-in types
    raise ValidationError("Pickup address is incomplete", details={"missing": ["city"]})

    # Add new type on demand
    PaymentError = exception_factory("PaymentError", code="PAYMENT_ERROR", http_status=402)
    raise PaymentError("Card declined", cause=original_error)
"""
from ironease.core.exceptions.base import ProjectError, exception_factory
from ironease.core.exceptions.errors import (
    AuthError,
    ClientRequestError,
    ConfigurationError,
    DispatchError,
    DuplicateSubmissionError,
    InvalidTransitionError,
    NetworkError,
    ServerError,
    UnknownStatusError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ConfigurationError",
    "UnknownStatusError",
    "DispatchError",
    "InvalidTransitionError",
    "ValidationError",
    "DuplicateSubmissionError",
    "NetworkError",
    "AuthError",
    "ServerError",
    "ClientRequestError",
]
