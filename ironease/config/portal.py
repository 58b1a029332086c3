"""
ironease.config.portal – backend endpoint and portal behaviour config.

Env vars: IRONEASE_API_URL, IRONEASE_API_TIMEOUT, IRONEASE_PICKUP_WINDOW_DAYS,
         IRONEASE_TOP_SERVICES, CORS_ORIGINS, PORTAL_RATE_LIMIT.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Tuple

from ironease.core.exceptions import ConfigurationError

_RATE_LIMIT_RE = re.compile(r"^\d+\s*/\s*(second|minute|hour|day)$")


def _validate_url(url: str) -> str:
    url = (url or "").strip().rstrip("/")
    if not (url.startswith("http://") or url.startswith("https://")):
        raise ConfigurationError(
            "IRONEASE_API_URL must start with http:// or https://",
            details={"value": url},
        )
    return url


def _validate_positive(value: float, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {value!r}")


@dataclass(frozen=True)
class PortalConfig:
    """
    Where the marketplace backend lives and how the portal core talks to it.

    All fields are validated on construction. Use load_portal_config()
    to build from environment variables.
    """

    api_url: str = "http://localhost:5000/api"
    """Base URL of the marketplace backend; paths like /shop/orders are appended."""

    timeout: float = 15.0
    """Network timeout (seconds) applied by the transport to every request."""

    pickup_window_days: int = 14
    """Number of bookable pickup days starting today."""

    top_services: int = 5
    """How many item types the dashboard ranks."""

    cors_origins: Tuple[str, ...] = field(
        default=("http://localhost:3000", "http://127.0.0.1:3000")
    )

    rate_limit: str = "60/minute"
    """slowapi limit string applied to portal endpoints."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_url", _validate_url(self.api_url))
        _validate_positive(self.timeout, "timeout")
        if not isinstance(self.pickup_window_days, int) or self.pickup_window_days < 1:
            raise ConfigurationError(
                f"pickup_window_days must be an integer >= 1, got {self.pickup_window_days!r}"
            )
        if not isinstance(self.top_services, int) or self.top_services < 1:
            raise ConfigurationError(
                f"top_services must be an integer >= 1, got {self.top_services!r}"
            )
        if not _RATE_LIMIT_RE.match(self.rate_limit.strip()):
            raise ConfigurationError(
                f"rate_limit must look like '60/minute', got {self.rate_limit!r}"
            )

    @classmethod
    def from_env(cls, **overrides: object) -> PortalConfig:
        """
        Build config from environment variables.

        Env:
            IRONEASE_API_URL             – default http://localhost:5000/api
            IRONEASE_API_TIMEOUT         – default 15
            IRONEASE_PICKUP_WINDOW_DAYS  – default 14
            IRONEASE_TOP_SERVICES        – default 5
            CORS_ORIGINS                 – comma separated
            PORTAL_RATE_LIMIT            – default 60/minute

        Overrides (keyword args) take precedence over env.
        """
        def _get(attr: str, var: str, default: str) -> str:
            v = overrides.get(attr)
            if v is not None:
                return str(v)
            return os.environ.get(var, default)

        try:
            timeout = float(_get("timeout", "IRONEASE_API_TIMEOUT", "15"))
            window = int(_get("pickup_window_days", "IRONEASE_PICKUP_WINDOW_DAYS", "14"))
            top = int(_get("top_services", "IRONEASE_TOP_SERVICES", "5"))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric portal setting: {exc}", cause=exc) from exc

        raw_origins = overrides.get("cors_origins")
        if raw_origins is None:
            raw_origins = os.environ.get(
                "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
            )
        if isinstance(raw_origins, str):
            origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip())
        else:
            origins = tuple(raw_origins)  # type: ignore[arg-type]

        return cls(
            api_url=_get("api_url", "IRONEASE_API_URL", "http://localhost:5000/api"),
            timeout=timeout,
            pickup_window_days=window,
            top_services=top,
            cors_origins=origins,
            rate_limit=_get("rate_limit", "PORTAL_RATE_LIMIT", "60/minute"),
        )


def load_portal_config(**overrides: object) -> PortalConfig:
    """
    Load and validate portal config from environment (with optional overrides).

    Raises ConfigurationError on invalid env/values.
    """
    return PortalConfig.from_env(**overrides)
