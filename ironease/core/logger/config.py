"""
Logger configuration. Build explicitly or from env.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for the portal logger.

    Use LoggerConfig.from_env() for env-based config, or build explicitly.
    """

    # Level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    level: str = "INFO"
    # Log directory for rotating file (if None, file handler is skipped)
    log_dir: Optional[str] = None
    # Basename for log file (e.g. "portal" -> portal.log)
    log_file_basename: str = "portal"
    max_bytes: int = 5 * 1024 * 1024  # 5 MB
    backup_count: int = 5
    # Root logger name (handlers attached here; children inherit)
    root_name: str = "ironease"
    console: bool = True

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """Build config from LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES,
        LOG_BACKUP_COUNT and LOG_CONSOLE."""
        return cls(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR") or None,
            log_file_basename=os.environ.get("LOG_FILE_BASENAME", "portal"),
            max_bytes=int(os.environ.get("LOG_MAX_BYTES", "5242880")),
            backup_count=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
            console=os.environ.get("LOG_CONSOLE", "true").lower() in _TRUTHY,
        )

    def with_overrides(self, **changes: object) -> "LoggerConfig":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
