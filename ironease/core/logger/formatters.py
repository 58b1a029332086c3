"""
Formatters: JSON for file, plain for console.
"""
from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

# Attributes callers attach through ``extra=`` that are worth keeping in the JSON line.
CONTEXT_KEYS = ("order_id", "role", "status", "action", "path", "error")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with order/role context lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": _utc_iso(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                log_dict[key] = value
        if record.exc_info:
            log_dict["exception"] = "".join(
                traceback.format_exception(*record.exc_info)
            ).strip()
        return json.dumps(log_dict, default=str, ensure_ascii=False)


def _utc_iso(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat()


class PlainConsoleFormatter(logging.Formatter):
    """Human-readable format for console."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
    ) -> None:
        if fmt is None:
            fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if datefmt is None:
            datefmt = "%Y-%m-%d %H:%M:%S"
        super().__init__(fmt=fmt, datefmt=datefmt)
