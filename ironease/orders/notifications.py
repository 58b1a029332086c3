"""Notification sinks: where user-facing success/error messages go."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ironease.core.exceptions import ProjectError
from ironease.orders.types import Notice

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    @abstractmethod
    def notify(self, notice: Notice) -> None:
        ...

    def success(self, message: str) -> None:
        self.notify(Notice(kind="success", message=message))

    def info(self, message: str) -> None:
        self.notify(Notice(kind="info", message=message))

    def error(self, exc: ProjectError) -> None:
        self.notify(
            Notice(kind="error", message=exc.message, code=exc.code, details=dict(exc.details))
        )


class LoggingNotifier(BaseNotifier):
    """Writes notices to the log; the default when no UI is attached."""

    def notify(self, notice: Notice) -> None:
        level = logging.WARNING if notice.kind == "error" else logging.INFO
        logger.log(level, "Notice [%s]: %s", notice.kind, notice.message)


class CollectingNotifier(BaseNotifier):
    """Keeps notices in memory so an API response can carry them."""

    def __init__(self, forward: Optional[BaseNotifier] = None) -> None:
        self.notices: List[Notice] = []
        self._forward = forward

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self._forward is not None:
            self._forward.notify(notice)
