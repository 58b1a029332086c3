"""Explicit session context: token, user and the session-scoped order draft."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from ironease.orders.draft import OrderDraft
from ironease.orders.types import Role, UserProfile

logger = logging.getLogger(__name__)


class SessionContext:
    """Who is signed in, passed explicitly to the transport and services.

    ``begin()`` starts a session after login/registration, ``end()`` tears it
    down (logout, or a 401 reported by the transport). Listeners registered
    with ``on_end`` run once per teardown.
    """

    def __init__(self, token: Optional[str] = None, user: Optional[UserProfile] = None) -> None:
        self._token = token
        self._user = user
        self.draft: Optional[OrderDraft] = None
        self._end_listeners: List[Callable[[], None]] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    @property
    def role(self) -> Optional[Role]:
        return self._user.role if self._user else None

    def auth_headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def begin(self, token: str, user: Optional[UserProfile] = None) -> None:
        if not token:
            raise ValueError("session token must be non-empty")
        self._token = token
        self._user = user
        self.draft = None
        logger.info("Session: started for %s", user.email if user else "anonymous user")

    def end(self) -> None:
        was_active = self.is_authenticated
        self._token = None
        self._user = None
        self.draft = None
        if not was_active:
            return
        logger.info("Session: ended")
        for listener in list(self._end_listeners):
            listener()

    def on_end(self, listener: Callable[[], None]) -> None:
        self._end_listeners.append(listener)
