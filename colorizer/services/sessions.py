from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from colorizer.config import get_settings

from .workflow import ColorizationController, Colorize

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


class SessionStore:
    """Live colorization sessions of this process, keyed by session id.

    Sessions untouched for longer than *idle_ttl* seconds are closed the next
    time the store is used, which releases their preview. A session that is
    still loading is never evicted.
    """

    def __init__(
        self,
        colorize: Colorize | None = None,
        *,
        idle_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._colorize = colorize
        self._idle_ttl = idle_ttl
        self._clock = clock
        self._sessions: dict[str, ColorizationController] = {}
        self._last_seen: dict[str, float] = {}

    def create(self) -> tuple[str, ColorizationController]:
        self.evict_idle()
        session_id = uuid.uuid4().hex
        controller = ColorizationController(self._colorize)
        self._sessions[session_id] = controller
        self._last_seen[session_id] = self._clock()
        logger.debug("Created session %s", session_id)
        return session_id, controller

    def get(self, session_id: str) -> ColorizationController:
        self.evict_idle()
        try:
            controller = self._sessions[session_id]
        except KeyError as exc:
            raise SessionNotFound(session_id) from exc
        self._last_seen[session_id] = self._clock()
        return controller

    def delete(self, session_id: str) -> None:
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            raise SessionNotFound(session_id)
        self._last_seen.pop(session_id, None)
        controller.close()
        logger.debug("Closed session %s", session_id)

    def evict_idle(self) -> int:
        """Close sessions idle for longer than the TTL; returns how many."""

        if self._idle_ttl is None:
            return 0
        cutoff = self._clock() - self._idle_ttl
        expired = [
            session_id
            for session_id, seen in self._last_seen.items()
            if seen < cutoff and not self._sessions[session_id].session.is_loading
        ]
        for session_id in expired:
            self.delete(session_id)
        if expired:
            logger.info("Evicted %d idle session(s)", len(expired))
        return len(expired)

    def close_all(self) -> None:
        self._last_seen.clear()
        while self._sessions:
            _, controller = self._sessions.popitem()
            controller.close()

    def __len__(self) -> int:
        return len(self._sessions)


# Singleton instance
session_store = SessionStore(idle_ttl=get_settings().session_idle_ttl)
