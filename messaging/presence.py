"""
Presence transitions driven by registry membership.

``Offline -> Online`` when a session registers, ``Online -> Offline``
when it is effectively deregistered.  The persisted write runs as a
background task with a bounded timeout: connection setup and teardown
never wait for it, and a failed write is logged and dropped.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional, Set

from django.conf import settings
from django.utils import timezone

from .services import ChatStore, chat_store

logger = logging.getLogger(__name__)


class PresenceManager:
    def __init__(self, store: Optional[ChatStore] = None, timeout: Optional[float] = None) -> None:
        self.store = store or chat_store
        self._timeout = timeout
        self._pending: Set[asyncio.Task] = set()

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return getattr(settings, "CHAT_PERSISTENCE_TIMEOUT", 3.0)

    def went_online(self, user_id: int) -> asyncio.Task:
        return self._spawn(user_id, True)

    def went_offline(self, user_id: int) -> asyncio.Task:
        return self._spawn(user_id, False)

    def _spawn(self, user_id: int, online: bool) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(
            self._persist(user_id, online, timezone.now())
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _persist(self, user_id: int, online: bool, when: datetime) -> None:
        state = "online" if online else "offline"
        try:
            await asyncio.wait_for(
                self.store.set_presence(user_id, online, when), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Presence update (%s) for user %s timed out after %.1fs", state, user_id, self.timeout
            )
        except Exception:
            logger.exception("Presence update (%s) for user %s failed", state, user_id)

    async def wait_idle(self) -> None:
        """Wait for every outstanding presence write to settle.

        Used by tests before asserting on stored presence; nothing on the
        shutdown path awaits it.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def reset(self) -> None:
        """Forget outstanding writes (event loop shut down underneath them)."""
        self._pending.clear()


presence_manager = PresenceManager()
