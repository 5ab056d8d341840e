"""Process-wide map of user id to the single live connection handle.

A handle is the Channels ``channel_name`` of the consumer serving the
user's websocket.  Every operation takes the internal lock, so callers
on the event loop and in ``database_sync_to_async`` threads see one
consistent table.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """At most one live session per user; last registration wins."""

    def __init__(self) -> None:
        self._handles: Dict[int, str] = {}
        self._lock = threading.Lock()

    def register(self, user_id: int, handle: str) -> None:
        with self._lock:
            previous = self._handles.get(user_id)
            self._handles[user_id] = handle
        if previous is not None and previous != handle:
            # the older connection stays open; it just stops receiving fan-out
            logger.info("Session for user %s replaced (%s -> %s)", user_id, previous, handle)

    def lookup(self, user_id: int) -> Optional[str]:
        with self._lock:
            return self._handles.get(user_id)

    def unregister(self, user_id: int, handle: str) -> bool:
        """Remove the entry only if it still points at ``handle``.

        Returns True when an entry was removed.  A stale disconnect that
        arrives after a newer session registered for the same user is a
        no-op and returns False.
        """
        with self._lock:
            if self._handles.get(user_id) != handle:
                return False
            del self._handles[user_id]
            return True

    def snapshot(self) -> Dict[int, str]:
        with self._lock:
            return dict(self._handles)

    def clear(self) -> None:
        with self._lock:
            self._handles.clear()

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._handles

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)


connection_registry = ConnectionRegistry()
"""Singleton registry shared by every chat consumer in this process."""
