"""Identity context attached to an admitted websocket connection."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Verified identity produced once by the handshake; read-only afterwards."""

    user_id: int
    display_name: str
