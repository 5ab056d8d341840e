"""
Event names and payload helpers for the chat websocket.

Inbound frames are ``{"type": <event>, ...fields}``; outbound frames are
``{"type": <event>, "payload": {...}}``.
"""
from __future__ import annotations

from typing import Any, Optional

# client -> server
JOIN = "join"
JOIN_ALIASES = (JOIN, "user-join")
CHAT_MESSAGE = "chat-message"
TYPING = "typing"
STOP_TYPING = "stop-typing"

# server -> client
NEW_MESSAGE = "new-message"
MESSAGE_SENT = "message-sent"
MESSAGE_ERROR = "message-error"
USER_TYPING = "user-typing"
USER_STOP_TYPING = "user-stop-typing"

# channel layer message type handled by ChatConsumer.chat_deliver
DELIVER = "chat.deliver"

# websocket close codes
CLOSE_UNAUTHORIZED = 4401

# upper bound of a BigAutoField primary key
MAX_USER_ID = 2**63 - 1


def parse_user_id(value: Any) -> Optional[int]:
    """Return a positive integer user id, or None when ``value`` is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        # ASCII only: str.isdigit also accepts superscripts and other digits int() refuses
        if not (value.isascii() and value.isdigit()) or len(value) > len(str(MAX_USER_ID)):
            return None
        value = int(value)
    if isinstance(value, int):
        return value if 0 < value <= MAX_USER_ID else None
    return None


def frame(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"type": event, "payload": payload}


def user_group(user_id: int) -> str:
    """Per-user broadcast scope joined by the ``join`` event."""
    return f"user_{user_id}"
