"""
Message dispatch and typing-signal relay.

``MessageDispatcher.dispatch`` validates a chat-message event, persists
it, and only then fans it out to the recipient's live session.  The
caller acknowledges the sender with the returned message whether or not
the recipient was online.

``SignalRelay`` forwards typing indicators best-effort: nothing is
stored, and a missing recipient or a full channel drops the signal.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from channels.exceptions import ChannelFull
from django.conf import settings
from django.db import DatabaseError

from . import protocol
from .exceptions import PersistenceError, ValidationError
from .registry import ConnectionRegistry, connection_registry
from .services import ChatStore, chat_store
from .session import SessionContext

logger = logging.getLogger(__name__)


async def deliver(channel_layer, handle: str, event: str, payload: dict[str, Any]) -> bool:
    """Hand one outbound frame to the consumer behind ``handle``."""
    try:
        await channel_layer.send(
            handle, {"type": protocol.DELIVER, "event": event, "payload": payload}
        )
    except ChannelFull:
        logger.warning("Channel %s full; dropped %s", handle, event)
        return False
    return True


@dataclass(frozen=True)
class DispatchResult:
    message: dict[str, Any]
    # False is a delivery miss: stored, acknowledged, not pushed
    delivered: bool


class MessageDispatcher:
    def __init__(
        self,
        channel_layer,
        registry: Optional[ConnectionRegistry] = None,
        store: Optional[ChatStore] = None,
        timeout: Optional[float] = None,
        max_length: Optional[int] = None,
    ) -> None:
        self.channel_layer = channel_layer
        self.registry = registry if registry is not None else connection_registry
        self.store = store or chat_store
        self.timeout = timeout if timeout is not None else getattr(settings, "CHAT_PERSISTENCE_TIMEOUT", 3.0)
        self.max_length = max_length or getattr(settings, "CHAT_MAX_MESSAGE_LENGTH", 5000)

    def validate(self, payload: dict[str, Any]) -> Tuple[int, str]:
        receiver_id = protocol.parse_user_id(payload.get("receiverId"))
        if receiver_id is None:
            raise ValidationError("Field 'receiverId' must be a valid user id.")
        content = payload.get("content")
        if not isinstance(content, str):
            raise ValidationError("Field 'content' (string) is required.")
        content = content.strip()
        if not content:
            raise ValidationError("Message content cannot be empty.")
        if len(content) > self.max_length:
            raise ValidationError(f"Message content exceeds {self.max_length} characters.")
        try:
            content.encode("utf-8")
        except UnicodeEncodeError:
            # lone surrogates survive json.loads but not the database driver
            raise ValidationError("Message content is not valid text.") from None
        return receiver_id, content

    async def dispatch(self, session: SessionContext, payload: dict[str, Any]) -> DispatchResult:
        receiver_id, content = self.validate(payload)
        message = await self._persist(session.user_id, receiver_id, content)

        handle = self.registry.lookup(receiver_id)
        if handle is None:
            logger.debug("User %s offline; message %s left for history", receiver_id, message["id"])
            return DispatchResult(message=message, delivered=False)
        delivered = await deliver(self.channel_layer, handle, protocol.NEW_MESSAGE, message)
        return DispatchResult(message=message, delivered=delivered)

    async def _persist(self, sender_id: int, receiver_id: int, content: str) -> dict[str, Any]:
        try:
            return await asyncio.wait_for(
                self.store.create_message(sender_id, receiver_id, content), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Message %s -> %s not stored within %.1fs", sender_id, receiver_id, self.timeout
            )
            raise PersistenceError() from exc
        except DatabaseError as exc:
            logger.warning("Message %s -> %s not stored: %s", sender_id, receiver_id, exc)
            raise PersistenceError() from exc


class SignalRelay:
    def __init__(self, channel_layer, registry: Optional[ConnectionRegistry] = None) -> None:
        self.channel_layer = channel_layer
        self.registry = registry if registry is not None else connection_registry

    async def typing(self, session: SessionContext, payload: dict[str, Any]) -> bool:
        return await self._forward(
            payload,
            protocol.USER_TYPING,
            {"senderId": session.user_id, "senderName": session.display_name},
        )

    async def stop_typing(self, session: SessionContext, payload: dict[str, Any]) -> bool:
        return await self._forward(payload, protocol.USER_STOP_TYPING, {"senderId": session.user_id})

    async def _forward(self, payload: dict[str, Any], event: str, body: dict[str, Any]) -> bool:
        receiver_id = protocol.parse_user_id(payload.get("receiverId"))
        handle = self.registry.lookup(receiver_id) if receiver_id is not None else None
        if handle is None:
            logger.debug("Dropped %s for receiver %r", event, payload.get("receiverId"))
            return False
        try:
            await self.channel_layer.send(
                handle, {"type": protocol.DELIVER, "event": event, "payload": body}
            )
        except ChannelFull:
            logger.debug("Channel %s full; dropped %s", handle, event)
            return False
        return True
