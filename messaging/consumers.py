"""
Channels consumer for live direct messaging.

One ``ChatConsumer`` instance serves one admitted websocket.  The JWT
handshake middleware attaches a ``SessionContext`` to the scope; the
consumer rejects the connection when it is missing, otherwise registers
the session, flips presence online, and processes the connection's
events one at a time until disconnect.

Client -> Server:
  {"type": "join"}
  {"type": "chat-message", "receiverId": 7, "content": "hi"}
  {"type": "typing", "receiverId": 7}
  {"type": "stop-typing", "receiverId": 7}

Server -> Client:
  {"type": "new-message" | "message-sent", "payload": {id, sender, receiver, content, timestamp, createdAt}}
  {"type": "message-error", "payload": {"message": "..."}}
  {"type": "user-typing", "payload": {"senderId": 5, "senderName": "Ana"}}
  {"type": "user-stop-typing", "payload": {"senderId": 5}}
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from . import protocol
from .dispatch import MessageDispatcher, SignalRelay
from .exceptions import PersistenceError, ValidationError
from .presence import presence_manager
from .registry import connection_registry

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """Realtime WebSocket consumer bound to one verified user."""

    registry = connection_registry
    presence = presence_manager

    async def connect(self) -> None:
        self.session = self.scope.get("chat_session")
        if self.session is None:
            logger.warning(
                "Rejected websocket connection: %s", self.scope.get("auth_error", "no session")
            )
            await self.close(code=protocol.CLOSE_UNAUTHORIZED)
            return

        self.dispatcher = MessageDispatcher(self.channel_layer, registry=self.registry)
        self.relay = SignalRelay(self.channel_layer, registry=self.registry)
        await self.accept()
        self.registry.register(self.session.user_id, self.channel_name)
        self.presence.went_online(self.session.user_id)
        logger.info("User %s (%s) connected", self.session.user_id, self.session.display_name)

    async def disconnect(self, code: int) -> None:
        session = getattr(self, "session", None)
        if session is None:
            return
        if self.registry.unregister(session.user_id, self.channel_name):
            self.presence.went_offline(session.user_id)
        logger.info("User %s disconnected (code=%s)", session.user_id, code)

    # override to report undecodable frames instead of raising
    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if not text_data:
            return  # ignore empty frame
        try:
            content = json.loads(text_data)
        except ValueError:
            await self.send_error("Invalid JSON")
            return
        if not isinstance(content, dict):
            await self.send_error("Expected a JSON object.")
            return
        await self.receive_json(content, **kwargs)

    async def receive_json(self, content: Dict[str, Any], **kwargs: Any) -> None:
        event_type = content.get("type")
        if event_type == protocol.CHAT_MESSAGE:
            await self._handle_chat_message(content)
        elif event_type == protocol.TYPING:
            await self.relay.typing(self.session, content)
        elif event_type == protocol.STOP_TYPING:
            await self.relay.stop_typing(self.session, content)
        elif event_type in protocol.JOIN_ALIASES:
            await self._handle_join()
        else:
            logger.debug("Ignoring event %r from user %s", event_type, self.session.user_id)

    async def _handle_chat_message(self, content: Dict[str, Any]) -> None:
        try:
            result = await self.dispatcher.dispatch(self.session, content)
        except (ValidationError, PersistenceError) as exc:
            await self.send_error(exc.detail)
            return
        await self.send_json(protocol.frame(protocol.MESSAGE_SENT, result.message))

    async def _handle_join(self) -> None:
        group = protocol.user_group(self.session.user_id)
        if group in self.groups:
            return
        await self.channel_layer.group_add(group, self.channel_name)
        # websocket_disconnect discards everything listed in self.groups
        self.groups.append(group)

    async def send_error(self, detail: str) -> None:
        await self.send_json(protocol.frame(protocol.MESSAGE_ERROR, {"message": detail}))

    async def chat_deliver(self, event: Dict[str, Any]) -> None:
        """Handler for frames handed over by the dispatcher or the relay."""
        await self.send_json(protocol.frame(event["event"], event["payload"]))
