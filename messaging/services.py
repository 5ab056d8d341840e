# messaging/services.py
"""
ORM access for the realtime chat path.

``ChatStore`` is the persistence seam used by the handshake, the
presence manager and the dispatcher.  Each coroutine runs its ORM work
through ``database_sync_to_async`` so the event loop never blocks on the
database.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from channels.db import database_sync_to_async
from django.contrib.auth import get_user_model

from users.models import UserProfile

from .exceptions import ValidationError
from .models import Message
from .serializers import MessageSerializer

User = get_user_model()


def _get_active_user(user_id: int) -> Optional[User]:
    return User.objects.select_related("profile").filter(pk=user_id, is_active=True).first()


def _create_message(sender_id: int, receiver_id: int, content: str) -> dict[str, Any]:
    if not User.objects.filter(pk=receiver_id).exists():
        raise ValidationError("Recipient does not exist.")
    msg = Message.objects.create(sender_id=sender_id, receiver_id=receiver_id, content=content)
    # re-read with both participants so the payload carries display names
    msg = Message.objects.select_related("sender__profile", "receiver__profile").get(pk=msg.pk)
    return dict(MessageSerializer(msg).data)


def _set_presence(user_id: int, online: bool, when: datetime) -> None:
    UserProfile.objects.update_or_create(
        user_id=user_id,
        defaults={"is_online": online, "last_seen": when},
    )


class ChatStore:
    """Async facade over the Django ORM for users, messages and presence."""

    async def get_user(self, user_id: int) -> Optional[User]:
        return await database_sync_to_async(_get_active_user)(user_id)

    async def create_message(self, sender_id: int, receiver_id: int, content: str) -> dict[str, Any]:
        """Persist one message and return its enriched serialized form."""
        return await database_sync_to_async(_create_message)(sender_id, receiver_id, content)

    async def set_presence(self, user_id: int, online: bool, when: datetime) -> None:
        await database_sync_to_async(_set_presence)(user_id, online, when)


chat_store = ChatStore()
