"""
Admission of websocket connections.

``admit`` turns a bearer credential into a ``SessionContext`` or raises
``AuthError``.  Verification is bounded by ``CHAT_HANDSHAKE_TIMEOUT``; a
handshake that does not finish in time is a failed admission.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from django.conf import settings
from django.db import DatabaseError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from users.models import display_name

from .exceptions import AuthError
from .services import ChatStore, chat_store
from .session import SessionContext


def verify_credential(token: Optional[str]) -> int:
    """Validate a SimpleJWT access token and return the user id it names."""
    if not token:
        raise AuthError("Missing credential.")
    try:
        access = AccessToken(token)
    except TokenError as exc:
        raise AuthError(f"Invalid credential: {exc}") from exc
    user_id = access.get(api_settings.USER_ID_CLAIM)
    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise AuthError("Credential carries no usable user id.") from None


async def _resolve(token: Optional[str], store: ChatStore) -> SessionContext:
    user_id = verify_credential(token)
    user = await store.get_user(user_id)
    if user is None:
        raise AuthError("Credential refers to an unknown user.")
    return SessionContext(user_id=user.pk, display_name=display_name(user))


async def admit(
    token: Optional[str],
    store: Optional[ChatStore] = None,
    timeout: Optional[float] = None,
) -> SessionContext:
    if timeout is None:
        timeout = getattr(settings, "CHAT_HANDSHAKE_TIMEOUT", 5.0)
    try:
        return await asyncio.wait_for(_resolve(token, store or chat_store), timeout=timeout)
    except asyncio.TimeoutError:
        raise AuthError("Handshake timed out.") from None
    except DatabaseError as exc:
        raise AuthError("Identity lookup failed.") from exc
