"""
Custom JWT authentication middleware for Django Channels.

This middleware extracts a JWT token either from the WebSocket's
`Authorization: Bearer <token>` header or from a `token` query parameter,
and runs it through the chat handshake.  On success `scope['chat_session']`
holds the verified `SessionContext`; on failure it is None and
`scope['auth_error']` explains why, so the consumer can refuse the
connection before accepting it.
"""

import logging
import urllib.parse
from typing import Callable, Optional

from channels.middleware import BaseMiddleware

from messaging.exceptions import AuthError
from messaging.handshake import admit

logger = logging.getLogger(__name__)


def get_token_from_scope(scope) -> Optional[str]:
    # Normalize headers to dict for easier lookup
    headers = dict(scope.get("headers", []))
    token = None

    # Check Authorization header for Bearer token
    auth_header = headers.get(b"authorization", b"").decode()
    if auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()

    # Fallback: check query string for token parameter
    if not token:
        qs = scope.get("query_string", b"").decode()
        params = urllib.parse.parse_qs(qs)
        token = params.get("token", [None])[0]

    return token or None


class JWTAuthMiddleware(BaseMiddleware):
    """Low-level middleware that admits or rejects a WebSocket scope."""

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope["chat_session"] = None
        try:
            scope["chat_session"] = await admit(get_token_from_scope(scope))
        except AuthError as exc:
            scope["auth_error"] = exc.detail
            logger.warning("WS handshake rejected (%s): %s", scope.get("path"), exc.detail)

        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner: Callable):
    """Entry point for the middleware stack used by Channels routing."""
    return JWTAuthMiddleware(inner)
