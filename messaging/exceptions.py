"""
Error taxonomy for the realtime chat path.

``AuthError`` rejects a connection attempt before it is admitted.
``ValidationError`` and ``PersistenceError`` are reported to the sender
of a single event and never close the connection.
"""


class ChatError(Exception):
    """Base class for errors raised by the chat session pipeline."""

    default_detail = "Chat error."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthError(ChatError):
    """Missing, malformed or expired credential, or unknown user."""

    default_detail = "Authentication error"


class ValidationError(ChatError):
    """Malformed dispatch payload (empty content, bad receiver reference)."""

    default_detail = "Invalid message payload."


class PersistenceError(ChatError):
    """A durable write failed or timed out."""

    default_detail = "Failed to send message"
