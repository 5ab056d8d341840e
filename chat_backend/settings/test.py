"""
Test settings for the chat backend.

Swaps PostgreSQL and Redis for SQLite and the in-memory channel layer so
the suite runs without external services.
"""
from .base import *  # noqa

DEBUG = False
ALLOWED_HOSTS = ["*"]
SECRET_KEY = "test-secret-key-not-for-production-use-0123456789"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CHANNEL_LAYERS = {
    "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CHAT_HANDSHAKE_TIMEOUT = 2.0
CHAT_PERSISTENCE_TIMEOUT = 2.0
