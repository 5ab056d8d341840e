"""
WebSocket routing for the messaging app.

Exposes a single URL for the per-user chat connection.  The JWT
handshake middleware decides admission before the consumer sees the
connection.
"""
from django.urls import re_path

from .consumers import ChatConsumer


websocket_urlpatterns = [
    re_path(r"^ws/chat/?$", ChatConsumer.as_asgi()),
]
