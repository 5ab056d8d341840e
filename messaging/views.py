"""
Views for the messaging app.

Expose the conversation history between the authenticated user and one
other user.  This is how messages sent while the recipient was offline
are retrieved; the websocket never replays them.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions

from .models import Message
from .serializers import MessageSerializer

User = get_user_model()


class ConversationHistoryView(generics.ListAPIView):
    """Messages exchanged with ``user_id`` in both directions, oldest first."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = MessageSerializer
    pagination_class = None

    def get_queryset(self):
        other = get_object_or_404(User, pk=self.kwargs["user_id"])
        return (
            Message.objects.conversation(self.request.user.pk, other.pk)
            .select_related("sender__profile", "receiver__profile")
        )
