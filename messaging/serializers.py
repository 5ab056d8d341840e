from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from users.models import display_name

from .models import Message

User = get_user_model()


class ParticipantSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name"]
        read_only_fields = fields

    def get_name(self, obj):
        return display_name(obj)


class MessageSerializer(serializers.ModelSerializer):
    """Enriched message shape shared by the websocket frames and the history endpoint."""

    sender = ParticipantSerializer(read_only=True)
    receiver = ParticipantSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = ["id", "sender", "receiver", "content", "timestamp", "createdAt"]
        read_only_fields = fields
