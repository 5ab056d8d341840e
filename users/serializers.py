"""
Serializers for the users app.

Only the directory shape is exposed: identity, display name and the
presence fields maintained by the realtime layer.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import display_name

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()
    is_online = serializers.BooleanField(source="profile.is_online", read_only=True, default=False)
    last_seen = serializers.DateTimeField(source="profile.last_seen", read_only=True, default=None)

    class Meta:
        model = User
        fields = ("id", "username", "name", "is_online", "last_seen")
        read_only_fields = fields

    def get_name(self, obj):
        return display_name(obj)
