"""
Views for the users app.

Exposes the user directory used by chat clients to pick a conversation
partner.  Authentication is required.
"""
from django.contrib.auth import get_user_model
from rest_framework import generics, permissions
from rest_framework.response import Response

from .models import display_name
from .serializers import UserSummarySerializer

User = get_user_model()


class UserListView(generics.ListAPIView):
    """Every active user except the caller, sorted by display name."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = UserSummarySerializer

    def get_queryset(self):
        return (
            User.objects.filter(is_active=True)
            .exclude(pk=self.request.user.pk)
            .select_related("profile")
        )

    def list(self, request, *args, **kwargs):
        users = sorted(self.get_queryset(), key=lambda u: (display_name(u).lower(), u.pk))
        return Response(self.get_serializer(users, many=True).data)
