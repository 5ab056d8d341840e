"""
Models for the users app.

A `UserProfile` model extends the built-in `auth.User` with a display
name and the presence fields.  A `OneToOneField` links each profile to
its user.  The `UserProfile` is created automatically via signals when a
new user instance is saved.
"""
from django.contrib.auth.models import User
from django.db import models


def display_name(user) -> str:
    """Best-effort printable name for a user."""
    prof = getattr(user, "profile", None)
    full = (getattr(prof, "full_name", "") or "").strip()
    if full:
        return full
    full = (user.get_full_name() or "").strip()
    return full or user.username or f"User {user.pk}"


class UserProfile(models.Model):
    """Extension of Django's built-in User model."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=255, blank=True)
    # presence; written only by messaging.presence
    is_online = models.BooleanField(default=False)
    last_seen = models.DateTimeField(null=True, blank=True)

    @property
    def display_name(self) -> str:
        return display_name(self.user)

    def __str__(self) -> str:
        return f"Profile<{self.user.username}>"

    class Meta:
        indexes = [
            models.Index(fields=["is_online"], name="users_profile_online_idx"),
        ]
