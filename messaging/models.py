# messaging/models.py
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone


class MessageQuerySet(models.QuerySet):
    def conversation(self, user_a_id: int, user_b_id: int):
        """Both directions of the direct conversation between two users, oldest first."""
        return self.filter(
            Q(sender_id=user_a_id, receiver_id=user_b_id)
            | Q(sender_id=user_b_id, receiver_id=user_a_id)
        ).order_by("timestamp", "id")


class Message(models.Model):
    """A direct message. Written once by the dispatcher, never edited."""

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages"
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages"
    )
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    # delivery timestamp; equal to created_at for live dispatch
    timestamp = models.DateTimeField(db_index=True, blank=True)

    objects = MessageQuerySet.as_manager()

    class Meta:
        ordering = ["timestamp", "id"]
        indexes = [
            models.Index(fields=["sender", "receiver", "timestamp"], name="messaging_pair_ts_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.timestamp is None:
            self.timestamp = self.created_at
        super().save(*args, **kwargs)

    def clean(self):
        super().clean()
        if self.content != (self.content or "").strip():
            raise ValidationError("Message content must be stored without surrounding whitespace.")
        if not self.content:
            raise ValidationError("Message content cannot be empty.")

    def __str__(self):
        return f"Message({self.sender_id} -> {self.receiver_id})"
