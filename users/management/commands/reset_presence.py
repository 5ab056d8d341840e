"""
Mark every user offline.

The connection registry lives in process memory and starts empty, so any
``is_online`` flag left behind by a previous process is stale.  Run this
before the ASGI server starts accepting websocket connections.
"""
from django.core.management.base import BaseCommand
from django.utils import timezone

from users.models import UserProfile


class Command(BaseCommand):
    help = "Resets the persisted online flag of every user to offline."

    def handle(self, *args, **options):
        now = timezone.now()
        count = UserProfile.objects.filter(is_online=True).update(is_online=False, last_seen=now)
        self.stdout.write(self.style.SUCCESS(f"Marked {count} user(s) offline."))
