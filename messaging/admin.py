# messaging/admin.py
from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("id", "sender", "receiver", "timestamp", "created_at")
    list_filter = ("timestamp",)
    search_fields = ("sender__username", "receiver__username", "content")
    ordering = ("-timestamp",)
    readonly_fields = ("sender", "receiver", "content", "timestamp", "created_at")
