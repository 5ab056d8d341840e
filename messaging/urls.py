# messaging/urls.py
"""
URL configuration for the messaging app.

Defines the REST endpoint for conversation history.  These routes are
included under the ``/api/messaging/`` prefix at the project level.
"""

from django.urls import path

from .views import ConversationHistoryView

app_name = "messaging"

urlpatterns = [
    path("messages/<int:user_id>/", ConversationHistoryView.as_view(), name="conversation-history"),
]
