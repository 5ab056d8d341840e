"""
Common test fixtures for the chat backend.

Provides users with display names, JWT access tokens, a REST client
authenticated as the first user, and an autouse reset of the
process-wide realtime state (connection registry, pending presence
writes, in-memory channel layer) between tests.
"""
import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib.auth.models import User
from rest_framework_simplejwt.tokens import AccessToken

from messaging.presence import presence_manager
from messaging.registry import connection_registry
from users.models import UserProfile


def _access_token(user) -> str:
    return str(AccessToken.for_user(user))


@pytest.fixture(autouse=True)
def clean_realtime_state():
    connection_registry.clear()
    presence_manager.reset()
    async_to_sync(get_channel_layer().flush)()
    yield
    connection_registry.clear()
    presence_manager.reset()


@pytest.fixture
def make_user(transactional_db):
    def _make(username, full_name=""):
        user = User.objects.create_user(username=username, password="pass12345")
        if full_name:
            UserProfile.objects.filter(user=user).update(full_name=full_name)
        return User.objects.select_related("profile").get(pk=user.pk)

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice", "Alice Adams")


@pytest.fixture
def bob(make_user):
    return make_user("bob", "Bob Brown")


@pytest.fixture
def issue_token():
    """Issue an access token the websocket handshake will accept."""
    return _access_token


@pytest.fixture
def auth_client(client, alice):
    """Authenticate the Django test client as alice using a JWT."""
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {_access_token(alice)}"
    return client
