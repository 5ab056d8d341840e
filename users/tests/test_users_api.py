"""
Tests for token issuance and the user directory.

The directory lists everyone but the caller, sorted by display name,
with the presence fields maintained by the websocket layer.
"""
import pytest
from django.utils import timezone

from users.models import UserProfile


@pytest.mark.django_db(transaction=True)
def test_token_issuance(client, alice):
    resp = client.post(
        "/api/auth/token/",
        {"username": "alice", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert "access" in resp.json()
    assert "refresh" in resp.json()


@pytest.mark.django_db(transaction=True)
def test_directory_requires_authentication(client):
    assert client.get("/api/users/").status_code == 401


@pytest.mark.django_db(transaction=True)
def test_directory_excludes_caller_and_sorts_by_name(auth_client, make_user, bob):
    make_user("zed", "Aaron Zed")
    make_user("quiet")
    seen = timezone.now()
    UserProfile.objects.filter(user=bob).update(is_online=True, last_seen=seen)

    resp = auth_client.get("/api/users/")

    assert resp.status_code == 200
    rows = resp.json()
    assert [r["name"] for r in rows] == ["Aaron Zed", "Bob Brown", "quiet"]
    bob_row = next(r for r in rows if r["username"] == "bob")
    assert bob_row["is_online"] is True
    assert bob_row["last_seen"] is not None
    assert all(r["username"] != "alice" for r in rows)


@pytest.mark.django_db(transaction=True)
def test_profile_created_for_new_user(make_user):
    user = make_user("dora")
    profile = UserProfile.objects.get(user=user)
    assert profile.is_online is False
    assert profile.last_seen is None
    assert profile.display_name == "dora"
