"""
Tests for the typing-indicator relay.

Signals reach a live recipient, are dropped silently otherwise, and are
never stored.
"""
import pytest

from messaging.dispatch import SignalRelay
from messaging.registry import ConnectionRegistry
from messaging.session import SessionContext

from .fakes import RecordingLayer

ALICE = SessionContext(user_id=1, display_name="Alice Adams")


@pytest.fixture
def registry():
    reg = ConnectionRegistry()
    reg.register(2, "chan-bob")
    return reg


@pytest.mark.asyncio
async def test_typing_forwards_sender_identity_and_name(registry):
    layer = RecordingLayer()
    relay = SignalRelay(layer, registry=registry)

    assert await relay.typing(ALICE, {"receiverId": 2}) is True

    assert layer.sent == [
        (
            "chan-bob",
            {
                "type": "chat.deliver",
                "event": "user-typing",
                "payload": {"senderId": 1, "senderName": "Alice Adams"},
            },
        )
    ]


@pytest.mark.asyncio
async def test_stop_typing_forwards_sender_id_only(registry):
    layer = RecordingLayer()
    relay = SignalRelay(layer, registry=registry)

    assert await relay.stop_typing(ALICE, {"receiverId": "2"}) is True

    assert layer.sent == [
        ("chan-bob", {"type": "chat.deliver", "event": "user-stop-typing", "payload": {"senderId": 1}})
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"receiverId": 3}, {"receiverId": "nope"}, {"receiverId": "\u00b2"}, {"receiverId": "9" * 5000}, {}],
)
async def test_missing_or_offline_recipient_is_dropped(registry, payload):
    layer = RecordingLayer()
    relay = SignalRelay(layer, registry=registry)

    assert await relay.typing(ALICE, payload) is False
    assert await relay.stop_typing(ALICE, payload) is False
    assert layer.sent == []


@pytest.mark.asyncio
async def test_full_channel_drops_signal_without_error(registry):
    relay = SignalRelay(RecordingLayer(full={"chan-bob"}), registry=registry)
    assert await relay.typing(ALICE, {"receiverId": 2}) is False
