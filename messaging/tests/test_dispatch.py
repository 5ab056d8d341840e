"""
Tests for MessageDispatcher.

The dispatcher must validate, persist exactly once, and only then fan
out to the recipient's live session.  Validation and persistence
failures surface as exceptions for the consumer to report.
"""
import pytest
from django.db import OperationalError

from messaging.dispatch import MessageDispatcher
from messaging.exceptions import PersistenceError, ValidationError
from messaging.registry import ConnectionRegistry
from messaging.session import SessionContext

from .fakes import FakeStore, RecordingLayer

ALICE = SessionContext(user_id=1, display_name="Alice Adams")


def make_dispatcher(store=None, layer=None, registry=None, **kwargs):
    return MessageDispatcher(
        layer or RecordingLayer(),
        registry=registry if registry is not None else ConnectionRegistry(),
        store=store or FakeStore(),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_offline_recipient_is_stored_trimmed_and_not_pushed():
    store, layer = FakeStore(), RecordingLayer()
    dispatcher = make_dispatcher(store, layer)

    result = await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "  hi "})

    assert result.delivered is False
    assert result.message["content"] == "hi"
    assert [m["content"] for m in store.messages] == ["hi"]
    assert layer.sent == []


@pytest.mark.asyncio
async def test_online_recipient_receives_one_new_message():
    store, layer, registry = FakeStore(), RecordingLayer(), ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(store, layer, registry)

    result = await dispatcher.dispatch(ALICE, {"receiverId": "2", "content": "hello"})

    assert result.delivered is True
    assert layer.sent == [
        ("chan-bob", {"type": "chat.deliver", "event": "new-message", "payload": result.message})
    ]
    assert result.message["sender"]["id"] == 1
    assert len(store.messages) == 1


@pytest.mark.asyncio
async def test_persist_happens_before_fan_out():
    journal = []
    registry = ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(FakeStore(journal=journal), RecordingLayer(journal=journal), registry)

    await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "ordered"})

    assert journal == [("persist", 1), ("send", "chan-bob")]


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", "\n\t ", None, 42, ["hi"]])
async def test_empty_or_non_string_content_is_rejected(content):
    store, layer, registry = FakeStore(), RecordingLayer(), ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(store, layer, registry)

    with pytest.raises(ValidationError):
        await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": content})

    assert store.messages == []
    assert layer.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "receiver",
    [None, "", "abc", "2x", "\u00b2", "\u0662", "9" * 5000, 2**63, 0, -3, True, 1.5, {"id": 2}],
)
async def test_malformed_receiver_is_rejected(receiver):
    store = FakeStore()
    dispatcher = make_dispatcher(store)

    with pytest.raises(ValidationError):
        await dispatcher.dispatch(ALICE, {"receiverId": receiver, "content": "hi"})

    assert store.messages == []


@pytest.mark.asyncio
async def test_content_over_limit_is_rejected():
    dispatcher = make_dispatcher(max_length=5)
    with pytest.raises(ValidationError):
        await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "123456"})
    # surrounding whitespace does not count against the limit
    result = await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "  12345  "})
    assert result.message["content"] == "12345"


@pytest.mark.asyncio
async def test_content_with_lone_surrogate_is_rejected():
    store = FakeStore()
    dispatcher = make_dispatcher(store)

    with pytest.raises(ValidationError) as excinfo:
        await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "a\ud800b"})

    assert excinfo.value.detail == "Message content is not valid text."
    assert store.messages == []


@pytest.mark.asyncio
async def test_database_failure_skips_fan_out():
    layer, registry = RecordingLayer(), ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(FakeStore(fail=OperationalError("db down")), layer, registry)

    with pytest.raises(PersistenceError) as excinfo:
        await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "hi"})

    assert excinfo.value.detail == "Failed to send message"
    assert layer.sent == []


@pytest.mark.asyncio
async def test_slow_store_times_out_as_persistence_error():
    layer, registry = RecordingLayer(), ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(FakeStore(delay=0.5), layer, registry, timeout=0.05)

    with pytest.raises(PersistenceError):
        await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "hi"})

    assert layer.sent == []


@pytest.mark.asyncio
async def test_unknown_recipient_from_store_is_validation_error():
    store = FakeStore(fail=ValidationError("Recipient does not exist."))
    dispatcher = make_dispatcher(store)

    with pytest.raises(ValidationError) as excinfo:
        await dispatcher.dispatch(ALICE, {"receiverId": 99, "content": "hi"})

    assert excinfo.value.detail == "Recipient does not exist."


@pytest.mark.asyncio
async def test_full_recipient_channel_counts_as_miss():
    store, registry = FakeStore(), ConnectionRegistry()
    registry.register(2, "chan-bob")
    dispatcher = make_dispatcher(store, RecordingLayer(full={"chan-bob"}), registry)

    result = await dispatcher.dispatch(ALICE, {"receiverId": 2, "content": "hi"})

    assert result.delivered is False
    assert len(store.messages) == 1
