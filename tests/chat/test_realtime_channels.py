from __future__ import annotations

import asyncio
import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from duomatch.chat.realtime import InMemoryRealtimeChannel, RedisRealtimeChannel, topic_for
from duomatch.chat.session import ChatSession
from duomatch.chat.types import ChatMessage, MessageType
from tests.fakes import BASE_TIME


def _message(sender_id: str, receiver_id: str, message_id: str = "m-1") -> ChatMessage:
    return ChatMessage(
        id=message_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        message_type=MessageType.DIAMOND,
        message_text=None,
        diamond_count=5,
        created_at=BASE_TIME,
    )


def test_topic_is_order_independent() -> None:
    assert topic_for("bob", "alice") == topic_for("alice", "bob") == "messages:alice:bob"


@pytest.mark.asyncio
async def test_in_memory_channel_delivers_only_to_the_pair() -> None:
    channel = InMemoryRealtimeChannel()
    received: list[str] = []
    others: list[str] = []
    subscription = await channel.subscribe("alice", "bob")
    subscription.on_message(lambda message: received.append(message.id))
    unrelated = await channel.subscribe("alice", "carol")
    unrelated.on_message(lambda message: others.append(message.id))

    await channel.publish(_message("bob", "alice"))

    assert received == ["m-1"]
    assert others == []


@pytest.mark.asyncio
async def test_closed_subscription_receives_nothing() -> None:
    channel = InMemoryRealtimeChannel()
    received: list[str] = []
    subscription = await channel.subscribe("alice", "bob")
    subscription.on_message(lambda message: received.append(message.id))

    await subscription.close()
    await channel.publish(_message("alice", "bob"))

    assert received == []
    assert channel.active_subscriptions("alice", "bob") == 0


class _RecordingRedis:
    def __init__(self) -> None:
        self.published: list[tuple[str, str]] = []

    async def publish(self, channel: str, payload: str) -> int:
        self.published.append((channel, payload))
        return 1


@pytest.mark.asyncio
async def test_redis_channel_publishes_json_payload_on_pair_topic() -> None:
    redis_client = _RecordingRedis()
    channel = RedisRealtimeChannel(redis_client)
    message = _message("bob", "alice")

    await channel.publish(message)

    [(topic, payload)] = redis_client.published
    assert topic == "messages:alice:bob"
    assert ChatMessage.from_payload(json.loads(payload)) == message


class _FakePubSub:
    def __init__(self, *, broken: bool = False) -> None:
        self.broken = broken
        self.topics: list[str] = []
        self.unsubscribed: list[str] = []
        self.released = False

    async def subscribe(self, topic: str) -> None:
        self.topics.append(topic)

    async def get_message(self, *, ignore_subscribe_messages: bool, timeout: float):
        if self.broken:
            raise RedisConnectionError("connection reset")
        await asyncio.sleep(timeout)
        return None

    async def unsubscribe(self, topic: str) -> None:
        if self.broken:
            raise RedisConnectionError("connection reset")
        self.unsubscribed.append(topic)

    async def aclose(self) -> None:
        self.released = True


class _PubSubRedis:
    def __init__(self, pubsub: _FakePubSub) -> None:
        self._pubsub = pubsub

    def pubsub(self) -> _FakePubSub:
        return self._pubsub


async def _wait_until_closed(subscription) -> None:
    for _ in range(10):
        if subscription.closed:
            return
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_redis_subscription_close_unsubscribes_and_releases() -> None:
    pubsub = _FakePubSub()
    channel = RedisRealtimeChannel(_PubSubRedis(pubsub))

    subscription = await channel.subscribe("bob", "alice")
    await subscription.close()

    assert pubsub.topics == ["messages:alice:bob"]
    assert pubsub.unsubscribed == ["messages:alice:bob"]
    assert pubsub.released is True


@pytest.mark.asyncio
async def test_redis_read_failure_closes_subscription_and_session_still_cleans_up() -> None:
    pubsub = _FakePubSub(broken=True)
    channel = RedisRealtimeChannel(_PubSubRedis(pubsub))
    chat = ChatSession(viewer_id="alice", other_id="bob")

    subscription = await chat.open(channel)
    await _wait_until_closed(subscription)

    assert subscription.closed is True
    assert chat.is_subscribed is False

    await chat.close()

    assert pubsub.released is True
