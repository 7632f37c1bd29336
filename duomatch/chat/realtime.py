from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import structlog
from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from duomatch.chat.types import ChatMessage
from duomatch.matching.rules import canonical_pair

logger = structlog.get_logger(__name__)

MessageHandler = Callable[[ChatMessage], None]


def topic_for(user_a: str, user_b: str) -> str:
    user1_id, user2_id = canonical_pair(user_a, user_b)
    return f"messages:{user1_id}:{user2_id}"


class Subscription:
    """Delivery handle for one conversation; rows outside the pair are dropped."""

    def __init__(self, user_a: str, user_b: str) -> None:
        self.user_a = user_a
        self.user_b = user_b
        self.topic = topic_for(user_a, user_b)
        self.closed = False
        self._handlers: list[MessageHandler] = []

    def on_message(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def deliver(self, message: ChatMessage) -> None:
        if self.closed or not message.belongs_to(self.user_a, self.user_b):
            return
        for handler in list(self._handlers):
            handler(message)

    async def close(self) -> None:
        self.closed = True
        self._handlers.clear()


class InMemoryRealtimeChannel:
    def __init__(self) -> None:
        self._subscriptions: dict[str, list[Subscription]] = {}

    async def publish(self, message: ChatMessage) -> None:
        topic = topic_for(message.sender_id, message.receiver_id)
        for subscription in list(self._subscriptions.get(topic, ())):
            if subscription.closed:
                self._subscriptions[topic].remove(subscription)
                continue
            subscription.deliver(message)

    async def subscribe(self, user_a: str, user_b: str) -> Subscription:
        subscription = Subscription(user_a, user_b)
        self._subscriptions.setdefault(subscription.topic, []).append(subscription)
        return subscription

    def active_subscriptions(self, user_a: str, user_b: str) -> int:
        return sum(1 for item in self._subscriptions.get(topic_for(user_a, user_b), ()) if not item.closed)


class RedisSubscription(Subscription):
    def __init__(self, user_a: str, user_b: str, *, pubsub: PubSub) -> None:
        super().__init__(user_a, user_b)
        self._pubsub = pubsub
        self._reader: asyncio.Task[None] | None = None
        self._released = False

    def start(self) -> None:
        self._reader = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        try:
            while not self.closed:
                raw = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if raw is None:
                    continue
                try:
                    message = ChatMessage.from_payload(json.loads(raw["data"]))
                except (KeyError, TypeError, ValueError):
                    logger.warning("realtime_payload_invalid", topic=self.topic)
                    continue
                self.deliver(message)
        except RedisError as exc:
            # Delivery stops here; owners see closed and resubscribe.
            logger.warning("realtime_read_failed", topic=self.topic, error_type=type(exc).__name__)
            self.closed = True

    async def close(self) -> None:
        if self._released:
            return
        self._released = True
        await super().close()
        reader, self._reader = self._reader, None
        try:
            if reader is not None:
                reader.cancel()
                try:
                    await reader
                except asyncio.CancelledError:
                    pass
        finally:
            try:
                await self._pubsub.unsubscribe(self.topic)
            except RedisError as exc:
                logger.warning("realtime_unsubscribe_failed", topic=self.topic, error_type=type(exc).__name__)
            finally:
                await self._pubsub.aclose()


class RedisRealtimeChannel:
    def __init__(self, redis_client: Redis) -> None:
        self._redis = redis_client

    @classmethod
    def from_url(cls, redis_url: str) -> RedisRealtimeChannel:
        return cls(Redis.from_url(redis_url, decode_responses=True))

    async def publish(self, message: ChatMessage) -> None:
        topic = topic_for(message.sender_id, message.receiver_id)
        await self._redis.publish(topic, json.dumps(message.to_payload()))

    async def subscribe(self, user_a: str, user_b: str) -> Subscription:
        pubsub = self._redis.pubsub()
        subscription = RedisSubscription(user_a, user_b, pubsub=pubsub)
        await pubsub.subscribe(subscription.topic)
        subscription.start()
        return subscription

    async def aclose(self) -> None:
        await self._redis.aclose()
