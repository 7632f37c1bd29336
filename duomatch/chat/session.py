from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Protocol
from uuid import uuid4

from duomatch.chat.errors import EmptyMessageError, ProvisionalMessageNotFoundError
from duomatch.chat.read_state import read_pointer_target
from duomatch.chat.realtime import Subscription
from duomatch.chat.reconcile import reconcile
from duomatch.chat.types import PROVISIONAL_ID_PREFIX, ChatMessage, MessageType
from duomatch.core.time import utc_now


class RealtimeChannel(Protocol):
    async def publish(self, message: ChatMessage) -> None: ...

    async def subscribe(self, user_a: str, user_b: str) -> Subscription: ...


class ChatSession:
    """Client-side view of one conversation.

    Keeps the message list ordered, shows sends optimistically and keeps at
    most one realtime subscription open.
    """

    def __init__(self, *, viewer_id: str, other_id: str, messages: list[ChatMessage] | None = None) -> None:
        self.viewer_id = viewer_id
        self.other_id = other_id
        self.draft = ""
        self._messages = reconcile([], messages or [])
        self._subscription: Subscription | None = None

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def begin_send(self, text: str | None = None) -> ChatMessage:
        body = (self.draft if text is None else text).strip()
        if not body:
            raise EmptyMessageError

        provisional = ChatMessage(
            id=f"{PROVISIONAL_ID_PREFIX}{uuid4()}",
            sender_id=self.viewer_id,
            receiver_id=self.other_id,
            message_type=MessageType.TEXT,
            message_text=body,
            diamond_count=None,
            created_at=utc_now(),
            is_optimistic=True,
        )
        self._messages = reconcile(self._messages, [provisional])
        self.draft = ""
        return provisional

    def _pop_provisional(self, provisional_id: str) -> ChatMessage:
        for index, message in enumerate(self._messages):
            if message.id == provisional_id and message.is_optimistic:
                return self._messages.pop(index)
        raise ProvisionalMessageNotFoundError

    def confirm_send(self, provisional_id: str, stored: ChatMessage) -> None:
        stored = replace(stored, is_optimistic=False)
        if any(message.id == stored.id for message in self._messages):
            # The realtime row already took the provisional message's place.
            self._messages = [message for message in self._messages if message.id != provisional_id]
            return

        for index, message in enumerate(self._messages):
            if message.id == provisional_id:
                self._messages[index] = stored
                self._messages = sorted(self._messages, key=lambda item: item.created_at)
                return
        self._messages = reconcile(self._messages, [stored])

    def fail_send(self, provisional_id: str) -> None:
        provisional = self._pop_provisional(provisional_id)
        self.draft = provisional.message_text or ""

    async def send(
        self,
        deliver: Callable[[str], Awaitable[ChatMessage]],
        text: str | None = None,
    ) -> ChatMessage:
        provisional = self.begin_send(text)
        try:
            stored = await deliver(provisional.message_text or "")
        except Exception:
            # Any failed write takes the provisional message back out and restores the draft.
            self.fail_send(provisional.id)
            raise
        self.confirm_send(provisional.id, stored)
        return stored

    def apply_incoming(self, message: ChatMessage) -> None:
        if not message.belongs_to(self.viewer_id, self.other_id):
            return
        self._messages = reconcile(self._messages, [message])

    def read_pointer_target(self) -> str | None:
        latest = self._messages[-1] if self._messages else None
        return read_pointer_target(latest, viewer_id=self.viewer_id)

    async def open(self, channel: RealtimeChannel) -> Subscription:
        await self.close()
        subscription = await channel.subscribe(self.viewer_id, self.other_id)
        subscription.on_message(self.apply_incoming)
        self._subscription = subscription
        return subscription

    async def close(self) -> None:
        if self._subscription is None:
            return
        subscription, self._subscription = self._subscription, None
        await subscription.close()
