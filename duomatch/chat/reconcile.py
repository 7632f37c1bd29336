"""Merging server-confirmed messages into a locally held conversation.

A provisional (optimistic) message is shown as soon as the viewer sends it.
When the stored row arrives, either through the send response or the
realtime channel, it takes the provisional message's place instead of
appearing twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from duomatch.chat.types import ChatMessage, MessageType


def _confirms(provisional: ChatMessage, stored: ChatMessage) -> bool:
    if not provisional.is_optimistic or stored.is_optimistic:
        return False
    if provisional.sender_id != stored.sender_id:
        return False
    if provisional.message_type != stored.message_type:
        return False
    if stored.message_type is MessageType.DIAMOND:
        return provisional.diamond_count == stored.diamond_count
    return provisional.message_text == stored.message_text


def reconcile(
    messages: Sequence[ChatMessage],
    incoming: Iterable[ChatMessage],
) -> list[ChatMessage]:
    merged = list(messages)
    for message in incoming:
        if any(existing.id == message.id for existing in merged):
            continue

        for index, existing in enumerate(merged):
            if _confirms(existing, message):
                merged[index] = message
                break
        else:
            merged.append(message)

    return sorted(merged, key=lambda item: item.created_at)
