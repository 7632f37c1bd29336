from __future__ import annotations

from duomatch.chat.types import ChatMessage
from duomatch.db.models.matches import Match

SIDE_USER1 = "user1"
SIDE_USER2 = "user2"


def side_for(viewer_id: str, other_id: str) -> str:
    return SIDE_USER1 if viewer_id < other_id else SIDE_USER2


def read_pointer(match: Match, viewer_id: str) -> str | None:
    if viewer_id == match.user1_id:
        pointer = match.user1_last_read_message_id
    elif viewer_id == match.user2_id:
        pointer = match.user2_last_read_message_id
    else:
        raise ValueError(f"user {viewer_id} is not part of match {match.id}")
    return None if pointer is None else str(pointer)


def is_unread(latest: ChatMessage | None, *, viewer_id: str, pointer: str | None) -> bool:
    if latest is None:
        return False
    return latest.sender_id != viewer_id and latest.id != pointer


def read_pointer_target(latest: ChatMessage | None, *, viewer_id: str) -> str | None:
    """Message id the viewer's pointer should advance to, if any."""
    if latest is None or latest.is_optimistic or latest.sender_id == viewer_id:
        return None
    return latest.id
