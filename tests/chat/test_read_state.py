from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest

from duomatch.chat.read_state import is_unread, read_pointer, read_pointer_target, side_for
from duomatch.chat.types import ChatMessage, MessageType
from tests.fakes import BASE_TIME


def _message(message_id: str, sender_id: str, *, optimistic: bool = False) -> ChatMessage:
    return ChatMessage(
        id=message_id,
        sender_id=sender_id,
        receiver_id="bob" if sender_id == "alice" else "alice",
        message_type=MessageType.TEXT,
        message_text="hey",
        diamond_count=None,
        created_at=BASE_TIME,
        is_optimistic=optimistic,
    )


def test_side_follows_canonical_order() -> None:
    assert side_for("alice", "bob") == "user1"
    assert side_for("bob", "alice") == "user2"


def test_read_pointer_per_side() -> None:
    pointer = uuid4()
    match = SimpleNamespace(
        id=uuid4(),
        user1_id="alice",
        user2_id="bob",
        user1_last_read_message_id=None,
        user2_last_read_message_id=pointer,
    )

    assert read_pointer(match, "alice") is None
    assert read_pointer(match, "bob") == str(pointer)
    with pytest.raises(ValueError):
        read_pointer(match, "carol")


def test_unread_only_for_messages_from_the_other_side() -> None:
    from_bob = _message("m-1", "bob")

    assert is_unread(from_bob, viewer_id="alice", pointer=None) is True
    assert is_unread(from_bob, viewer_id="alice", pointer="m-1") is False
    assert is_unread(_message("m-2", "alice"), viewer_id="alice", pointer=None) is False
    assert is_unread(None, viewer_id="alice", pointer=None) is False


def test_pointer_target_ignores_optimistic_and_own() -> None:
    assert read_pointer_target(_message("m-1", "bob"), viewer_id="alice") == "m-1"
    assert read_pointer_target(_message("m-2", "alice"), viewer_id="alice") is None
    assert read_pointer_target(_message("temp-1", "bob", optimistic=True), viewer_id="alice") is None
    assert read_pointer_target(None, viewer_id="alice") is None
