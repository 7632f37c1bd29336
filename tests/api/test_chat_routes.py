from __future__ import annotations

import asyncio

ALICE = {"X-User-Id": "alice"}


def _matched_pair(store, *, alice_diamonds: int = 0) -> None:
    store.add_profile("alice", diamond_count=alice_diamonds)
    store.add_profile("bob")
    store.add_match("alice", "bob")


def test_message_to_unmatched_user_is_not_found(client, store) -> None:
    store.add_profile("alice")
    store.add_profile("bob")

    response = client.post("/chats/bob/messages", json={"text": "hi"}, headers=ALICE)

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_MATCH_NOT_FOUND"}}


def test_blank_message_is_rejected(client, store) -> None:
    _matched_pair(store)

    response = client.post("/chats/bob/messages", json={"text": "   "}, headers=ALICE)

    assert response.status_code == 422
    assert response.json() == {"detail": {"code": "E_EMPTY_MESSAGE"}}


def test_message_is_stored_listed_and_published(client, store, realtime_channel) -> None:
    _matched_pair(store)
    received = []
    subscription = asyncio.run(realtime_channel.subscribe("bob", "alice"))
    subscription.on_message(received.append)

    sent = client.post("/chats/bob/messages", json={"text": "duo tonight?"}, headers=ALICE)
    listed = client.get("/chats/bob/messages", headers={"X-User-Id": "bob"})

    assert sent.status_code == 200
    assert sent.json()["message_type"] == "text"
    assert [item["message_text"] for item in listed.json()["items"]] == ["duo tonight?"]
    assert [message.id for message in received] == [sent.json()["id"]]


def test_gift_and_read_pointer(client, store) -> None:
    _matched_pair(store, alice_diamonds=10)

    gift = client.post("/chats/bob/gifts", json={"amount": 3}, headers=ALICE)
    read = client.post("/chats/alice/read", headers={"X-User-Id": "bob"})
    read_again = client.post("/chats/alice/read", headers={"X-User-Id": "bob"})
    conversations = client.get("/chats", headers={"X-User-Id": "bob"})

    assert gift.status_code == 200
    assert gift.json()["sender_balance"] == 7
    assert gift.json()["message"]["diamond_count"] == 3
    assert read.json() == {"last_read_message_id": gift.json()["message"]["id"], "updated": True}
    assert read_again.json() == {"last_read_message_id": None, "updated": False}
    [conversation] = conversations.json()["items"]
    assert conversation["other_user_id"] == "alice"
    assert conversation["has_unread"] is False


def test_gift_above_balance_is_rejected(client, store) -> None:
    _matched_pair(store, alice_diamonds=1)

    response = client.post("/chats/bob/gifts", json={"amount": 3}, headers=ALICE)

    assert response.status_code == 409
    assert response.json() == {"detail": {"code": "E_INSUFFICIENT_BALANCE"}}
