from __future__ import annotations

BOB = {"X-User-Id": "bob"}


def test_report_matched_user(client, store) -> None:
    store.add_profile("alice")
    store.add_profile("bob")
    match = store.add_match("alice", "bob")

    response = client.post(
        "/reports",
        json={"reported_id": "alice", "reason": "inappropriate_messages", "comment": "rude"},
        headers=BOB,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["created"] is True
    assert body["match_id"] == str(match.id)
    assert store.reports[0].comment == "rude"


def test_report_requires_match_and_known_reason(client, store) -> None:
    store.add_profile("alice")
    store.add_profile("bob")

    unmatched = client.post("/reports", json={"reported_id": "alice", "reason": "scam"}, headers=BOB)
    store.add_match("alice", "bob")
    unknown_reason = client.post("/reports", json={"reported_id": "alice", "reason": "boring"}, headers=BOB)
    self_report = client.post("/reports", json={"reported_id": "bob", "reason": "scam"}, headers=BOB)

    assert unmatched.status_code == 404
    assert unmatched.json() == {"detail": {"code": "E_MATCH_NOT_FOUND"}}
    assert unknown_reason.status_code == 422
    assert unknown_reason.json() == {"detail": {"code": "E_INVALID_REPORT_REASON"}}
    assert self_report.status_code == 403
    assert store.reports == []


def test_report_requires_viewer(client) -> None:
    response = client.post("/reports", json={"reported_id": "alice", "reason": "scam"})

    assert response.status_code == 401
