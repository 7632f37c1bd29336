from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from duomatch.matching.errors import (
    OwnershipViolationError,
    PremiumRequiredError,
    ProfileNotFoundError,
    RewindNotAllowedError,
)
from duomatch.matching.service import SwipeService
from duomatch.matching.types import SwipeOutcome
from tests.fakes import BASE_TIME

TODAY = date(2026, 10, 19)


def _seed_candidates(store, count: int) -> list[str]:
    user_ids = [f"c{index:02d}" for index in range(count)]
    for user_id in user_ids:
        store.add_profile(user_id)
    return user_ids


@pytest.mark.asyncio
async def test_free_user_is_blocked_after_twenty_swipes(store, session) -> None:
    store.add_profile("viewer")
    candidates = _seed_candidates(store, 21)

    for index, candidate_id in enumerate(candidates[:20]):
        result = await SwipeService.record_swipe(
            session,
            viewer_id="viewer",
            candidate_id=candidate_id,
            is_like=False,
            now_utc=BASE_TIME + timedelta(seconds=index),
        )
        assert result.outcome is SwipeOutcome.RECORDED

    blocked = await SwipeService.record_swipe(
        session,
        viewer_id="viewer",
        candidate_id=candidates[20],
        is_like=True,
        now_utc=BASE_TIME + timedelta(minutes=5),
    )

    assert blocked.outcome is SwipeOutcome.LIMIT_REACHED
    assert blocked.remaining_swipes == 0
    assert len(store.swipes) == 20
    assert store.swipe_counts[("viewer", TODAY)] == 20


@pytest.mark.asyncio
async def test_premium_user_gets_fifty_swipes(store, session) -> None:
    store.add_profile("viewer", is_premium=True)
    store.add_profile("other")

    limits = await SwipeService.get_swipe_limits(session, viewer_id="viewer", now_utc=BASE_TIME)

    assert limits.daily_limit == 50
    assert limits.remaining == 50
    assert limits.can_swipe is True


@pytest.mark.asyncio
async def test_counter_resets_on_next_utc_day(store, session) -> None:
    store.add_profile("viewer")
    store.add_profile("other")
    store.swipe_counts[("viewer", TODAY)] = 20

    result = await SwipeService.record_swipe(
        session,
        viewer_id="viewer",
        candidate_id="other",
        is_like=False,
        now_utc=BASE_TIME + timedelta(days=1),
    )

    assert result.outcome is SwipeOutcome.RECORDED
    assert store.swipe_counts[("viewer", TODAY + timedelta(days=1))] == 1


@pytest.mark.asyncio
async def test_duplicate_swipe_keeps_single_row_and_counter(store, session) -> None:
    store.add_profile("viewer")
    store.add_profile("other")

    first = await SwipeService.record_swipe(
        session, viewer_id="viewer", candidate_id="other", is_like=True, now_utc=BASE_TIME
    )
    second = await SwipeService.record_swipe(
        session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=BASE_TIME
    )

    assert first.outcome is SwipeOutcome.RECORDED
    assert second.outcome is SwipeOutcome.DUPLICATE
    assert second.swipe_id == first.swipe_id
    assert len(store.swipes) == 1
    assert store.swipe_counts[("viewer", TODAY)] == 1


@pytest.mark.asyncio
async def test_mutual_like_creates_exactly_one_canonical_match(store, session) -> None:
    store.add_profile("bob")
    store.add_profile("alice")

    first = await SwipeService.record_swipe(
        session, viewer_id="bob", candidate_id="alice", is_like=True, now_utc=BASE_TIME
    )
    second = await SwipeService.record_swipe(
        session, viewer_id="alice", candidate_id="bob", is_like=True, now_utc=BASE_TIME
    )

    assert first.matched is False
    assert second.matched is True
    assert second.match_created is True
    assert len(store.matches) == 1
    assert (store.matches[0].user1_id, store.matches[0].user2_id) == ("alice", "bob")


@pytest.mark.asyncio
async def test_pass_never_creates_match(store, session) -> None:
    store.add_profile("bob")
    store.add_profile("alice")

    await SwipeService.record_swipe(session, viewer_id="bob", candidate_id="alice", is_like=True, now_utc=BASE_TIME)
    result = await SwipeService.record_swipe(
        session, viewer_id="alice", candidate_id="bob", is_like=False, now_utc=BASE_TIME
    )

    assert result.matched is False
    assert store.matches == []


@pytest.mark.asyncio
async def test_repeated_like_repairs_missing_match(store, session) -> None:
    store.add_profile("alice")
    store.add_profile("bob")
    for swiper_id, swiped_id in (("alice", "bob"), ("bob", "alice")):
        store.swipes.append(
            SimpleNamespace(id=uuid4(), swiper_id=swiper_id, swiped_id=swiped_id, is_like=True, created_at=BASE_TIME)
        )

    retry = await SwipeService.record_swipe(
        session, viewer_id="alice", candidate_id="bob", is_like=True, now_utc=BASE_TIME + timedelta(minutes=1)
    )
    again = await SwipeService.record_swipe(
        session, viewer_id="bob", candidate_id="alice", is_like=True, now_utc=BASE_TIME + timedelta(minutes=2)
    )

    assert retry.outcome is SwipeOutcome.DUPLICATE
    assert (retry.matched, retry.match_created) == (True, True)
    assert (again.matched, again.match_created) == (True, False)
    assert again.match_id == retry.match_id
    assert len(store.matches) == 1
    assert store.swipe_counts == {}


@pytest.mark.asyncio
async def test_swipe_updates_activity_and_swipe_tasks(store, session) -> None:
    store.add_profile("viewer")
    store.add_profile("other")
    task = store.add_task(task_type="swipes", target_value=1, reward_diamonds=2)

    await SwipeService.record_swipe(session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=BASE_TIME)

    assert store.profiles["viewer"].last_active_at == BASE_TIME
    progress = store.task_progress[("viewer", task.id, TODAY)]
    assert progress.current_progress == 1
    assert progress.is_completed is True
    assert session.nested_calls == 1


@pytest.mark.asyncio
async def test_self_swipe_and_unknown_profiles_are_rejected(store, session) -> None:
    store.add_profile("viewer")

    with pytest.raises(OwnershipViolationError):
        await SwipeService.record_swipe(
            session, viewer_id="viewer", candidate_id="viewer", is_like=True, now_utc=BASE_TIME
        )
    with pytest.raises(ProfileNotFoundError):
        await SwipeService.record_swipe(
            session, viewer_id="viewer", candidate_id="ghost", is_like=True, now_utc=BASE_TIME
        )


@pytest.mark.asyncio
async def test_rewind_restores_counter_and_allows_swiping_again(store, session) -> None:
    store.add_profile("viewer", is_premium=True)
    store.add_profile("other")
    swiped = await SwipeService.record_swipe(
        session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=BASE_TIME
    )

    rewound = await SwipeService.rewind_swipe(
        session,
        viewer_id="viewer",
        swipe_id=UUID(swiped.swipe_id),
        now_utc=BASE_TIME,
    )

    assert rewound.candidate.id == "other"
    assert rewound.used_today == 0
    assert store.swipes == []

    again = await SwipeService.record_swipe(
        session, viewer_id="viewer", candidate_id="other", is_like=True, now_utc=BASE_TIME
    )
    assert again.outcome is SwipeOutcome.RECORDED
    assert store.swipe_counts[("viewer", TODAY)] == 1


@pytest.mark.asyncio
async def test_rewind_after_midnight_frees_the_slot_of_the_swipe_day(store, session) -> None:
    store.add_profile("viewer", is_premium=True)
    store.add_profile("other")
    late = datetime(2026, 10, 19, 23, 59, tzinfo=timezone.utc)
    swiped = await SwipeService.record_swipe(
        session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=late
    )

    rewound = await SwipeService.rewind_swipe(
        session,
        viewer_id="viewer",
        swipe_id=UUID(swiped.swipe_id),
        now_utc=late + timedelta(minutes=2),
    )

    assert store.swipe_counts[("viewer", TODAY)] == 0
    assert ("viewer", date(2026, 10, 20)) not in store.swipe_counts
    assert rewound.used_today == 0


@pytest.mark.asyncio
async def test_rewind_requires_premium(store, session) -> None:
    store.add_profile("viewer")
    store.add_profile("other")
    await SwipeService.record_swipe(session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=BASE_TIME)

    with pytest.raises(PremiumRequiredError):
        await SwipeService.rewind_swipe(session, viewer_id="viewer", swipe_id=store.swipes[0].id, now_utc=BASE_TIME)

    assert len(store.swipes) == 1


@pytest.mark.asyncio
async def test_rewind_rejects_foreign_or_missing_swipe(store, session) -> None:
    store.add_profile("viewer", is_premium=True)
    store.add_profile("intruder", is_premium=True)
    store.add_profile("other")
    await SwipeService.record_swipe(session, viewer_id="viewer", candidate_id="other", is_like=False, now_utc=BASE_TIME)

    with pytest.raises(OwnershipViolationError):
        await SwipeService.rewind_swipe(
            session, viewer_id="intruder", swipe_id=store.swipes[0].id, now_utc=BASE_TIME
        )
    with pytest.raises(OwnershipViolationError):
        await SwipeService.rewind_swipe(session, viewer_id="viewer", swipe_id=uuid4(), now_utc=BASE_TIME)

    assert len(store.swipes) == 1


@pytest.mark.asyncio
async def test_rewind_only_applies_to_latest_swipe(store, session) -> None:
    store.add_profile("viewer", is_premium=True)
    store.add_profile("first")
    store.add_profile("second")
    await SwipeService.record_swipe(session, viewer_id="viewer", candidate_id="first", is_like=False, now_utc=BASE_TIME)
    await SwipeService.record_swipe(
        session,
        viewer_id="viewer",
        candidate_id="second",
        is_like=False,
        now_utc=BASE_TIME + timedelta(seconds=1),
    )

    with pytest.raises(RewindNotAllowedError):
        await SwipeService.rewind_swipe(session, viewer_id="viewer", swipe_id=store.swipes[0].id, now_utc=BASE_TIME)
