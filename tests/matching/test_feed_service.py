from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest

from duomatch.matching.errors import ProfileNotFoundError
from duomatch.matching.feed import CandidateFeedService, build_batch, profile_card_from_model
from tests.fakes import BASE_TIME, make_profile


def _seed_recent(store, *user_ids: str, **overrides) -> None:
    for offset, user_id in enumerate(user_ids):
        store.add_profile(user_id, last_active_at=BASE_TIME - timedelta(minutes=offset), **overrides)


@pytest.mark.asyncio
async def test_non_premium_viewer_ignores_saved_filters(store, session) -> None:
    store.add_profile("viewer", is_premium=False, selected_ranks_filter=["Mythic"])
    store.add_profile("epic", current_rank="Epic", last_active_at=BASE_TIME)
    store.add_profile("mythic", current_rank="Mythic", last_active_at=BASE_TIME - timedelta(hours=1))

    batch = await CandidateFeedService.next_batch(session, viewer_id="viewer", limit=10)

    assert [item.profile.id for item in batch] == ["epic", "mythic"]
    assert all(item.compatibility is None for item in batch)
    assert store.last_feed_query.filters is None


@pytest.mark.asyncio
async def test_premium_viewer_applies_filters_and_overfetches(store, session) -> None:
    store.add_profile(
        "viewer",
        is_premium=True,
        selected_ranks_filter=["Mythic"],
        compatibility_mode_filter=False,
    )
    store.add_profile("epic", current_rank="Epic", last_active_at=BASE_TIME)
    store.add_profile("mythic", current_rank="Mythic", last_active_at=BASE_TIME - timedelta(hours=1))

    batch = await CandidateFeedService.next_batch(session, viewer_id="viewer", limit=5)

    assert [item.profile.id for item in batch] == ["mythic"]
    assert store.last_feed_query.limit == 15
    assert store.last_feed_query.filters.ranks == ("Mythic",)


@pytest.mark.asyncio
async def test_premium_compatibility_mode_sorts_by_overall_score(store, session) -> None:
    store.add_profile(
        "viewer",
        is_premium=True,
        favorite_lines=["gold"],
        favorite_heroes=["Tigreal"],
    )
    store.add_profile("recent_mismatch", favorite_lines=["gold"], last_active_at=BASE_TIME, city="Natal")
    store.add_profile(
        "older_partner",
        favorite_lines=["roam"],
        favorite_heroes=["Layla"],
        last_active_at=BASE_TIME - timedelta(days=1),
    )

    batch = await CandidateFeedService.next_batch(session, viewer_id="viewer", limit=10)

    assert [item.profile.id for item in batch] == ["older_partner", "recent_mismatch"]
    assert batch[0].compatibility.overall_score > batch[1].compatibility.overall_score


@pytest.mark.asyncio
async def test_feed_excludes_swiped_matched_self_and_staged(store, session) -> None:
    store.add_profile("viewer")
    _seed_recent(store, "swiped", "matched", "staged", "fresh")
    store.swipes.append(
        SimpleNamespace(id=uuid4(), swiper_id="viewer", swiped_id="swiped", is_like=False, created_at=BASE_TIME)
    )
    store.add_match("viewer", "matched")

    batch = await CandidateFeedService.next_batch(
        session,
        viewer_id="viewer",
        excluded_ids=["staged"],
        limit=10,
    )

    assert [item.profile.id for item in batch] == ["fresh"]
    assert {"viewer", "swiped", "matched", "staged"} <= store.last_feed_query.excluded_ids


@pytest.mark.asyncio
async def test_feed_unknown_viewer_raises(store, session) -> None:
    with pytest.raises(ProfileNotFoundError):
        await CandidateFeedService.next_batch(session, viewer_id="ghost", limit=10)


def test_build_batch_keeps_activity_order_for_equal_scores() -> None:
    viewer = profile_card_from_model(make_profile("viewer"))
    candidates = [profile_card_from_model(make_profile(user_id)) for user_id in ("a", "b", "c")]

    batch = build_batch(viewer, candidates, limit=2, compatibility_mode=True)

    assert [item.profile.id for item in batch] == ["a", "b"]
