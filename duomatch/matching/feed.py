from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.profiles import Profile
from duomatch.db.repo.matches_repo import MatchesRepo
from duomatch.db.repo.profiles_repo import ProfilesRepo
from duomatch.db.repo.swipes_repo import SwipesRepo
from duomatch.matching import compatibility
from duomatch.matching.constants import FEED_OVERFETCH_FACTOR
from duomatch.matching.errors import ProfileNotFoundError
from duomatch.matching.rules import clamp_feed_limit
from duomatch.matching.types import FeedCandidate, FeedFilters, ProfileCard

logger = structlog.get_logger(__name__)


def profile_card_from_model(profile: Profile) -> ProfileCard:
    return ProfileCard(
        id=profile.id,
        name=profile.name,
        age=profile.age,
        city=profile.city,
        current_rank=profile.current_rank,
        favorite_heroes=tuple(profile.favorite_heroes or ()),
        favorite_lines=tuple(profile.favorite_lines or ()),
        is_premium=bool(profile.is_premium),
        country=profile.country,
        state=profile.state,
        bio=profile.bio,
        last_active_at=profile.last_active_at,
    )


def filters_from_model(profile: Profile) -> FeedFilters:
    return FeedFilters(
        min_age=profile.min_age_filter,
        max_age=profile.max_age_filter,
        ranks=tuple(profile.selected_ranks_filter or ()),
        states=tuple(profile.selected_states_filter or ()),
        cities=tuple(profile.selected_cities_filter or ()),
        lanes=tuple(profile.selected_lanes_filter or ()),
        heroes=tuple(profile.selected_heroes_filter or ()),
        compatibility_mode=bool(profile.compatibility_mode_filter),
    )


def rank_by_compatibility(
    viewer: ProfileCard,
    candidates: Sequence[ProfileCard],
    *,
    limit: int,
) -> list[FeedCandidate]:
    scored = [
        FeedCandidate(profile=candidate, compatibility=compatibility.score(viewer, candidate))
        for candidate in candidates
    ]
    # sorted() is stable: equal scores keep their recent-activity order.
    scored = sorted(scored, key=lambda item: item.compatibility.overall_score, reverse=True)
    return scored[:limit]


def build_batch(
    viewer: ProfileCard,
    candidates: Sequence[ProfileCard],
    *,
    limit: int,
    compatibility_mode: bool,
) -> list[FeedCandidate]:
    if compatibility_mode:
        return rank_by_compatibility(viewer, candidates, limit=limit)
    return [FeedCandidate(profile=candidate) for candidate in candidates[:limit]]


class CandidateFeedService:
    @staticmethod
    async def collect_exclusions(session: AsyncSession, *, viewer_id: str) -> set[str]:
        swiped_ids = await SwipesRepo.list_swiped_ids(session, swiper_id=viewer_id)
        matched_ids = await MatchesRepo.list_matched_ids(session, user_id=viewer_id)
        return {viewer_id, *swiped_ids, *matched_ids}

    @staticmethod
    async def next_batch(
        session: AsyncSession,
        *,
        viewer_id: str,
        excluded_ids: Iterable[str] = (),
        limit: int,
    ) -> list[FeedCandidate]:
        viewer_model = await ProfilesRepo.get_by_id(session, viewer_id)
        if viewer_model is None:
            raise ProfileNotFoundError

        resolved_limit = clamp_feed_limit(limit)
        exclusions = await CandidateFeedService.collect_exclusions(session, viewer_id=viewer_id)
        exclusions.update(excluded_ids)

        if not viewer_model.is_premium:
            # Saved filters are a premium feature; free viewers get recent activity only.
            rows = await ProfilesRepo.list_feed_candidates(
                session,
                viewer_id=viewer_id,
                excluded_ids=exclusions,
                limit=resolved_limit,
                filters=None,
            )
            return [FeedCandidate(profile=profile_card_from_model(row)) for row in rows]

        filters = filters_from_model(viewer_model)
        rows = await ProfilesRepo.list_feed_candidates(
            session,
            viewer_id=viewer_id,
            excluded_ids=exclusions,
            limit=resolved_limit * FEED_OVERFETCH_FACTOR,
            filters=filters,
        )
        batch = build_batch(
            profile_card_from_model(viewer_model),
            [profile_card_from_model(row) for row in rows],
            limit=resolved_limit,
            compatibility_mode=filters.compatibility_mode,
        )
        logger.debug(
            "feed_batch_built",
            viewer_id=viewer_id,
            fetched=len(rows),
            returned=len(batch),
            compatibility_mode=filters.compatibility_mode,
        )
        return batch
