from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.core.config import get_settings
from duomatch.core.time import server_date
from duomatch.db.repo.matches_repo import MatchesRepo
from duomatch.db.repo.profiles_repo import ProfilesRepo
from duomatch.db.repo.swipe_counts_repo import SwipeCountsRepo
from duomatch.db.repo.swipes_repo import SwipesRepo
from duomatch.economy.diamonds.constants import TASK_TYPE_SWIPES
from duomatch.economy.diamonds.tasks import DailyTasksService
from duomatch.matching.errors import (
    OwnershipViolationError,
    PremiumRequiredError,
    ProfileNotFoundError,
    RewindNotAllowedError,
)
from duomatch.matching.feed import profile_card_from_model
from duomatch.matching.rules import daily_swipe_limit
from duomatch.matching.types import (
    MatchCreation,
    RewindResult,
    SwipeLimits,
    SwipeOutcome,
    SwipeResult,
)

logger = structlog.get_logger(__name__)


def _limit_for(is_premium: bool) -> int:
    settings = get_settings()
    return daily_swipe_limit(
        is_premium=is_premium,
        free_limit=settings.free_daily_swipe_limit,
        premium_limit=settings.premium_daily_swipe_limit,
    )


class SwipeService:
    @staticmethod
    async def get_swipe_limits(
        session: AsyncSession,
        *,
        viewer_id: str,
        now_utc: datetime,
    ) -> SwipeLimits:
        viewer = await ProfilesRepo.get_by_id(session, viewer_id)
        if viewer is None:
            raise ProfileNotFoundError

        used = await SwipeCountsRepo.get_count(session, user_id=viewer_id, day=server_date(now_utc))
        return SwipeLimits(
            daily_limit=_limit_for(bool(viewer.is_premium)),
            used_today=used,
            is_premium=bool(viewer.is_premium),
        )

    @staticmethod
    async def _record_task_progress(session: AsyncSession, *, user_id: str, now_utc: datetime) -> None:
        try:
            async with session.begin_nested():
                await DailyTasksService.record_progress(
                    session,
                    user_id=user_id,
                    task_type=TASK_TYPE_SWIPES,
                    now_utc=now_utc,
                )
        except SQLAlchemyError as exc:
            logger.warning("swipe_task_progress_failed", user_id=user_id, error_type=type(exc).__name__)

    @staticmethod
    async def _create_match_if_mutual(
        session: AsyncSession,
        *,
        viewer_id: str,
        candidate_id: str,
        now_utc: datetime,
    ) -> MatchCreation | None:
        reciprocal = await SwipesRepo.has_like(session, swiper_id=candidate_id, swiped_id=viewer_id)
        if not reciprocal:
            return None

        match_id, created = await MatchesRepo.create_canonical(
            session,
            user_a=viewer_id,
            user_b=candidate_id,
            created_at=now_utc,
        )
        user1_id, user2_id = sorted((viewer_id, candidate_id))
        if created:
            logger.info("match_created", match_id=str(match_id), user1_id=user1_id, user2_id=user2_id)
        return MatchCreation(
            match_id=str(match_id),
            user1_id=user1_id,
            user2_id=user2_id,
            created=created,
        )

    @staticmethod
    async def record_swipe(
        session: AsyncSession,
        *,
        viewer_id: str,
        candidate_id: str,
        is_like: bool,
        now_utc: datetime,
    ) -> SwipeResult:
        if viewer_id == candidate_id:
            raise OwnershipViolationError

        # Both rows stay locked until commit, so opposite likes on one pair run one after the other.
        profiles = await ProfilesRepo.list_by_ids_for_update(session, [viewer_id, candidate_id])
        by_id = {profile.id: profile for profile in profiles}
        viewer = by_id.get(viewer_id)
        if viewer is None or candidate_id not in by_id:
            raise ProfileNotFoundError

        day = server_date(now_utc)
        limit = _limit_for(bool(viewer.is_premium))

        existing = await SwipesRepo.get_by_pair(session, swiper_id=viewer_id, swiped_id=candidate_id)
        if existing is not None:
            used = await SwipeCountsRepo.get_count(session, user_id=viewer_id, day=day)
            match = None
            if existing.is_like:
                match = await SwipeService._create_match_if_mutual(
                    session,
                    viewer_id=viewer_id,
                    candidate_id=candidate_id,
                    now_utc=now_utc,
                )
            return SwipeResult(
                outcome=SwipeOutcome.DUPLICATE,
                remaining_swipes=max(0, limit - used),
                swipe_id=str(existing.id),
                matched=match is not None,
                match_id=None if match is None else match.match_id,
                match_created=False if match is None else match.created,
            )

        used = await SwipeCountsRepo.increment_if_below(session, user_id=viewer_id, day=day, limit=limit)
        if used is None:
            logger.info("swipe_limit_reached", viewer_id=viewer_id, daily_limit=limit)
            return SwipeResult(outcome=SwipeOutcome.LIMIT_REACHED, remaining_swipes=0)

        swipe_id = await SwipesRepo.create_once(
            session,
            swiper_id=viewer_id,
            swiped_id=candidate_id,
            is_like=is_like,
            created_at=now_utc,
        )
        if swipe_id is None:
            # A concurrent request recorded the same pair first; give the slot back.
            used = await SwipeCountsRepo.decrement_floored(session, user_id=viewer_id, day=day)
            return SwipeResult(outcome=SwipeOutcome.DUPLICATE, remaining_swipes=max(0, limit - used))

        await ProfilesRepo.touch_last_active(session, viewer_id, now_utc)
        await SwipeService._record_task_progress(session, user_id=viewer_id, now_utc=now_utc)

        match = None
        if is_like:
            match = await SwipeService._create_match_if_mutual(
                session,
                viewer_id=viewer_id,
                candidate_id=candidate_id,
                now_utc=now_utc,
            )

        return SwipeResult(
            outcome=SwipeOutcome.RECORDED,
            remaining_swipes=max(0, limit - used),
            swipe_id=str(swipe_id),
            matched=match is not None,
            match_id=None if match is None else match.match_id,
            match_created=False if match is None else match.created,
        )

    @staticmethod
    async def rewind_swipe(
        session: AsyncSession,
        *,
        viewer_id: str,
        swipe_id: UUID,
        now_utc: datetime,
    ) -> RewindResult:
        viewer = await ProfilesRepo.get_by_id(session, viewer_id)
        if viewer is None:
            raise ProfileNotFoundError
        if not viewer.is_premium:
            raise PremiumRequiredError

        swipe = await SwipesRepo.get_by_id(session, swipe_id)
        if swipe is None or swipe.swiper_id != viewer_id:
            raise OwnershipViolationError

        latest = await SwipesRepo.get_latest_for_swiper(session, swiper_id=viewer_id)
        if latest is None or latest.id != swipe.id:
            raise RewindNotAllowedError

        swiped_id = await SwipesRepo.delete_owned(session, swipe_id=swipe_id, swiper_id=viewer_id)
        if swiped_id is None:
            raise OwnershipViolationError

        # The slot goes back to the day the swipe was counted on.
        swipe_day = server_date(swipe.created_at)
        used = await SwipeCountsRepo.decrement_floored(session, user_id=viewer_id, day=swipe_day)
        if swipe_day != server_date(now_utc):
            used = await SwipeCountsRepo.get_count(session, user_id=viewer_id, day=server_date(now_utc))
        candidate = await ProfilesRepo.get_by_id(session, swiped_id)
        if candidate is None:
            raise ProfileNotFoundError

        logger.info("swipe_rewound", viewer_id=viewer_id, swipe_id=str(swipe_id), candidate_id=swiped_id)
        return RewindResult(
            swipe_id=str(swipe_id),
            candidate=profile_card_from_model(candidate),
            used_today=used,
        )
