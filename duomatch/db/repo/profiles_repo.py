from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import datetime

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.profiles import Profile
from duomatch.matching.constants import FILTER_MAX_AGE, FILTER_MIN_AGE
from duomatch.matching.types import FeedFilters


def _apply_feed_filters(stmt: Select, filters: FeedFilters) -> Select:
    if filters.min_age > FILTER_MIN_AGE:
        stmt = stmt.where(Profile.age >= filters.min_age)
    if filters.max_age < FILTER_MAX_AGE:
        stmt = stmt.where(Profile.age <= filters.max_age)
    if filters.ranks:
        stmt = stmt.where(Profile.current_rank.in_(filters.ranks))
    if filters.states:
        stmt = stmt.where(Profile.state.in_(filters.states))
    if filters.cities:
        stmt = stmt.where(Profile.city.in_(filters.cities))
    if filters.heroes:
        stmt = stmt.where(Profile.favorite_heroes.overlap(list(filters.heroes)))
    if filters.lanes:
        stmt = stmt.where(Profile.favorite_lines.overlap(list(filters.lanes)))
    return stmt


class ProfilesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: str) -> Profile | None:
        return await session.get(Profile, user_id)

    @staticmethod
    async def list_by_ids_for_update(session: AsyncSession, user_ids: Sequence[str]) -> list[Profile]:
        ids = tuple(set(user_ids))
        if not ids:
            return []
        # Same id order as get_balances_for_update, so swipes and transfers cannot deadlock.
        stmt = select(Profile).where(Profile.id.in_(ids)).order_by(Profile.id.asc()).with_for_update()
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_feed_candidates(
        session: AsyncSession,
        *,
        viewer_id: str,
        excluded_ids: Collection[str],
        limit: int,
        filters: FeedFilters | None,
    ) -> list[Profile]:
        stmt = select(Profile).where(Profile.id != viewer_id)
        if excluded_ids:
            stmt = stmt.where(Profile.id.not_in(tuple(excluded_ids)))
        if filters is not None:
            stmt = _apply_feed_filters(stmt, filters)
        stmt = stmt.order_by(
            Profile.last_active_at.desc().nulls_last(),
            Profile.id.asc(),
        ).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_balances_for_update(
        session: AsyncSession,
        user_ids: Sequence[str],
    ) -> dict[str, int]:
        # Rows are locked in id order so two opposing transfers cannot deadlock.
        stmt = (
            select(Profile.id, Profile.diamond_count)
            .where(Profile.id.in_(tuple(set(user_ids))))
            .order_by(Profile.id.asc())
            .with_for_update()
        )
        result = await session.execute(stmt)
        return {user_id: int(balance) for user_id, balance in result.all()}

    @staticmethod
    async def add_diamonds(session: AsyncSession, *, user_id: str, delta: int) -> int | None:
        stmt = (
            update(Profile)
            .where(Profile.id == user_id, Profile.diamond_count + delta >= 0)
            .values(diamond_count=Profile.diamond_count + delta)
            .returning(Profile.diamond_count)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        balance = result.scalar_one_or_none()
        return None if balance is None else int(balance)

    @staticmethod
    async def touch_last_active(session: AsyncSession, user_id: str, active_at: datetime) -> int:
        stmt = (
            update(Profile)
            .where(Profile.id == user_id)
            .values(last_active_at=active_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0
