from __future__ import annotations

from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.daily_swipe_counts import DailySwipeCount


class SwipeCountsRepo:
    @staticmethod
    async def get_count(session: AsyncSession, *, user_id: str, day: date) -> int:
        stmt = select(DailySwipeCount.swipe_count).where(
            DailySwipeCount.user_id == user_id,
            DailySwipeCount.day == day,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one_or_none() or 0)

    @staticmethod
    async def increment_if_below(
        session: AsyncSession,
        *,
        user_id: str,
        day: date,
        limit: int,
    ) -> int | None:
        """Atomically takes one quota slot; returns the new count or None at the limit."""
        if limit <= 0:
            return None
        stmt = insert(DailySwipeCount).values(user_id=user_id, day=day, swipe_count=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DailySwipeCount.user_id, DailySwipeCount.day],
            set_={"swipe_count": DailySwipeCount.swipe_count + 1},
            where=DailySwipeCount.swipe_count < limit,
        ).returning(DailySwipeCount.swipe_count)
        result = await session.execute(stmt)
        count = result.scalar_one_or_none()
        return None if count is None else int(count)

    @staticmethod
    async def decrement_floored(session: AsyncSession, *, user_id: str, day: date) -> int:
        stmt = (
            update(DailySwipeCount)
            .where(DailySwipeCount.user_id == user_id, DailySwipeCount.day == day)
            .values(swipe_count=func.greatest(DailySwipeCount.swipe_count - 1, 0))
            .returning(DailySwipeCount.swipe_count)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(result.scalar_one_or_none() or 0)
