from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.swipes import Swipe


class SwipesRepo:
    @staticmethod
    async def get_by_pair(
        session: AsyncSession,
        *,
        swiper_id: str,
        swiped_id: str,
    ) -> Swipe | None:
        stmt = select(Swipe).where(Swipe.swiper_id == swiper_id, Swipe.swiped_id == swiped_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create_once(
        session: AsyncSession,
        *,
        swiper_id: str,
        swiped_id: str,
        is_like: bool,
        created_at: datetime,
    ) -> UUID | None:
        stmt = (
            insert(Swipe)
            .values(
                swiper_id=swiper_id,
                swiped_id=swiped_id,
                is_like=is_like,
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=[Swipe.swiper_id, Swipe.swiped_id])
            .returning(Swipe.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def has_like(session: AsyncSession, *, swiper_id: str, swiped_id: str) -> bool:
        stmt = select(Swipe.id).where(
            Swipe.swiper_id == swiper_id,
            Swipe.swiped_id == swiped_id,
            Swipe.is_like.is_(True),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_swiped_ids(session: AsyncSession, *, swiper_id: str) -> list[str]:
        stmt = select(Swipe.swiped_id).where(Swipe.swiper_id == swiper_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_latest_for_swiper(session: AsyncSession, *, swiper_id: str) -> Swipe | None:
        stmt = (
            select(Swipe)
            .where(Swipe.swiper_id == swiper_id)
            .order_by(Swipe.created_at.desc(), Swipe.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_id(session: AsyncSession, swipe_id: UUID) -> Swipe | None:
        return await session.get(Swipe, swipe_id)

    @staticmethod
    async def delete_owned(
        session: AsyncSession,
        *,
        swipe_id: UUID,
        swiper_id: str,
    ) -> str | None:
        stmt = (
            delete(Swipe)
            .where(Swipe.id == swipe_id, Swipe.swiper_id == swiper_id)
            .returning(Swipe.swiped_id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
