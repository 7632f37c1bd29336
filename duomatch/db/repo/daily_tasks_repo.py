from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.daily_tasks import DailyTask, DailyTaskProgress


class DailyTasksRepo:
    @staticmethod
    async def get_task(session: AsyncSession, task_id: UUID) -> DailyTask | None:
        return await session.get(DailyTask, task_id)

    @staticmethod
    async def list_active(
        session: AsyncSession,
        *,
        task_type: str | None = None,
    ) -> list[DailyTask]:
        stmt = select(DailyTask).where(DailyTask.is_active.is_(True))
        if task_type is not None:
            stmt = stmt.where(DailyTask.task_type == task_type)
        stmt = stmt.order_by(DailyTask.reward_diamonds.desc(), DailyTask.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_progress(
        session: AsyncSession,
        *,
        user_id: str,
        day: date,
    ) -> list[DailyTaskProgress]:
        stmt = select(DailyTaskProgress).where(
            DailyTaskProgress.user_id == user_id,
            DailyTaskProgress.day == day,
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def add_progress(
        session: AsyncSession,
        *,
        user_id: str,
        task_id: UUID,
        day: date,
        amount: int,
        target_value: int,
    ) -> int:
        stmt = insert(DailyTaskProgress).values(
            user_id=user_id,
            task_id=task_id,
            day=day,
            current_progress=amount,
            is_completed=amount >= target_value,
            is_collected=False,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                DailyTaskProgress.user_id,
                DailyTaskProgress.task_id,
                DailyTaskProgress.day,
            ],
            set_={
                "current_progress": DailyTaskProgress.current_progress + amount,
                "is_completed": (DailyTaskProgress.current_progress + amount) >= target_value,
            },
            where=DailyTaskProgress.is_collected.is_(False),
        ).returning(DailyTaskProgress.current_progress)
        result = await session.execute(stmt)
        return int(result.scalar_one_or_none() or 0)

    @staticmethod
    async def mark_collected_if_ready(
        session: AsyncSession,
        *,
        user_id: str,
        task_id: UUID,
        day: date,
        collected_at: datetime,
    ) -> bool:
        stmt = (
            update(DailyTaskProgress)
            .where(
                DailyTaskProgress.user_id == user_id,
                DailyTaskProgress.task_id == task_id,
                DailyTaskProgress.day == day,
                DailyTaskProgress.is_completed.is_(True),
                DailyTaskProgress.is_collected.is_(False),
            )
            .values(is_collected=True, collected_at=collected_at)
            .returning(DailyTaskProgress.id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
