from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.core.time import server_date
from duomatch.db.repo.daily_tasks_repo import DailyTasksRepo
from duomatch.economy.diamonds.constants import TASK_TYPES
from duomatch.economy.diamonds.types import DailyTaskView

logger = structlog.get_logger(__name__)


class DailyTasksService:
    @staticmethod
    async def record_progress(
        session: AsyncSession,
        *,
        user_id: str,
        task_type: str,
        now_utc: datetime,
        amount: int = 1,
    ) -> int:
        """Adds progress to every active task of `task_type`; returns the number of tasks touched."""
        if task_type not in TASK_TYPES:
            raise ValueError(f"unknown task type: {task_type}")
        if amount <= 0:
            return 0

        day = server_date(now_utc)
        tasks = await DailyTasksRepo.list_active(session, task_type=task_type)
        for task in tasks:
            progress = await DailyTasksRepo.add_progress(
                session,
                user_id=user_id,
                task_id=task.id,
                day=day,
                amount=amount,
                target_value=task.target_value,
            )
            if progress >= task.target_value:
                logger.debug("daily_task_completed", user_id=user_id, task_id=str(task.id))
        return len(tasks)

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: str,
        now_utc: datetime,
    ) -> list[DailyTaskView]:
        tasks = await DailyTasksRepo.list_active(session)
        progress_rows = await DailyTasksRepo.list_progress(session, user_id=user_id, day=server_date(now_utc))
        progress_by_task = {row.task_id: row for row in progress_rows}

        views: list[DailyTaskView] = []
        for task in tasks:
            progress = progress_by_task.get(task.id)
            views.append(
                DailyTaskView(
                    task_id=task.id,
                    name=task.name,
                    description=task.description,
                    task_type=task.task_type,
                    target_value=task.target_value,
                    reward_diamonds=task.reward_diamonds,
                    current_progress=0 if progress is None else progress.current_progress,
                    is_completed=False if progress is None else progress.is_completed,
                    is_collected=False if progress is None else progress.is_collected,
                )
            )
        return views
