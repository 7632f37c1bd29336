from __future__ import annotations

from datetime import date, timedelta

import pytest

from duomatch.economy.diamonds.tasks import DailyTasksService
from tests.fakes import BASE_TIME


@pytest.mark.asyncio
async def test_progress_touches_every_active_task_of_type(store, session) -> None:
    short = store.add_task(task_type="messages", target_value=2, reward_diamonds=1)
    long = store.add_task(task_type="messages", target_value=5, reward_diamonds=4)
    store.add_task(task_type="swipes", target_value=1, reward_diamonds=1)
    store.add_task(task_type="messages", target_value=1, reward_diamonds=9, is_active=False)

    touched = await DailyTasksService.record_progress(
        session, user_id="user", task_type="messages", now_utc=BASE_TIME, amount=2
    )

    assert touched == 2
    today = date(2026, 10, 19)
    assert store.task_progress[("user", short.id, today)].is_completed is True
    assert store.task_progress[("user", long.id, today)].current_progress == 2
    assert store.task_progress[("user", long.id, today)].is_completed is False
    assert len(store.task_progress) == 2


@pytest.mark.asyncio
async def test_progress_rejects_unknown_type_and_ignores_zero(store, session) -> None:
    store.add_task(task_type="login", target_value=1, reward_diamonds=1)

    with pytest.raises(ValueError):
        await DailyTasksService.record_progress(session, user_id="user", task_type="streams", now_utc=BASE_TIME)
    assert (
        await DailyTasksService.record_progress(
            session, user_id="user", task_type="login", now_utc=BASE_TIME, amount=0
        )
        == 0
    )
    assert store.task_progress == {}


@pytest.mark.asyncio
async def test_list_for_user_reports_progress_per_day(store, session) -> None:
    task = store.add_task(task_type="login", target_value=1, reward_diamonds=2)
    await DailyTasksService.record_progress(session, user_id="user", task_type="login", now_utc=BASE_TIME)

    today = await DailyTasksService.list_for_user(session, user_id="user", now_utc=BASE_TIME)
    tomorrow = await DailyTasksService.list_for_user(
        session, user_id="user", now_utc=BASE_TIME + timedelta(days=1)
    )

    assert [(view.task_id, view.current_progress, view.is_completed) for view in today] == [(task.id, 1, True)]
    assert [(view.current_progress, view.is_completed, view.is_collected) for view in tomorrow] == [
        (0, False, False)
    ]
