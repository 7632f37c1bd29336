from __future__ import annotations

from datetime import date

import pytest

from duomatch.workers.celery_app import celery_app
from duomatch.workers.tasks import daily_prize, daily_prize_async
from tests.fakes import BASE_TIME, FakeSessionFactory


def test_run_daily_prize_award_task_wrapper(monkeypatch) -> None:
    seen: list[date | None] = []

    async def fake_async(*, draw_date: date | None = None) -> dict[str, object]:
        seen.append(draw_date)
        return {"draw_date": "2026-10-18", "awarded": True}

    monkeypatch.setattr(daily_prize, "run_daily_prize_award_async", fake_async)

    result = daily_prize.run_daily_prize_award("2026-10-18")

    assert result == {"draw_date": "2026-10-18", "awarded": True}
    assert seen == [date(2026, 10, 18)]


def test_daily_prize_is_scheduled_in_utc() -> None:
    entry = celery_app.conf.beat_schedule["daily-prize-award-utc"]

    assert entry["task"] == "duomatch.workers.tasks.daily_prize.run_daily_prize_award"
    assert entry["schedule"].hour == {0}
    assert entry["schedule"].minute == {5}


def test_previous_draw_date_uses_server_day() -> None:
    assert daily_prize_async.previous_draw_date(BASE_TIME) == date(2026, 10, 18)


@pytest.mark.asyncio
async def test_award_job_draws_yesterday(monkeypatch, store) -> None:
    store.add_profile("winner", diamond_count=0)
    store.prize_entries[("winner", date(2026, 10, 18))] = 2
    monkeypatch.setattr(daily_prize_async, "SessionLocal", FakeSessionFactory())
    monkeypatch.setattr(daily_prize_async, "utc_now", lambda: BASE_TIME)

    first = await daily_prize_async.run_daily_prize_award_async()
    second = await daily_prize_async.run_daily_prize_award_async()

    assert first["draw_date"] == "2026-10-18"
    assert first["awarded"] is True
    assert first["winner_user_id"] == "winner"
    assert second["awarded"] is False
    assert store.profiles["winner"].diamond_count == 30


@pytest.mark.asyncio
async def test_award_job_without_entries(monkeypatch, store) -> None:
    monkeypatch.setattr(daily_prize_async, "SessionLocal", FakeSessionFactory())
    monkeypatch.setattr(daily_prize_async, "utc_now", lambda: BASE_TIME)

    result = await daily_prize_async.run_daily_prize_award_async(draw_date=date(2026, 10, 1))

    assert result["draw_date"] == "2026-10-01"
    assert result["awarded"] is False
    assert result["winner_user_id"] is None
