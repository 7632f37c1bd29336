from __future__ import annotations

from datetime import date

from duomatch.workers.asyncio_runner import run_async_job
from duomatch.workers.celery_app import celery_app
from duomatch.workers.tasks.daily_prize_async import run_daily_prize_award_async
from duomatch.workers.tasks.daily_prize_schedule import configure_daily_prize_schedule

__all__ = ["run_daily_prize_award", "run_daily_prize_award_async"]


@celery_app.task(name="duomatch.workers.tasks.daily_prize.run_daily_prize_award")
def run_daily_prize_award(draw_date: str | None = None) -> dict[str, object]:
    resolved = None if draw_date is None else date.fromisoformat(draw_date)
    return run_async_job(run_daily_prize_award_async(draw_date=resolved))


configure_daily_prize_schedule(celery_app)
