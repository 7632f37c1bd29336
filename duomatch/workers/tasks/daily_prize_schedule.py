from __future__ import annotations

from celery.schedules import crontab

from duomatch.core.config import get_settings


def configure_daily_prize_schedule(celery_app) -> None:
    settings = get_settings()
    celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
    celery_app.conf.beat_schedule.update(
        {
            "daily-prize-award-utc": {
                "task": "duomatch.workers.tasks.daily_prize.run_daily_prize_award",
                "schedule": crontab(
                    hour=settings.daily_prize_hour_utc,
                    minute=settings.daily_prize_minute_utc,
                ),
                "options": {"queue": "q_normal"},
            },
        }
    )
