from __future__ import annotations

from datetime import date, datetime, timedelta

import structlog

from duomatch.core.config import get_settings
from duomatch.core.time import server_date, utc_now
from duomatch.db.session import SessionLocal
from duomatch.economy.diamonds.prize import DailyPrizeService

logger = structlog.get_logger("duomatch.workers.tasks.daily_prize")


def previous_draw_date(now_utc: datetime) -> date:
    return server_date(now_utc) - timedelta(days=1)


async def run_daily_prize_award_async(*, draw_date: date | None = None) -> dict[str, object]:
    now_utc = utc_now()
    resolved_date = draw_date or previous_draw_date(now_utc)

    async with SessionLocal.begin() as session:
        award = await DailyPrizeService.award(
            session,
            draw_date=resolved_date,
            now_utc=now_utc,
            prize_amount=get_settings().daily_prize_amount,
        )

    result: dict[str, object] = {
        "generated_at": now_utc.isoformat(),
        "draw_date": resolved_date.isoformat(),
        "awarded": award is not None and award.created,
        "winner_user_id": None if award is None else award.user_id,
        "prize_amount": None if award is None else award.prize_amount,
    }
    logger.info("daily_prize_award_finished", **result)
    return result
