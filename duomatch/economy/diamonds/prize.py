from __future__ import annotations

import random
from datetime import date, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.transactions import Transaction
from duomatch.db.repo.daily_prize_repo import DailyPrizeRepo
from duomatch.db.repo.profiles_repo import ProfilesRepo
from duomatch.db.repo.transactions_repo import TransactionsRepo
from duomatch.economy.diamonds.constants import (
    DAILY_PRIZE_DEFAULT_AMOUNT,
    STATUS_COMPLETED,
    TRANSACTION_TYPE_PRIZE,
)
from duomatch.economy.diamonds.errors import InvalidAmountError, LedgerUserNotFoundError
from duomatch.economy.diamonds.rules import is_valid_amount, pick_weighted_winner, prize_entries_for
from duomatch.economy.diamonds.types import PrizeAward

logger = structlog.get_logger(__name__)


class DailyPrizeService:
    @staticmethod
    async def enroll(
        session: AsyncSession,
        *,
        user_id: str,
        draw_date: date,
        now_utc: datetime,
    ) -> bool:
        profile = await ProfilesRepo.get_by_id(session, user_id)
        if profile is None:
            raise LedgerUserNotFoundError

        entries = prize_entries_for(is_premium=bool(profile.is_premium))
        created = await DailyPrizeRepo.create_entry_once(
            session,
            user_id=user_id,
            draw_date=draw_date,
            entries=entries,
            created_at=now_utc,
        )
        if created:
            logger.info("daily_prize_enrolled", user_id=user_id, draw_date=draw_date.isoformat(), entries=entries)
        return created

    @staticmethod
    async def award(
        session: AsyncSession,
        *,
        draw_date: date,
        now_utc: datetime,
        prize_amount: int = DAILY_PRIZE_DEFAULT_AMOUNT,
        rng: random.Random | None = None,
    ) -> PrizeAward | None:
        if not is_valid_amount(prize_amount):
            raise InvalidAmountError

        existing = await DailyPrizeRepo.get_winner(session, draw_date=draw_date)
        if existing is not None:
            return PrizeAward(
                draw_date=existing.draw_date,
                user_id=existing.user_id,
                prize_amount=existing.prize_amount,
                transaction_id=existing.transaction_id,
                awarded_at=existing.created_at,
                created=False,
            )

        entries = await DailyPrizeRepo.list_entries(session, draw_date=draw_date)
        winner_id = pick_weighted_winner(entries, rng=rng)
        if winner_id is None:
            logger.info("daily_prize_no_entries", draw_date=draw_date.isoformat())
            return None

        balance = await ProfilesRepo.add_diamonds(session, user_id=winner_id, delta=prize_amount)
        if balance is None:
            raise LedgerUserNotFoundError
        entry = await TransactionsRepo.create(
            session,
            entry=Transaction(
                sender_id=None,
                receiver_id=winner_id,
                amount=prize_amount,
                transaction_type=TRANSACTION_TYPE_PRIZE,
                status=STATUS_COMPLETED,
                idempotency_key=f"daily_prize:{draw_date.isoformat()}",
                metadata_={"draw_date": draw_date.isoformat(), "entries": len(entries)},
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        await DailyPrizeRepo.create_winner_once(
            session,
            draw_date=draw_date,
            user_id=winner_id,
            prize_amount=prize_amount,
            transaction_id=entry.id,
            created_at=now_utc,
        )
        logger.info(
            "daily_prize_awarded",
            draw_date=draw_date.isoformat(),
            user_id=winner_id,
            prize_amount=prize_amount,
            participants=len(entries),
        )
        return PrizeAward(
            draw_date=draw_date,
            user_id=winner_id,
            prize_amount=prize_amount,
            transaction_id=entry.id,
            awarded_at=now_utc,
            created=True,
        )
