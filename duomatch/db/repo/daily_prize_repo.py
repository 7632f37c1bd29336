from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.daily_prize import DailyPrizeEntry, DailyPrizeWinner


class DailyPrizeRepo:
    @staticmethod
    async def create_entry_once(
        session: AsyncSession,
        *,
        user_id: str,
        draw_date: date,
        entries: int,
        created_at: datetime,
    ) -> bool:
        stmt = (
            insert(DailyPrizeEntry)
            .values(user_id=user_id, draw_date=draw_date, entries=entries, created_at=created_at)
            .on_conflict_do_nothing(index_elements=[DailyPrizeEntry.user_id, DailyPrizeEntry.draw_date])
            .returning(DailyPrizeEntry.user_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_entries(session: AsyncSession, *, draw_date: date) -> list[tuple[str, int]]:
        stmt = (
            select(DailyPrizeEntry.user_id, DailyPrizeEntry.entries)
            .where(DailyPrizeEntry.draw_date == draw_date)
            .order_by(DailyPrizeEntry.user_id.asc())
        )
        result = await session.execute(stmt)
        return [(user_id, int(entries)) for user_id, entries in result.all()]

    @staticmethod
    async def get_winner(session: AsyncSession, *, draw_date: date) -> DailyPrizeWinner | None:
        return await session.get(DailyPrizeWinner, draw_date)

    @staticmethod
    async def create_winner_once(
        session: AsyncSession,
        *,
        draw_date: date,
        user_id: str,
        prize_amount: int,
        transaction_id: UUID,
        created_at: datetime,
    ) -> bool:
        stmt = (
            insert(DailyPrizeWinner)
            .values(
                draw_date=draw_date,
                user_id=user_id,
                prize_amount=prize_amount,
                transaction_id=transaction_id,
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=[DailyPrizeWinner.draw_date])
            .returning(DailyPrizeWinner.draw_date)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
