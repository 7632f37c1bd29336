from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.matches import Match
from duomatch.matching.rules import canonical_pair


class MatchesRepo:
    @staticmethod
    async def create_canonical(
        session: AsyncSession,
        *,
        user_a: str,
        user_b: str,
        created_at: datetime,
    ) -> tuple[UUID, bool]:
        user1_id, user2_id = canonical_pair(user_a, user_b)
        stmt = (
            insert(Match)
            .values(user1_id=user1_id, user2_id=user2_id, created_at=created_at)
            .on_conflict_do_nothing(index_elements=[Match.user1_id, Match.user2_id])
            .returning(Match.id)
        )
        result = await session.execute(stmt)
        match_id = result.scalar_one_or_none()
        if match_id is not None:
            return match_id, True

        existing = await MatchesRepo.get_by_pair(session, user_a=user1_id, user_b=user2_id)
        if existing is None:
            raise RuntimeError("match insert conflicted but no match row exists")
        return existing.id, False

    @staticmethod
    async def get_by_pair(session: AsyncSession, *, user_a: str, user_b: str) -> Match | None:
        user1_id, user2_id = canonical_pair(user_a, user_b)
        stmt = select(Match).where(Match.user1_id == user1_id, Match.user2_id == user2_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_user(session: AsyncSession, *, user_id: str) -> list[Match]:
        stmt = (
            select(Match)
            .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
            .order_by(Match.created_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_matched_ids(session: AsyncSession, *, user_id: str) -> list[str]:
        matches = await MatchesRepo.list_for_user(session, user_id=user_id)
        return [match.user2_id if match.user1_id == user_id else match.user1_id for match in matches]

    @staticmethod
    async def update_last_read(
        session: AsyncSession,
        *,
        match_id: UUID,
        side: str,
        message_id: UUID,
    ) -> int:
        if side == "user1":
            values = {"user1_last_read_message_id": message_id}
        elif side == "user2":
            values = {"user2_last_read_message_id": message_id}
        else:
            raise ValueError(f"unknown match side: {side}")

        stmt = (
            update(Match)
            .where(Match.id == match_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0
