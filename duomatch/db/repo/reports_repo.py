from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.reports import Report


class ReportsRepo:
    @staticmethod
    async def create_once(
        session: AsyncSession,
        *,
        reporter_id: str,
        reported_id: str,
        match_id: UUID,
        reason: str,
        comment: str | None,
        created_at: datetime,
    ) -> UUID | None:
        stmt = (
            insert(Report)
            .values(
                reporter_id=reporter_id,
                reported_id=reported_id,
                match_id=match_id,
                reason=reason,
                comment=comment,
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=[Report.reporter_id, Report.reported_id, Report.match_id])
            .returning(Report.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_match(
        session: AsyncSession,
        *,
        reporter_id: str,
        reported_id: str,
        match_id: UUID,
    ) -> Report | None:
        stmt = select(Report).where(
            Report.reporter_id == reporter_id,
            Report.reported_id == reported_id,
            Report.match_id == match_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
