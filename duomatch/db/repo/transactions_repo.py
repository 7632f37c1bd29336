from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.models.transactions import Transaction


class TransactionsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: Transaction) -> Transaction:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def get_by_idempotency_key(
        session: AsyncSession,
        idempotency_key: str,
    ) -> Transaction | None:
        stmt = select(Transaction).where(Transaction.idempotency_key == idempotency_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, transaction_id: UUID) -> Transaction | None:
        stmt = select(Transaction).where(Transaction.id == transaction_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def attach_message(
        session: AsyncSession,
        *,
        transaction_id: UUID,
        message_id: UUID,
        updated_at: datetime,
    ) -> int:
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id, Transaction.message_id.is_(None))
            .values(message_id=message_id, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: str,
        limit: int = 50,
    ) -> list[Transaction]:
        stmt = (
            select(Transaction)
            .where(or_(Transaction.sender_id == user_id, Transaction.receiver_id == user_id))
            .order_by(Transaction.created_at.desc())
            .limit(max(1, min(200, int(limit))))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_pending_withdrawals(session: AsyncSession, *, limit: int = 100) -> list[Transaction]:
        stmt = (
            select(Transaction)
            .where(
                Transaction.transaction_type == "withdrawal",
                Transaction.status == "pending",
            )
            .order_by(Transaction.created_at.asc())
            .limit(max(1, min(500, int(limit))))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
