from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.core.time import server_date
from duomatch.db.models.transactions import Transaction
from duomatch.db.repo.daily_tasks_repo import DailyTasksRepo
from duomatch.db.repo.profiles_repo import ProfilesRepo
from duomatch.db.repo.transactions_repo import TransactionsRepo
from duomatch.economy.diamonds.constants import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    TRANSACTION_TYPE_GIFT,
    TRANSACTION_TYPE_PURCHASE,
    TRANSACTION_TYPE_TASK_REWARD,
    TRANSACTION_TYPE_WITHDRAWAL,
)
from duomatch.economy.diamonds.errors import (
    IdempotencyConflictError,
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerUserNotFoundError,
    TaskNotCollectableError,
    WithdrawalNotFoundError,
)
from duomatch.economy.diamonds.rules import is_valid_amount, is_withdrawal_denomination
from duomatch.economy.diamonds.types import (
    PurchaseCreditResult,
    TaskRewardResult,
    TransferResult,
    WithdrawalDestination,
    WithdrawalResult,
)

logger = structlog.get_logger(__name__)


class DiamondLedger:
    """Balance mutations on `profiles.diamond_count`.

    Every method expects to run inside the caller's transaction: balances are
    locked with FOR UPDATE, changed with relative UPDATEs and each delta is
    recorded as exactly one `transactions` row.
    """

    @staticmethod
    async def _apply_delta(session: AsyncSession, *, user_id: str, delta: int) -> int:
        balance = await ProfilesRepo.add_diamonds(session, user_id=user_id, delta=delta)
        if balance is None:
            # Row was locked beforehand, so only the non-negative guard can reject.
            raise InsufficientBalanceError
        return balance

    @staticmethod
    async def transfer(
        session: AsyncSession,
        *,
        sender_id: str,
        receiver_id: str,
        amount: int,
        now_utc: datetime,
    ) -> TransferResult:
        if not is_valid_amount(amount):
            raise InvalidAmountError
        if sender_id == receiver_id:
            raise InvalidAmountError

        balances = await ProfilesRepo.get_balances_for_update(session, [sender_id, receiver_id])
        if sender_id not in balances or receiver_id not in balances:
            raise LedgerUserNotFoundError
        if balances[sender_id] < amount:
            raise InsufficientBalanceError

        sender_balance = await DiamondLedger._apply_delta(session, user_id=sender_id, delta=-amount)
        receiver_balance = await DiamondLedger._apply_delta(session, user_id=receiver_id, delta=amount)
        entry = await TransactionsRepo.create(
            session,
            entry=Transaction(
                sender_id=sender_id,
                receiver_id=receiver_id,
                amount=amount,
                transaction_type=TRANSACTION_TYPE_GIFT,
                status=STATUS_COMPLETED,
                metadata_={},
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info(
            "diamonds_transferred",
            transaction_id=str(entry.id),
            sender_id=sender_id,
            receiver_id=receiver_id,
            amount=amount,
        )
        return TransferResult(
            transaction_id=entry.id,
            sender_balance=sender_balance,
            receiver_balance=receiver_balance,
        )

    @staticmethod
    async def link_message(
        session: AsyncSession,
        *,
        transaction_id: UUID,
        message_id: UUID,
        now_utc: datetime,
    ) -> bool:
        updated = await TransactionsRepo.attach_message(
            session,
            transaction_id=transaction_id,
            message_id=message_id,
            updated_at=now_utc,
        )
        return updated > 0

    @staticmethod
    async def collect_task_reward(
        session: AsyncSession,
        *,
        user_id: str,
        task_id: UUID,
        now_utc: datetime,
    ) -> TaskRewardResult:
        task = await DailyTasksRepo.get_task(session, task_id)
        if task is None:
            raise TaskNotCollectableError

        collected = await DailyTasksRepo.mark_collected_if_ready(
            session,
            user_id=user_id,
            task_id=task_id,
            day=server_date(now_utc),
            collected_at=now_utc,
        )
        if not collected:
            raise TaskNotCollectableError

        balance = await ProfilesRepo.add_diamonds(session, user_id=user_id, delta=task.reward_diamonds)
        if balance is None:
            raise LedgerUserNotFoundError
        entry = await TransactionsRepo.create(
            session,
            entry=Transaction(
                sender_id=None,
                receiver_id=user_id,
                amount=task.reward_diamonds,
                transaction_type=TRANSACTION_TYPE_TASK_REWARD,
                status=STATUS_COMPLETED,
                metadata_={"task_id": str(task_id)},
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info(
            "task_reward_collected",
            user_id=user_id,
            task_id=str(task_id),
            amount=task.reward_diamonds,
        )
        return TaskRewardResult(
            transaction_id=entry.id,
            diamonds_earned=task.reward_diamonds,
            total_diamonds=balance,
        )

    @staticmethod
    async def request_withdrawal(
        session: AsyncSession,
        *,
        user_id: str,
        amount: int,
        destination: WithdrawalDestination,
        now_utc: datetime,
    ) -> WithdrawalResult:
        if not is_withdrawal_denomination(amount):
            raise InvalidAmountError
        if not destination.game_user_id.strip() or not destination.game_zone_id.strip():
            raise InvalidAmountError

        balances = await ProfilesRepo.get_balances_for_update(session, [user_id])
        if user_id not in balances:
            raise LedgerUserNotFoundError
        if balances[user_id] < amount:
            raise InsufficientBalanceError

        balance = await DiamondLedger._apply_delta(session, user_id=user_id, delta=-amount)
        entry = await TransactionsRepo.create(
            session,
            entry=Transaction(
                sender_id=user_id,
                receiver_id=None,
                amount=amount,
                transaction_type=TRANSACTION_TYPE_WITHDRAWAL,
                status=STATUS_PENDING,
                metadata_=destination.as_metadata(),
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info("withdrawal_requested", user_id=user_id, amount=amount, transaction_id=str(entry.id))
        return WithdrawalResult(transaction_id=entry.id, new_balance=balance)

    @staticmethod
    async def credit_purchase(
        session: AsyncSession,
        *,
        user_id: str,
        amount: int,
        idempotency_key: str,
        now_utc: datetime,
        metadata: dict[str, object] | None = None,
    ) -> PurchaseCreditResult:
        if not is_valid_amount(amount):
            raise InvalidAmountError

        existing = await TransactionsRepo.get_by_idempotency_key(session, idempotency_key)
        if existing is not None:
            return await DiamondLedger._purchase_replay(
                session,
                existing=existing,
                user_id=user_id,
                amount=amount,
            )

        balances = await ProfilesRepo.get_balances_for_update(session, [user_id])
        if user_id not in balances:
            raise LedgerUserNotFoundError

        try:
            async with session.begin_nested():
                entry = await TransactionsRepo.create(
                    session,
                    entry=Transaction(
                        sender_id=None,
                        receiver_id=user_id,
                        amount=amount,
                        transaction_type=TRANSACTION_TYPE_PURCHASE,
                        status=STATUS_COMPLETED,
                        idempotency_key=idempotency_key,
                        metadata_=dict(metadata or {}),
                        created_at=now_utc,
                        updated_at=now_utc,
                    ),
                )
        except IntegrityError:
            existing = await TransactionsRepo.get_by_idempotency_key(session, idempotency_key)
            if existing is None:
                raise
            return await DiamondLedger._purchase_replay(
                session,
                existing=existing,
                user_id=user_id,
                amount=amount,
            )

        balance = await DiamondLedger._apply_delta(session, user_id=user_id, delta=amount)
        logger.info(
            "purchase_credited",
            user_id=user_id,
            amount=amount,
            transaction_id=str(entry.id),
        )
        return PurchaseCreditResult(transaction_id=entry.id, new_balance=balance, idempotent_replay=False)

    @staticmethod
    async def _purchase_replay(
        session: AsyncSession,
        *,
        existing: Transaction,
        user_id: str,
        amount: int,
    ) -> PurchaseCreditResult:
        if (
            existing.transaction_type != TRANSACTION_TYPE_PURCHASE
            or existing.receiver_id != user_id
            or existing.amount != amount
        ):
            raise IdempotencyConflictError

        profile = await ProfilesRepo.get_by_id(session, user_id)
        if profile is None:
            raise LedgerUserNotFoundError
        return PurchaseCreditResult(
            transaction_id=existing.id,
            new_balance=int(profile.diamond_count),
            idempotent_replay=True,
        )

    @staticmethod
    async def complete_withdrawal(
        session: AsyncSession,
        *,
        transaction_id: UUID,
        now_utc: datetime,
    ) -> bool:
        """Marks a fulfilled withdrawal; returns False when it was already completed."""
        entry = await TransactionsRepo.get_by_id_for_update(session, transaction_id)
        if entry is None or entry.transaction_type != TRANSACTION_TYPE_WITHDRAWAL:
            raise WithdrawalNotFoundError
        if entry.status == STATUS_COMPLETED:
            return False
        if entry.status != STATUS_PENDING:
            raise WithdrawalNotFoundError

        entry.status = STATUS_COMPLETED
        entry.updated_at = now_utc
        await session.flush()
        logger.info("withdrawal_completed", transaction_id=str(transaction_id), user_id=entry.sender_id)
        return True
