from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from duomatch.api.deps import assert_internal_access
from duomatch.core.time import utc_now
from duomatch.db.session import SessionLocal
from duomatch.economy.diamonds.errors import (
    IdempotencyConflictError,
    InvalidAmountError,
    LedgerUserNotFoundError,
    WithdrawalNotFoundError,
)
from duomatch.economy.diamonds.service import DiamondLedger

router = APIRouter(tags=["internal", "diamonds"])
logger = structlog.get_logger(__name__)


class PurchaseCreditRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    amount: int
    idempotency_key: str = Field(min_length=8, max_length=96)
    metadata: dict[str, object] = Field(default_factory=dict)


class PurchaseCreditResponse(BaseModel):
    transaction_id: UUID
    new_balance: int = Field(ge=0)
    idempotent_replay: bool


class CompleteWithdrawalResponse(BaseModel):
    transaction_id: UUID
    status: str
    changed: bool


@router.post("/internal/diamonds/purchase-credit", response_model=PurchaseCreditResponse)
async def credit_purchase(payload: PurchaseCreditRequest, request: Request) -> PurchaseCreditResponse:
    assert_internal_access(request, scope="diamonds_purchase_credit")

    try:
        async with SessionLocal.begin() as session:
            result = await DiamondLedger.credit_purchase(
                session,
                user_id=payload.user_id,
                amount=payload.amount,
                idempotency_key=payload.idempotency_key,
                metadata=payload.metadata,
                now_utc=utc_now(),
            )
    except InvalidAmountError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_AMOUNT"}) from exc
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc
    except IdempotencyConflictError as exc:
        logger.warning("purchase_credit_idempotency_conflict", user_id=payload.user_id)
        raise HTTPException(status_code=409, detail={"code": "E_IDEMPOTENCY_CONFLICT"}) from exc

    return PurchaseCreditResponse(
        transaction_id=result.transaction_id,
        new_balance=result.new_balance,
        idempotent_replay=result.idempotent_replay,
    )


@router.post(
    "/internal/withdrawals/{transaction_id}/complete",
    response_model=CompleteWithdrawalResponse,
)
async def complete_withdrawal(transaction_id: UUID, request: Request) -> CompleteWithdrawalResponse:
    assert_internal_access(request, scope="withdrawals_complete")

    try:
        async with SessionLocal.begin() as session:
            changed = await DiamondLedger.complete_withdrawal(
                session,
                transaction_id=transaction_id,
                now_utc=utc_now(),
            )
    except WithdrawalNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_WITHDRAWAL_NOT_FOUND"}) from exc

    return CompleteWithdrawalResponse(transaction_id=transaction_id, status="completed", changed=changed)
