from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from duomatch.api.deps import get_viewer_id
from duomatch.core.time import server_date, utc_now
from duomatch.db.session import SessionLocal
from duomatch.economy.diamonds.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    LedgerUserNotFoundError,
    TaskNotCollectableError,
)
from duomatch.economy.diamonds.prize import DailyPrizeService
from duomatch.economy.diamonds.service import DiamondLedger
from duomatch.economy.diamonds.tasks import DailyTasksService
from duomatch.economy.diamonds.types import WithdrawalDestination

router = APIRouter(tags=["diamonds"])


class TransferRequest(BaseModel):
    receiver_id: str = Field(min_length=1, max_length=64)
    amount: int


class TransferResponse(BaseModel):
    transaction_id: UUID
    sender_balance: int = Field(ge=0)
    receiver_balance: int = Field(ge=0)


class DailyTaskResponse(BaseModel):
    task_id: UUID
    name: str
    description: str | None = None
    task_type: str
    target_value: int
    reward_diamonds: int
    current_progress: int = Field(ge=0)
    is_completed: bool
    is_collected: bool


class DailyTasksResponse(BaseModel):
    items: list[DailyTaskResponse]


class TaskRewardResponse(BaseModel):
    transaction_id: UUID
    diamonds_earned: int
    total_diamonds: int = Field(ge=0)


class WithdrawalRequest(BaseModel):
    amount: int
    game_user_id: str = Field(min_length=1, max_length=64)
    game_zone_id: str = Field(min_length=1, max_length=32)


class WithdrawalResponse(BaseModel):
    transaction_id: UUID
    new_balance: int = Field(ge=0)
    status: str = "pending"


class PrizeEnrollResponse(BaseModel):
    draw_date: str
    enrolled: bool


@router.post("/diamonds/transfer", response_model=TransferResponse)
async def transfer_diamonds(payload: TransferRequest, viewer_id: str = Depends(get_viewer_id)) -> TransferResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await DiamondLedger.transfer(
                session,
                sender_id=viewer_id,
                receiver_id=payload.receiver_id,
                amount=payload.amount,
                now_utc=utc_now(),
            )
    except InvalidAmountError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_AMOUNT"}) from exc
    except InsufficientBalanceError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_BALANCE"}) from exc
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return TransferResponse(
        transaction_id=result.transaction_id,
        sender_balance=result.sender_balance,
        receiver_balance=result.receiver_balance,
    )


@router.get("/diamonds/tasks", response_model=DailyTasksResponse)
async def list_daily_tasks(viewer_id: str = Depends(get_viewer_id)) -> DailyTasksResponse:
    async with SessionLocal.begin() as session:
        tasks = await DailyTasksService.list_for_user(session, user_id=viewer_id, now_utc=utc_now())

    return DailyTasksResponse(
        items=[
            DailyTaskResponse(
                task_id=task.task_id,
                name=task.name,
                description=task.description,
                task_type=task.task_type,
                target_value=task.target_value,
                reward_diamonds=task.reward_diamonds,
                current_progress=task.current_progress,
                is_completed=task.is_completed,
                is_collected=task.is_collected,
            )
            for task in tasks
        ]
    )


@router.post("/diamonds/tasks/{task_id}/collect", response_model=TaskRewardResponse)
async def collect_task_reward(task_id: UUID, viewer_id: str = Depends(get_viewer_id)) -> TaskRewardResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await DiamondLedger.collect_task_reward(
                session,
                user_id=viewer_id,
                task_id=task_id,
                now_utc=utc_now(),
            )
    except TaskNotCollectableError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_TASK_NOT_COLLECTABLE"}) from exc
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return TaskRewardResponse(
        transaction_id=result.transaction_id,
        diamonds_earned=result.diamonds_earned,
        total_diamonds=result.total_diamonds,
    )


@router.post("/diamonds/withdrawals", response_model=WithdrawalResponse)
async def request_withdrawal(
    payload: WithdrawalRequest,
    viewer_id: str = Depends(get_viewer_id),
) -> WithdrawalResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await DiamondLedger.request_withdrawal(
                session,
                user_id=viewer_id,
                amount=payload.amount,
                destination=WithdrawalDestination(
                    game_user_id=payload.game_user_id,
                    game_zone_id=payload.game_zone_id,
                ),
                now_utc=utc_now(),
            )
    except InvalidAmountError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_AMOUNT"}) from exc
    except InsufficientBalanceError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_INSUFFICIENT_BALANCE"}) from exc
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return WithdrawalResponse(transaction_id=result.transaction_id, new_balance=result.new_balance)


@router.post("/diamonds/prize/enroll", response_model=PrizeEnrollResponse)
async def enroll_daily_prize(viewer_id: str = Depends(get_viewer_id)) -> PrizeEnrollResponse:
    now_utc = utc_now()
    draw_date = server_date(now_utc)
    try:
        async with SessionLocal.begin() as session:
            enrolled = await DailyPrizeService.enroll(
                session,
                user_id=viewer_id,
                draw_date=draw_date,
                now_utc=now_utc,
            )
    except LedgerUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return PrizeEnrollResponse(draw_date=draw_date.isoformat(), enrolled=enrolled)
