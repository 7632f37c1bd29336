from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class WithdrawalDestination:
    game_user_id: str
    game_zone_id: str

    def as_metadata(self) -> dict[str, str]:
        return {"game_user_id": self.game_user_id, "game_zone_id": self.game_zone_id}


@dataclass(frozen=True, slots=True)
class TransferResult:
    transaction_id: UUID
    sender_balance: int
    receiver_balance: int


@dataclass(frozen=True, slots=True)
class TaskRewardResult:
    transaction_id: UUID
    diamonds_earned: int
    total_diamonds: int


@dataclass(frozen=True, slots=True)
class WithdrawalResult:
    transaction_id: UUID
    new_balance: int


@dataclass(frozen=True, slots=True)
class PurchaseCreditResult:
    transaction_id: UUID
    new_balance: int
    idempotent_replay: bool


@dataclass(frozen=True, slots=True)
class DailyTaskView:
    task_id: UUID
    name: str
    description: str | None
    task_type: str
    target_value: int
    reward_diamonds: int
    current_progress: int
    is_completed: bool
    is_collected: bool


@dataclass(frozen=True, slots=True)
class PrizeAward:
    draw_date: date
    user_id: str
    prize_amount: int
    transaction_id: UUID
    awarded_at: datetime
    created: bool
