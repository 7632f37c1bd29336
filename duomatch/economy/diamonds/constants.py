from __future__ import annotations

WITHDRAWAL_DENOMINATIONS: tuple[int, ...] = (165, 275, 565)

TRANSACTION_TYPE_GIFT = "gift"
TRANSACTION_TYPE_TASK_REWARD = "task_reward"
TRANSACTION_TYPE_WITHDRAWAL = "withdrawal"
TRANSACTION_TYPE_PURCHASE = "purchase"
TRANSACTION_TYPE_PRIZE = "prize"

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"

TASK_TYPE_SWIPES = "swipes"
TASK_TYPE_MESSAGES = "messages"
TASK_TYPE_LOGIN = "login"
TASK_TYPES: frozenset[str] = frozenset({TASK_TYPE_SWIPES, TASK_TYPE_MESSAGES, TASK_TYPE_LOGIN})

DAILY_PRIZE_DEFAULT_AMOUNT = 30
DAILY_PRIZE_FREE_ENTRIES = 1
DAILY_PRIZE_PREMIUM_ENTRIES = 2
