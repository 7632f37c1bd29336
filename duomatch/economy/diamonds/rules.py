from __future__ import annotations

import random
from collections.abc import Sequence

from duomatch.economy.diamonds.constants import (
    DAILY_PRIZE_FREE_ENTRIES,
    DAILY_PRIZE_PREMIUM_ENTRIES,
    WITHDRAWAL_DENOMINATIONS,
)


def is_valid_amount(amount: int) -> bool:
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


def is_withdrawal_denomination(amount: int) -> bool:
    return amount in WITHDRAWAL_DENOMINATIONS


def prize_entries_for(*, is_premium: bool) -> int:
    return DAILY_PRIZE_PREMIUM_ENTRIES if is_premium else DAILY_PRIZE_FREE_ENTRIES


def pick_weighted_winner(
    entries: Sequence[tuple[str, int]],
    *,
    rng: random.Random | None = None,
) -> str | None:
    """Each user is drawn with probability proportional to their entry count."""
    pool = [(user_id, weight) for user_id, weight in entries if weight > 0]
    if not pool:
        return None
    chooser = rng or random.SystemRandom()
    user_ids = [user_id for user_id, _ in pool]
    weights = [weight for _, weight in pool]
    return chooser.choices(user_ids, weights=weights, k=1)[0]
