from __future__ import annotations

from duomatch.matching.constants import FEED_MAX_LIMIT


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    if user_a < user_b:
        return user_a, user_b
    return user_b, user_a


def daily_swipe_limit(*, is_premium: bool, free_limit: int, premium_limit: int) -> int:
    return premium_limit if is_premium else free_limit


def clamp_feed_limit(limit: int) -> int:
    return max(1, min(FEED_MAX_LIMIT, int(limit)))
