from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SwipeOutcome(str, Enum):
    RECORDED = "RECORDED"
    DUPLICATE = "DUPLICATE"
    LIMIT_REACHED = "LIMIT_REACHED"


@dataclass(frozen=True, slots=True)
class ProfileCard:
    id: str
    name: str
    age: int
    city: str
    current_rank: str
    favorite_heroes: tuple[str, ...] = ()
    favorite_lines: tuple[str, ...] = ()
    is_premium: bool = False
    country: str | None = None
    state: str | None = None
    bio: str | None = None
    last_active_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class FeedFilters:
    min_age: int = 18
    max_age: int = 35
    ranks: tuple[str, ...] = ()
    states: tuple[str, ...] = ()
    cities: tuple[str, ...] = ()
    lanes: tuple[str, ...] = ()
    heroes: tuple[str, ...] = ()
    compatibility_mode: bool = True


@dataclass(frozen=True, slots=True)
class CompatibilityFactors:
    line_compatibility: float
    hero_synergy: float
    rank_proximity: float
    location_proximity: float
    overall_score: float


@dataclass(frozen=True, slots=True)
class FeedCandidate:
    profile: ProfileCard
    compatibility: CompatibilityFactors | None = None


@dataclass(frozen=True, slots=True)
class SwipeLimits:
    daily_limit: int
    used_today: int
    is_premium: bool

    @property
    def remaining(self) -> int:
        return max(0, self.daily_limit - self.used_today)

    @property
    def can_swipe(self) -> bool:
        return self.remaining > 0


@dataclass(frozen=True, slots=True)
class SwipeResult:
    outcome: SwipeOutcome
    remaining_swipes: int
    swipe_id: str | None = None
    matched: bool = False
    match_id: str | None = None
    match_created: bool = False


@dataclass(frozen=True, slots=True)
class RewindResult:
    swipe_id: str
    candidate: ProfileCard
    used_today: int


@dataclass(frozen=True, slots=True)
class MatchCreation:
    match_id: str
    user1_id: str
    user2_id: str
    created: bool
