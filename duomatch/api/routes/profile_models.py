from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from duomatch.matching.compatibility import describe
from duomatch.matching.types import CompatibilityFactors, ProfileCard


class ProfileCardResponse(BaseModel):
    id: str
    name: str
    age: int
    city: str
    state: str | None = None
    country: str | None = None
    bio: str | None = None
    current_rank: str
    favorite_heroes: list[str]
    favorite_lines: list[str]
    is_premium: bool
    last_active_at: datetime | None = None


class CompatibilityResponse(BaseModel):
    line_compatibility: float = Field(ge=0.0, le=1.0)
    hero_synergy: float = Field(ge=0.0, le=1.0)
    rank_proximity: float = Field(ge=0.0, le=1.0)
    location_proximity: float = Field(ge=0.0, le=1.0)
    overall_score: float = Field(ge=0.0, le=1.0)
    label: str


def profile_card_response(card: ProfileCard) -> ProfileCardResponse:
    return ProfileCardResponse(
        id=card.id,
        name=card.name,
        age=card.age,
        city=card.city,
        state=card.state,
        country=card.country,
        bio=card.bio,
        current_rank=card.current_rank,
        favorite_heroes=list(card.favorite_heroes),
        favorite_lines=list(card.favorite_lines),
        is_premium=card.is_premium,
        last_active_at=card.last_active_at,
    )


def compatibility_response(factors: CompatibilityFactors | None) -> CompatibilityResponse | None:
    if factors is None:
        return None
    return CompatibilityResponse(
        line_compatibility=factors.line_compatibility,
        hero_synergy=factors.hero_synergy,
        rank_proximity=factors.rank_proximity,
        location_proximity=factors.location_proximity,
        overall_score=factors.overall_score,
        label=describe(factors.overall_score),
    )
