"""Pairwise compatibility scoring between two player profiles.

Every sub-score and the weighted overall score lie in [0, 1]. Pair scores take
the best matching pair, never a sum, so adding more favorites cannot push a
score above 1.
"""

from __future__ import annotations

from collections.abc import Iterable

from duomatch.matching.constants import (
    COMPLEMENTARY_LANES,
    HERO_SHARED_SCORE,
    HERO_SYNERGIES,
    HERO_SYNERGY_SCORE,
    LINE_COMPLEMENTARY_SCORE,
    LINE_SHARED_SCORE,
    OTHER_CITY_SCORE,
    RANK_DISTANCE_PENALTY,
    RANK_LADDER,
    RANK_PROXIMITY_BY_DISTANCE,
    RANK_PROXIMITY_FLOOR,
    RANK_UNKNOWN_SCORE,
    SAME_CITY_SCORE,
    WEIGHT_HERO,
    WEIGHT_LINE,
    WEIGHT_LOCATION,
    WEIGHT_RANK,
)
from duomatch.matching.types import CompatibilityFactors, ProfileCard


def _best_pair_score(
    viewer_items: Iterable[str],
    candidate_items: Iterable[str],
    *,
    table: dict[str, frozenset[str]],
    paired_score: float,
    shared_score: float,
) -> float:
    candidate_list = tuple(candidate_items)
    best = 0.0
    for viewer_item in viewer_items:
        partners = table.get(viewer_item, frozenset())
        for candidate_item in candidate_list:
            if candidate_item in partners:
                best = max(best, paired_score)
            elif viewer_item == candidate_item:
                best = max(best, shared_score)
    return best


def line_compatibility(viewer_lines: Iterable[str], candidate_lines: Iterable[str]) -> float:
    return _best_pair_score(
        viewer_lines,
        candidate_lines,
        table=COMPLEMENTARY_LANES,
        paired_score=LINE_COMPLEMENTARY_SCORE,
        shared_score=LINE_SHARED_SCORE,
    )


def hero_synergy(viewer_heroes: Iterable[str], candidate_heroes: Iterable[str]) -> float:
    return _best_pair_score(
        viewer_heroes,
        candidate_heroes,
        table=HERO_SYNERGIES,
        paired_score=HERO_SYNERGY_SCORE,
        shared_score=HERO_SHARED_SCORE,
    )


def rank_proximity(viewer_rank: str, candidate_rank: str) -> float:
    if viewer_rank not in RANK_LADDER or candidate_rank not in RANK_LADDER:
        return RANK_UNKNOWN_SCORE

    distance = abs(RANK_LADDER.index(viewer_rank) - RANK_LADDER.index(candidate_rank))
    if distance < len(RANK_PROXIMITY_BY_DISTANCE):
        return RANK_PROXIMITY_BY_DISTANCE[distance]
    return max(RANK_PROXIMITY_FLOOR, 1 - distance * RANK_DISTANCE_PENALTY)


def location_proximity(viewer_city: str, candidate_city: str) -> float:
    if viewer_city == candidate_city:
        return SAME_CITY_SCORE
    return OTHER_CITY_SCORE


def score(viewer: ProfileCard, candidate: ProfileCard) -> CompatibilityFactors:
    line = line_compatibility(viewer.favorite_lines, candidate.favorite_lines)
    hero = hero_synergy(viewer.favorite_heroes, candidate.favorite_heroes)
    rank = rank_proximity(viewer.current_rank, candidate.current_rank)
    location = location_proximity(viewer.city, candidate.city)
    overall = (
        line * WEIGHT_LINE
        + hero * WEIGHT_HERO
        + rank * WEIGHT_RANK
        + location * WEIGHT_LOCATION
    )
    return CompatibilityFactors(
        line_compatibility=line,
        hero_synergy=hero,
        rank_proximity=rank,
        location_proximity=location,
        overall_score=min(1.0, max(0.0, overall)),
    )


def describe(overall_score: float) -> str:
    if overall_score >= 0.8:
        return "excellent"
    if overall_score >= 0.6:
        return "good"
    if overall_score >= 0.4:
        return "moderate"
    if overall_score >= 0.2:
        return "low"
    return "poor"
