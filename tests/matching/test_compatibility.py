from itertools import product

import pytest

from duomatch.matching import compatibility
from duomatch.matching.constants import LANES, RANK_LADDER
from duomatch.matching.types import ProfileCard


def _card(**overrides) -> ProfileCard:
    values = {
        "id": "u",
        "name": "U",
        "age": 22,
        "city": "Recife",
        "current_rank": "Epic",
        "favorite_heroes": (),
        "favorite_lines": (),
    }
    values.update(overrides)
    return ProfileCard(**values)


def test_line_compatibility_prefers_complementary_lanes() -> None:
    assert compatibility.line_compatibility(["gold"], ["roam"]) == 1.0
    assert compatibility.line_compatibility(["gold"], ["gold"]) == 0.3
    assert compatibility.line_compatibility(["gold"], ["mid"]) == 0.0
    assert compatibility.line_compatibility(["gold", "mid"], ["mid", "jungle"]) == 1.0


def test_hero_synergy_uses_table_then_shared_hero() -> None:
    assert compatibility.hero_synergy(["Tigreal"], ["Layla"]) == 1.0
    assert compatibility.hero_synergy(["Layla"], ["Layla"]) == 0.5
    assert compatibility.hero_synergy(["Layla"], ["Gusion"]) == 0.0
    assert compatibility.hero_synergy([], ["Gusion"]) == 0.0


@pytest.mark.parametrize(
    ("viewer_rank", "candidate_rank", "expected"),
    [
        ("Epic", "Epic", 1.0),
        ("Epic", "Legend", 0.8),
        ("Epic", "Grandmaster", 0.8),
        ("Epic", "Mythic", 0.6),
        ("Warrior", "Grandmaster", 0.4),
        ("Warrior", "Epic", 0.4),
        ("Warrior", "Mythical Glory", 0.1),
        ("Warrior", "Unranked", 0.5),
    ],
)
def test_rank_proximity(viewer_rank: str, candidate_rank: str, expected: float) -> None:
    assert compatibility.rank_proximity(viewer_rank, candidate_rank) == pytest.approx(expected)


def test_location_proximity_same_city_only() -> None:
    assert compatibility.location_proximity("Recife", "Recife") == 1.0
    assert compatibility.location_proximity("Recife", "Olinda") == 0.6


def test_score_weights_sub_scores() -> None:
    viewer = _card(favorite_lines=("gold",), favorite_heroes=("Tigreal",))
    candidate = _card(id="c", favorite_lines=("roam",), favorite_heroes=("Layla",))

    factors = compatibility.score(viewer, candidate)

    assert factors.line_compatibility == 1.0
    assert factors.hero_synergy == 1.0
    assert factors.rank_proximity == 1.0
    assert factors.location_proximity == 1.0
    assert factors.overall_score == pytest.approx(1.0)


def test_score_stays_within_unit_interval_for_every_rank_and_lane_pair() -> None:
    for (viewer_rank, candidate_rank), (viewer_lane, candidate_lane) in product(
        product(RANK_LADDER, RANK_LADDER),
        product(LANES, LANES),
    ):
        factors = compatibility.score(
            _card(current_rank=viewer_rank, favorite_lines=(viewer_lane,)),
            _card(id="c", current_rank=candidate_rank, favorite_lines=(candidate_lane,), city="Natal"),
        )
        for value in (
            factors.line_compatibility,
            factors.hero_synergy,
            factors.rank_proximity,
            factors.location_proximity,
            factors.overall_score,
        ):
            assert 0.0 <= value <= 1.0


@pytest.mark.parametrize(
    ("overall", "label"),
    [(0.95, "excellent"), (0.8, "excellent"), (0.65, "good"), (0.4, "moderate"), (0.25, "low"), (0.1, "poor")],
)
def test_describe_buckets(overall: float, label: str) -> None:
    assert compatibility.describe(overall) == label
