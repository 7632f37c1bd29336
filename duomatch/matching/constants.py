from __future__ import annotations

RANK_LADDER: tuple[str, ...] = (
    "Warrior",
    "Elite",
    "Master",
    "Grandmaster",
    "Epic",
    "Legend",
    "Mythic",
    "Mythical Glory",
)

LANES: tuple[str, ...] = ("gold", "mid", "exp", "jungle", "roam")

COMPLEMENTARY_LANES: dict[str, frozenset[str]] = {
    "gold": frozenset({"roam", "jungle"}),
    "mid": frozenset({"jungle", "roam"}),
    "exp": frozenset({"roam", "jungle"}),
    "jungle": frozenset({"gold", "mid", "exp"}),
    "roam": frozenset({"gold", "mid", "exp"}),
}

HERO_SYNERGIES: dict[str, frozenset[str]] = {
    # tank + marksman
    "Tigreal": frozenset({"Layla", "Miya", "Bruno", "Clint", "Moskov"}),
    "Franco": frozenset({"Granger", "Bruno", "Karrie", "Wanwan"}),
    "Johnson": frozenset({"Odette", "Aurora", "Kagura", "Chang'e"}),
    "Khufra": frozenset({"Granger", "Bruno", "Karrie"}),
    "Grock": frozenset({"Layla", "Hanabi", "Miya"}),
    # support + marksman
    "Angela": frozenset({"Granger", "Bruno", "Karrie", "Wanwan", "Claude"}),
    "Estes": frozenset({"Layla", "Miya", "Hanabi", "Irithel"}),
    "Rafaela": frozenset({"Bruno", "Clint", "Moskov", "Yi Sun-shin"}),
    "Diggie": frozenset({"Granger", "Karrie", "Wanwan"}),
    "Mathilda": frozenset({"Bruno", "Granger", "Claude"}),
    # assassin + mage
    "Gusion": frozenset({"Aurora", "Eudora", "Kagura", "Cyclops"}),
    "Lancelot": frozenset({"Odette", "Chang'e", "Lunox", "Pharsa"}),
    "Hayabusa": frozenset({"Pharsa", "Cyclops", "Harley", "Lylia"}),
    "Ling": frozenset({"Aurora", "Eudora", "Vale"}),
    "Benedetta": frozenset({"Kagura", "Lunox", "Yve"}),
    # fighter + support
    "Chou": frozenset({"Angela", "Estes", "Rafaela"}),
    "Paquito": frozenset({"Mathilda", "Diggie", "Angela"}),
    "Yu Zhong": frozenset({"Estes", "Angela", "Floryn"}),
    "Phoveus": frozenset({"Rafaela", "Diggie", "Mathilda"}),
    # reverse entries
    "Granger": frozenset({"Franco", "Angela", "Diggie", "Mathilda"}),
    "Bruno": frozenset({"Tigreal", "Franco", "Angela", "Rafaela"}),
    "Karrie": frozenset({"Franco", "Angela", "Diggie", "Khufra"}),
    "Wanwan": frozenset({"Angela", "Franco", "Diggie"}),
    "Claude": frozenset({"Angela", "Mathilda", "Tigreal"}),
    "Kagura": frozenset({"Johnson", "Gusion", "Benedetta"}),
    "Lunox": frozenset({"Lancelot", "Benedetta", "Chang'e"}),
    "Aurora": frozenset({"Johnson", "Gusion", "Ling"}),
    "Pharsa": frozenset({"Lancelot", "Hayabusa", "Ling"}),
    "Cyclops": frozenset({"Gusion", "Hayabusa", "Harley"}),
}

LINE_COMPLEMENTARY_SCORE = 1.0
LINE_SHARED_SCORE = 0.3
HERO_SYNERGY_SCORE = 1.0
HERO_SHARED_SCORE = 0.5
RANK_UNKNOWN_SCORE = 0.5
RANK_PROXIMITY_BY_DISTANCE: tuple[float, ...] = (1.0, 0.8, 0.6, 0.4)
RANK_DISTANCE_PENALTY = 0.15
RANK_PROXIMITY_FLOOR = 0.1
SAME_CITY_SCORE = 1.0
OTHER_CITY_SCORE = 0.6

WEIGHT_LINE = 0.4
WEIGHT_HERO = 0.3
WEIGHT_RANK = 0.2
WEIGHT_LOCATION = 0.1

FREE_DAILY_SWIPE_LIMIT = 20
PREMIUM_DAILY_SWIPE_LIMIT = 50

FEED_INITIAL_BATCH = 10
FEED_TOP_UP_BATCH = 5
FEED_TOP_UP_THRESHOLD = 2
FEED_OVERFETCH_FACTOR = 3
FEED_MAX_LIMIT = 50

FILTER_MIN_AGE = 18
FILTER_MAX_AGE = 99
