"""Interest scorer - heuristic quality measure for candidates and quests.

Scoring components for a single candidate:
1. Provider tier: 1-5 points from the provider type (unknown types score 1)
2. Rating bonus: +1 for >= 4.5, +0.5 for [4.0, 4.5)
3. Description bonus: +0.5 for descriptions over 100 characters
4. Source bonus: +1 for the curated source, otherwise +0.3 for any URL
"""

import math
from collections.abc import Iterable
from typing import Any

from sidequest.models.locations import LocationCandidate
from sidequest.models.quests import ComposedQuest

PROVIDER_TIERS: dict[str, float] = {
    # Highest novelty
    "obscura": 5,
    # High
    "wind_generator": 4,
    "google_psychic": 4,
    "google_cat_cafe": 4,
    "google_japanese_inn": 4,
    "stargazing": 4,
    # Medium-high
    "google_observation_deck": 3,
    "lighthouse": 3,
    "google_off_roading": 3,
    # Medium
    "hiking": 2,
    "beach": 2,
    "google_beach": 2,
    "google_hiking_area": 2,
    "skateboard_park": 2,
    "google_marina": 2,
    # Generic outdoor
    "mountain": 1,
    "national_park": 1,
    "pier": 1,
    "trail": 1,
}

DEFAULT_TIER = 1.0
CURATED_SOURCE = "atlasobscura"
MULTI_LOCATION_BONUS = 0.5
MULTI_LOCATION_FLOOR = 3.0

CATEGORIES: tuple[tuple[float, str], ...] = (
    (5, "Legendary"),
    (4, "Epic"),
    (3, "Cool"),
    (2, "Interesting"),
    (1, "Standard"),
)


def round_half_up(value: float) -> float:
    """Round to one decimal place with ties going up (2.15 -> 2.2).

    The builtin round() works on the exact binary value, so averages such
    as 2.15 would land on 2.1.
    """
    return math.floor(value * 10 + 0.5) / 10


def score_breakdown(candidate: LocationCandidate) -> dict[str, Any]:
    """Compute score components for one candidate (used for logging)."""
    components: dict[str, Any] = {
        "tier": PROVIDER_TIERS.get(candidate.provider_type, DEFAULT_TIER),
    }

    if candidate.rating is not None:
        if candidate.rating >= 4.5:
            components["rating_bonus"] = 1.0
        elif candidate.rating >= 4.0:
            components["rating_bonus"] = 0.5

    if len(candidate.description) > 100:
        components["description_bonus"] = 0.5

    if candidate.url and CURATED_SOURCE in candidate.url:
        components["source_bonus"] = 1.0
    elif candidate.url:
        components["source_bonus"] = 0.3

    return components


def score_candidate(candidate: LocationCandidate) -> float:
    """Score a single candidate, rounded to one decimal place."""
    total = sum(v for v in score_breakdown(candidate).values())
    return round_half_up(total)


def score_quest(quest: ComposedQuest) -> float:
    """Average candidate score over a quest's location references.

    Multi-location quests whose average clears 3 earn a +0.5 bonus. Quests
    without locations score 0.
    """
    refs = quest.location_refs
    if not refs:
        return 0.0

    average = sum(score_candidate(c) for c in refs) / len(refs)
    if len(refs) > 1 and average >= MULTI_LOCATION_FLOOR:
        average += MULTI_LOCATION_BONUS
    return round_half_up(average)


def categorize(score: float) -> str:
    """Map a score to its category label."""
    for floor, label in CATEGORIES:
        if score >= floor:
            return label
    return "Basic"


def meets_minimum(quest: ComposedQuest, threshold: float) -> bool:
    return score_quest(quest) >= threshold


def sort_descending(quests: Iterable[ComposedQuest]) -> list[ComposedQuest]:
    """Stable sort by quest score, highest first."""
    return sorted(quests, key=score_quest, reverse=True)
