"""Content-block eligibility filter and block helpers."""

from collections.abc import Iterable

from sidequest.models.blocks import ContentBlock
from sidequest.models.common import (
    DIFFICULTY_RANKS,
    Difficulty,
    Theme,
    Timeframe,
    Transportation,
    TransportRequirement,
)
from sidequest.models.quests import QuestRequest

# Longest block duration allowed per timeframe (minutes)
TIMEFRAME_LIMITS: dict[Timeframe, int] = {
    Timeframe.quick: 60,
    Timeframe.afternoon: 240,
    Timeframe.day: 480,
    Timeframe.epic: 1440,
}

THEME_TAGS: dict[Theme, frozenset[str]] = {
    Theme.journey: frozenset({"journey", "adventure", "travel"}),
    Theme.life_changing: frozenset({"life_changing", "growth"}),
    Theme.playbook: frozenset({"playbook", "social", "romantic"}),
    Theme.virtuous: frozenset({"virtuous", "kindness", "community"}),
    Theme.adventure: frozenset({"adventure", "journey"}),
    Theme.wildcard: frozenset({"wildcard"}),
}


def is_eligible(
    block: ContentBlock,
    request: QuestRequest,
    *,
    exclude_location_dependent: bool = False,
) -> bool:
    """Check whether a block fits the request.

    A block is eligible iff its difficulty is within one level of the
    request, it needs no car the user lacks, its theme tags intersect the
    theme's tag set (untagged blocks always pass), and it fits within the
    timeframe ceiling.
    """
    if exclude_location_dependent and block.location_dependent:
        return False

    # 1. Difficulty within +/-1
    if abs(DIFFICULTY_RANKS[block.difficulty] - DIFFICULTY_RANKS[request.difficulty]) > 1:
        return False

    # 2. Transportation
    if (
        request.transportation == Transportation.no_car
        and block.transportation == TransportRequirement.car_required
    ):
        return False

    # 3. Theme
    if request.theme is not None and block.theme_tags:
        if not block.theme_tags & THEME_TAGS[request.theme]:
            return False

    # 4. Duration
    if block.minutes_required > TIMEFRAME_LIMITS[request.timeframe]:
        return False

    return True


def filter_blocks(
    blocks: Iterable[ContentBlock],
    request: QuestRequest,
    *,
    exclude_location_dependent: bool = False,
) -> list[ContentBlock]:
    return [
        b
        for b in blocks
        if is_eligible(b, request, exclude_location_dependent=exclude_location_dependent)
    ]


def average_difficulty(blocks: Iterable[ContentBlock]) -> Difficulty:
    """Rounded mean difficulty, clamped to the scale."""
    ranks = [DIFFICULTY_RANKS[b.difficulty] for b in blocks]
    if not ranks:
        raise ValueError("average_difficulty needs at least one block")
    # Round half up; round() would send 2.5 to 2
    rounded = int(sum(ranks) / len(ranks) + 0.5)
    clamped = max(1, min(4, rounded))
    by_rank = {rank: difficulty for difficulty, rank in DIFFICULTY_RANKS.items()}
    return by_rank[clamped]


def extract_tags(blocks: Iterable[ContentBlock]) -> list[str]:
    """Unique theme tags across blocks, sorted within each block."""
    tags: list[str] = []
    for block in blocks:
        for tag in sorted(block.theme_tags):
            if tag not in tags:
                tags.append(tag)
    return tags
