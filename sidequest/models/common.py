"""Common types and enums shared across all models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Difficulty(str, Enum):
    """Ordinal difficulty scale (easy < medium < hard < extreme)."""

    easy = "easy"
    medium = "medium"
    hard = "hard"
    extreme = "extreme"

    @property
    def rank(self) -> int:
        return DIFFICULTY_RANKS[self]


DIFFICULTY_RANKS: dict[Difficulty, int] = {
    Difficulty.easy: 1,
    Difficulty.medium: 2,
    Difficulty.hard: 3,
    Difficulty.extreme: 4,
}


class Timeframe(str, Enum):
    """How much time the user has."""

    quick = "quick"
    afternoon = "afternoon"
    day = "day"
    epic = "epic"


class Transportation(str, Enum):
    """User transportation."""

    has_car = "has_car"
    no_car = "no_car"


class TransportRequirement(str, Enum):
    """Transportation a content block needs."""

    car_required = "car_required"
    car_optional = "car_optional"
    no_car_needed = "no_car_needed"


class Theme(str, Enum):
    """Requested quest theme."""

    journey = "journey"
    life_changing = "life_changing"
    playbook = "playbook"
    virtuous = "virtuous"
    adventure = "adventure"
    wildcard = "wildcard"


class QuestMode(str, Enum):
    """Composer operating mode."""

    pure_location = "pure_location"
    content_block = "content_block"


class Season(str, Enum):
    spring = "spring"
    summer = "summer"
    fall = "fall"
    winter = "winter"
    any = "any"


class Weather(str, Enum):
    clear = "clear"
    rain = "rain"
    snow = "snow"
    any = "any"


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"
    any = "any"


class Provenance(BaseModel):
    """Provenance metadata for provider results."""

    source: str  # Provider-specific identifier (e.g., "provider.google_places.google_cat_cafe")
    ref_id: str | None = None
    source_url: str | None = None
    fetched_at: datetime
    cache_hit: bool | None = None
