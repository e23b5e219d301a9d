"""Content block model - atomic activity descriptions from the content store."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sidequest.models.common import Difficulty, TransportRequirement


class ContentBlock(BaseModel):
    """An atomic activity description, independent of location."""

    model_config = ConfigDict(frozen=True)

    block_id: str
    block_type: Literal[
        "physical", "obtain", "create", "location", "learn", "perform", "costume"
    ] = "physical"
    idea: str
    minutes_required: int = Field(..., ge=0)
    difficulty: Difficulty
    location_dependent: bool = False
    transportation: TransportRequirement = TransportRequirement.no_car_needed
    theme_tags: frozenset[str] = frozenset()
    time_of_day: Literal["anytime", "business_hours", "daylight", "night_only"] = "anytime"
    weather_modifier: Literal["all_weather", "no_rain", "daylight_only", "clear_skies"] = (
        "all_weather"
    )
    cost_estimate: Literal["0", "$", "$$", "$$$"] = "0"
    indoor_outdoor: Literal["indoor", "outdoor", "both"] = "both"
    social_level: Literal["solo", "optional_social", "requires_others"] = "solo"
    equipment_needed: str = ""
    physical_intensity: Literal["low", "moderate", "high"] = "low"
    special_notes: str = ""

    @field_validator("theme_tags", mode="before")
    @classmethod
    def _parse_theme_tags(cls, value: Any) -> Any:
        # Store rows carry tags as comma-separated text
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(t.strip().lower() for t in value if t and t.strip())

    @field_validator("location_dependent", mode="before")
    @classmethod
    def _parse_yes_no(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().upper() in ("YES", "NO"):
            return value.strip().upper() == "YES"
        return value
