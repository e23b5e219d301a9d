"""Quest models - generation request, composed quests, and results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sidequest.models.blocks import ContentBlock
from sidequest.models.common import Difficulty, QuestMode, Theme, Timeframe, Transportation
from sidequest.models.locations import LocationCandidate


class UserLocation(BaseModel):
    """Location supplied by the location-detection collaborator."""

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    region: str | None = None
    city: str | None = None


class QuestRequest(BaseModel):
    """Caller request for quest generation."""

    timeframe: Timeframe
    difficulty: Difficulty
    transportation: Transportation
    theme: Theme | None = None
    location: UserLocation | None = None


class ComposedQuest(BaseModel):
    """A composed, user-facing recommendation."""

    model_config = ConfigDict(frozen=True)

    id: str
    mode: QuestMode
    description: str
    total_minutes: int = Field(..., ge=0)
    difficulty: Difficulty
    primary_location: LocationCandidate | None = None
    supplementary_locations: tuple[LocationCandidate, ...] = ()
    block: ContentBlock | None = None
    tags: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_mode_shape(self) -> "ComposedQuest":
        if self.mode == QuestMode.pure_location:
            if not self.location_refs:
                raise ValueError("pure-location quest needs at least one location")
            if self.block is not None:
                raise ValueError("pure-location quest cannot carry a content block")
        elif self.block is None:
            raise ValueError("content-block quest needs exactly one content block")
        return self

    @property
    def location_refs(self) -> list[LocationCandidate]:
        """Primary plus supplementary locations."""
        refs = [self.primary_location] if self.primary_location is not None else []
        refs.extend(self.supplementary_locations)
        return refs


ErrorCode = Literal[
    "no_candidates",
    "no_eligible_blocks",
    "location_required",
    "content_unavailable",
    "generation_exhausted",
]


class GenerationResult(BaseModel):
    """Outcome of one generation request.

    considered_count is the number of content blocks (content-block mode) or
    location candidates (pure-location mode) that survived filtering.
    """

    success: bool
    mode: QuestMode
    quests: list[ComposedQuest] = Field(default_factory=list)
    considered_count: int = 0
    error: str | None = None
    error_code: ErrorCode | None = None
