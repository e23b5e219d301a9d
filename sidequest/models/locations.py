"""Location models - normalized provider output and search context."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from sidequest.models.common import Provenance, QuestMode, Season, Theme, TimeOfDay, Weather


class LocationCandidate(BaseModel):
    """A normalized point of interest returned by any provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    place: str = ""  # Human-readable place string
    provider_type: str
    url: str | None = None
    phone: str | None = None
    hours: str | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    distance_miles: float | None = Field(default=None, ge=0)
    tags: tuple[str, ...] = ()


class SearchParams(BaseModel):
    """Parameters for a provider search."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False)
    radius_miles: float | None = Field(default=None, gt=0)
    limit: int | None = Field(default=None, gt=0)


class ProviderConditions(BaseModel):
    """Situational context used to filter providers.

    Any field left as None is unknown and matches every gate.
    """

    model_config = ConfigDict(frozen=True)

    season: Season | None = None
    weather: Weather | None = None
    time_of_day: TimeOfDay | None = None
    region: str | None = None
    mode: QuestMode | None = None
    theme: Theme | None = None


class ProviderGate(BaseModel):
    """Conditions under which a provider may be activated.

    season/weather/time_of_day default to "any"; regions/modes/themes default
    to None which means unrestricted.
    """

    model_config = ConfigDict(frozen=True)

    season: Season = Season.any
    weather: Weather = Weather.any
    time_of_day: TimeOfDay = TimeOfDay.any
    regions: frozenset[str] | None = None
    modes: frozenset[QuestMode] | None = None
    themes: frozenset[Theme] | None = None

    def admits(self, conditions: ProviderConditions | None) -> bool:
        """Check whether the gate is satisfied by the given conditions."""
        if conditions is None:
            return True

        if self.regions is not None and conditions.region is not None:
            if conditions.region not in self.regions:
                return False

        if conditions.season is not None and self.season != Season.any:
            if self.season != conditions.season:
                return False

        if conditions.weather is not None and self.weather != Weather.any:
            if self.weather != conditions.weather:
                return False

        if conditions.time_of_day is not None and self.time_of_day != TimeOfDay.any:
            if self.time_of_day != conditions.time_of_day:
                return False

        if self.modes is not None and conditions.mode is not None:
            if conditions.mode not in self.modes:
                return False

        if self.themes is not None and conditions.theme is not None:
            if conditions.theme not in self.themes:
                return False

        return True


@dataclass
class SearchResult:
    """Tagged success/failure result of a provider search."""

    success: bool
    candidates: list[LocationCandidate] = field(default_factory=list)
    error: str | None = None
    api_calls: int = 0
    provenance: Provenance | None = None

    @classmethod
    def ok(
        cls,
        candidates: list[LocationCandidate],
        *,
        api_calls: int = 1,
        provenance: Provenance | None = None,
    ) -> "SearchResult":
        return cls(success=True, candidates=candidates, api_calls=api_calls, provenance=provenance)

    @classmethod
    def failed(cls, error: str, *, api_calls: int = 0) -> "SearchResult":
        return cls(success=False, candidates=[], error=error, api_calls=api_calls)


class ProviderSummary(BaseModel):
    """Caller-facing description of one registered provider."""

    name: str
    type: str
    weight: float
    available: bool
    description: str


class RegistryStats(BaseModel):
    """Read-only registry introspection."""

    total: int
    enabled: int
    types: list[str]
    last_selected_type: str | None
