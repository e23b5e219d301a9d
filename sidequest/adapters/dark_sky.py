"""Curated dark-sky provider backed by a bundled dataset of certified places."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from sidequest.adapters.geo import haversine_miles
from sidequest.adapters.provenance import provenance_for_fixture
from sidequest.models.common import QuestMode, Theme, TimeOfDay, Weather
from sidequest.models.locations import LocationCandidate, ProviderGate, SearchParams, SearchResult
from sidequest.providers.base import LocationProvider

logger = logging.getLogger(__name__)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
DARK_SKY_PATH = FIXTURES_DIR / "dark_sky_places.json"

# Stargazing is worth a longer drive than the engine-wide default
DEFAULT_RADIUS_MILES = 100.0
DEFAULT_LIMIT = 5


class DarkSkyProvider(LocationProvider):
    """Certified dark-sky places near the query point."""

    def __init__(
        self,
        *,
        weight: float = 4.0,
        gate: ProviderGate | None = None,
        path: Path = DARK_SKY_PATH,
    ) -> None:
        super().__init__(
            "Stargazing Explorer",
            "stargazing",
            weight,
            gate
            or ProviderGate(
                weather=Weather.clear,
                time_of_day=TimeOfDay.night,
                modes=frozenset({QuestMode.pure_location}),
                themes=frozenset({Theme.adventure}),
            ),
        )
        self._path = path
        self._places: list[dict[str, Any]] | None = None

    def _service_available(self) -> bool:
        return self._path.exists()

    def _load(self) -> list[dict[str, Any]]:
        if self._places is None:
            with open(self._path) as f:
                self._places = json.load(f)
        return self._places

    async def search(self, params: SearchParams) -> SearchResult:
        """Return certified places within the radius, nearest first."""
        try:
            places = await asyncio.to_thread(self._load)
        except (OSError, ValueError) as e:
            logger.warning(f"Dark sky dataset unreadable: {e}")
            return SearchResult.failed(f"Dark sky dataset unreadable: {e}")

        radius = params.radius_miles or DEFAULT_RADIUS_MILES
        limit = params.limit or DEFAULT_LIMIT

        nearby: list[tuple[float, dict[str, Any]]] = []
        for place in places:
            distance = haversine_miles(params.lat, params.lon, place["lat"], place["lng"])
            if distance <= radius:
                nearby.append((distance, place))
        nearby.sort(key=lambda pair: pair[0])

        candidates = [self._to_candidate(place, distance) for distance, place in nearby[:limit]]
        return SearchResult.ok(
            candidates,
            api_calls=0,
            provenance=provenance_for_fixture("fixtures.dark_sky", self._path.name),
        )

    def _to_candidate(self, place: dict[str, Any], distance: float) -> LocationCandidate:
        designation = place["designation"]
        return LocationCandidate(
            id=f"darksky-{place['id']}",
            title=place["name"],
            description=(
                f"{place['description']} Certified {designation} tier dark sky place."
            ),
            lat=place["lat"],
            lon=place["lng"],
            place=place.get("state", ""),
            provider_type=self.type,
            url=place.get("website_url"),
            distance_miles=round(distance, 1),
            tags=("darksky-certified", f"{designation.lower()}-tier"),
        )
