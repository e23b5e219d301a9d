"""OpenStreetMap Overpass adapter for hiking trails (no credentials)."""

import logging
from typing import Any

import httpx

from sidequest.adapters.geo import miles_to_meters
from sidequest.adapters.provenance import provenance_for_http
from sidequest.models.common import Theme
from sidequest.models.locations import LocationCandidate, ProviderGate, SearchParams, SearchResult
from sidequest.providers.base import LocationProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://overpass-api.de/api/interpreter"

# Larger circles make Overpass slow and return mostly sidewalks
MAX_RADIUS_MILES = 25.0
MAX_LIMIT = 10

TRAIL_SELECTORS = (
    'way["highway"="footway"]',
    'way["highway"="path"]',
    'way["highway"="cycleway"]',
    'way["leisure"="park"]',
    'way["leisure"="nature_reserve"]',
    'relation["route"="hiking"]',
)

# (tag, value, fallback name, base description), first match wins
TRAIL_KINDS: tuple[tuple[str, str, str, str], ...] = (
    (
        "route",
        "hiking",
        "Hiking Trail",
        "A dedicated hiking trail perfect for outdoor enthusiasts.",
    ),
    ("highway", "footway", "Footpath Trail", "A pedestrian walkway ideal for leisurely strolls."),
    ("highway", "path", "Nature Path", "A natural path through scenic areas."),
    ("highway", "track", "Trail Track", "A trail track suitable for walking and light hiking."),
    (
        "leisure",
        "nature_reserve",
        "Nature Reserve Trail",
        "A trail through a protected nature reserve.",
    ),
    ("boundary", "national_park", "National Park Trail", "A trail within a national park area."),
    ("natural", "forest", "Forest Trail", "A forest trail through natural woodland."),
)
DEFAULT_TRAIL_NAME = "Walking Trail"
DEFAULT_TRAIL_DESCRIPTION = "A walking trail offering outdoor recreation opportunities."
TAG_KEYS = ("highway", "leisure", "route")


def build_query(lat: float, lon: float, radius_meters: int) -> str:
    """Overpass QL for trail-like ways and hiking routes around a point."""
    around = f"(around:{radius_meters},{lat},{lon})"
    body = "\n".join(f"  {selector}{around};" for selector in TRAIL_SELECTORS)
    return f"[out:json][timeout:30];\n(\n{body}\n);\nout center meta;"


class OverpassHikingProvider(LocationProvider):
    """Hiking trails and nature paths from OpenStreetMap."""

    def __init__(
        self,
        *,
        weight: float = 2.0,
        gate: ProviderGate | None = None,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        http_timeout: float = 8.0,
        default_radius_miles: float = 25.0,
        default_limit: int = 10,
    ) -> None:
        super().__init__(
            "Hiking Trail Explorer",
            "hiking",
            weight,
            gate or ProviderGate(themes=frozenset({Theme.adventure})),
        )
        self._base_url = base_url
        self._client = client
        self._http_timeout = http_timeout
        self._default_radius_miles = default_radius_miles
        self._default_limit = default_limit

    def _service_available(self) -> bool:
        return True

    async def search(self, params: SearchParams) -> SearchResult:
        """Query Overpass for trails within the (capped) radius."""
        radius_miles = min(params.radius_miles or self._default_radius_miles, MAX_RADIUS_MILES)
        limit = min(params.limit or self._default_limit, MAX_LIMIT)
        query = build_query(params.lat, params.lon, round(miles_to_meters(radius_miles)))

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._http_timeout)
            close_client = True

        try:
            response = await client.post(
                self._base_url,
                data={"data": query},
                headers={"User-Agent": "SIDEQUEST/1.0"},
            )
            response.raise_for_status()
            data = response.json()

            elements: list[dict[str, Any]] = data.get("elements") or []
            logger.debug(f"Overpass returned {len(elements)} elements")

            candidates: list[LocationCandidate] = []
            seen: set[str] = set()
            for element in elements[:limit]:
                candidate = self._to_candidate(element)
                if candidate is None or candidate.id in seen:
                    continue
                seen.add(candidate.id)
                candidates.append(candidate)

            return SearchResult.ok(
                candidates,
                api_calls=1,
                provenance=provenance_for_http(f"overpass.{self.type}", self._base_url),
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Overpass search failed for {self.type}: {e}")
            return SearchResult.failed(f"{type(e).__name__}: {e}", api_calls=1)
        finally:
            if close_client:
                await client.aclose()

    def _to_candidate(self, element: dict[str, Any]) -> LocationCandidate | None:
        if element.get("type") not in ("way", "relation"):
            return None

        center = self._center(element)
        if center is None:
            return None
        lat, lon = center

        tags: dict[str, str] = element.get("tags") or {}
        return LocationCandidate(
            id=f"osm-{element['type']}-{element['id']}",
            title=self._trail_name(tags),
            description=self._describe(tags),
            lat=lat,
            lon=lon,
            place=self._place_string(tags, lat, lon),
            provider_type=self.type,
            url=tags.get("website"),
            tags=tuple(f"{key}={tags[key]}" for key in TAG_KEYS if key in tags),
        )

    @staticmethod
    def _center(element: dict[str, Any]) -> tuple[float, float] | None:
        """Overpass center if present, else the mean of the geometry points."""
        if element.get("center"):
            return element["center"]["lat"], element["center"]["lon"]

        points = [
            (point["lat"], point["lon"])
            for point in element.get("geometry") or []
            if point.get("lat") is not None and point.get("lon") is not None
        ]
        if not points:
            return None
        return (
            sum(lat for lat, _ in points) / len(points),
            sum(lon for _, lon in points) / len(points),
        )

    @staticmethod
    def _trail_name(tags: dict[str, str]) -> str:
        if tags.get("name"):
            return tags["name"]
        if tags.get("ref"):
            return f"Trail {tags['ref']}"
        for key, value, name, _ in TRAIL_KINDS:
            if tags.get(key) == value:
                return name
        return DEFAULT_TRAIL_NAME

    @staticmethod
    def _describe(tags: dict[str, str]) -> str:
        if tags.get("description"):
            return tags["description"]

        base = DEFAULT_TRAIL_DESCRIPTION
        for key, value, _, description in TRAIL_KINDS:
            if tags.get(key) == value:
                base = description
                break

        features = []
        if tags.get("surface"):
            features.append(f"{tags['surface']} surface")
        if tags.get("difficulty"):
            features.append(f"{tags['difficulty']} difficulty")
        if tags.get("length"):
            features.append(f"{tags['length']} long")
        if tags.get("natural"):
            features.append(f"through {tags['natural']} area")
        if tags.get("leisure"):
            features.append(f"in {tags['leisure'].replace('_', ' ')}")

        if features:
            return f"{base} Features {', '.join(features)}."
        return base

    @staticmethod
    def _place_string(tags: dict[str, str], lat: float, lon: float) -> str:
        parts = [p for p in (tags.get("addr:city"), tags.get("addr:state")) if p]
        if parts:
            return ", ".join(parts)
        if tags.get("is_in"):
            return tags["is_in"]
        return f"Trail Location ({lat:.4f}, {lon:.4f})"
