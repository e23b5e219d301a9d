"""Geoapify Places adapter (category based)."""

import logging
from typing import Any

import httpx

from sidequest.adapters.geo import miles_to_meters
from sidequest.adapters.provenance import provenance_for_http
from sidequest.models.locations import LocationCandidate, ProviderGate, SearchParams, SearchResult
from sidequest.providers.base import LocationProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.geoapify.com/v2/places"
MAX_LIMIT = 20


class GeoapifyProvider(LocationProvider):
    """Provider backed by one Geoapify category filter."""

    def __init__(
        self,
        name: str,
        type: str,
        categories: str,
        blurb: str,
        *,
        api_key: str,
        weight: float = 1.0,
        gate: ProviderGate | None = None,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        http_timeout: float = 8.0,
        default_radius_miles: float = 25.0,
        default_limit: int = 10,
    ) -> None:
        super().__init__(name, type, weight, gate)
        self.categories = categories
        self.blurb = blurb
        self._api_key = api_key
        self._base_url = base_url
        self._client = client
        self._http_timeout = http_timeout
        self._default_radius_miles = default_radius_miles
        self._default_limit = default_limit

    def _service_available(self) -> bool:
        return bool(self._api_key)

    async def search(self, params: SearchParams) -> SearchResult:
        """Search Geoapify places in a circle around the query point."""
        if not self._api_key:
            return SearchResult.failed("Geoapify API key not configured")

        radius_meters = miles_to_meters(params.radius_miles or self._default_radius_miles)
        limit = min(params.limit or self._default_limit, MAX_LIMIT)
        query: dict[str, str] = {
            "categories": self.categories,
            "filter": f"circle:{params.lon},{params.lat},{radius_meters:.0f}",
            "bias": f"proximity:{params.lon},{params.lat}",
            "limit": str(limit),
        }
        url = f"{self._base_url}?{'&'.join(f'{k}={v}' for k, v in query.items())}"

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._http_timeout)
            close_client = True

        try:
            response = await client.get(
                self._base_url,
                params={**query, "apiKey": self._api_key},
                headers={"User-Agent": "SIDEQUEST/1.0"},
            )
            response.raise_for_status()
            data = response.json()

            features: list[dict[str, Any]] = data.get("features") or []
            logger.debug(f"Geoapify returned {len(features)} {self.type} features")

            candidates = [
                self._to_candidate(feature["properties"], index)
                for index, feature in enumerate(features)
            ]
            return SearchResult.ok(
                candidates,
                api_calls=1,
                provenance=provenance_for_http(f"geoapify.{self.type}", url),
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Geoapify search failed for {self.type}: {e}")
            return SearchResult.failed(f"{type(e).__name__}: {e}", api_calls=1)
        finally:
            if close_client:
                await client.aclose()

    def _to_candidate(self, props: dict[str, Any], index: int) -> LocationCandidate:
        lat, lon = props["lat"], props["lon"]

        return LocationCandidate(
            id=f"geoapify-{self.type}-{props.get('place_id') or index}",
            title=props.get("name") or self.name,
            description=self._describe(props),
            lat=lat,
            lon=lon,
            place=self._place_string(props),
            provider_type=self.type,
            url=props.get("website"),
            phone=props.get("phone"),
            hours=props.get("opening_hours"),
            rating=props.get("rating"),
            tags=tuple(props.get("categories") or ()),
        )

    def _describe(self, props: dict[str, Any]) -> str:
        parts = [self.blurb]
        details = props.get("details") or []
        if details:
            parts.append(f"Features: {', '.join(details)}.")
        if props.get("rating"):
            parts.append(f"Rated {props['rating']}/5 by visitors.")
        return " ".join(parts)

    def _place_string(self, props: dict[str, Any]) -> str:
        if props.get("formatted"):
            return props["formatted"]
        parts = [p for p in (props.get("city"), props.get("state")) if p]
        if parts:
            return ", ".join(parts)
        return f"{self.name} ({props['lat']:.4f}, {props['lon']:.4f})"
