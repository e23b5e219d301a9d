"""Google Places nearby-search adapter (keyword based)."""

import logging
from typing import Any

import httpx

from sidequest.adapters.geo import miles_to_meters
from sidequest.adapters.provenance import provenance_for_http
from sidequest.models.locations import LocationCandidate, ProviderGate, SearchParams, SearchResult
from sidequest.providers.base import LocationProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
MAX_RADIUS_METERS = 50000.0


class GooglePlacesProvider(LocationProvider):
    """Provider backed by one Google Places keyword search."""

    def __init__(
        self,
        name: str,
        type: str,
        keyword: str,
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
        self.keyword = keyword
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
        """Search Google Places near the query point.

        Args:
            params: Search parameters (radius capped at 50 km)

        Returns:
            SearchResult with candidates, or a failure result on API/network errors
        """
        if not self._api_key:
            return SearchResult.failed("Google Places API key not configured")

        radius_miles = params.radius_miles or self._default_radius_miles
        radius_meters = min(miles_to_meters(radius_miles), MAX_RADIUS_METERS)
        query: dict[str, str] = {
            "location": f"{params.lat},{params.lon}",
            "radius": f"{radius_meters:.0f}",
            "keyword": self.keyword,
        }

        # Provenance URL never carries the key
        url = f"{self._base_url}?{'&'.join(f'{k}={v}' for k, v in query.items())}"

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._http_timeout)
            close_client = True

        try:
            response = await client.get(self._base_url, params={**query, "key": self._api_key})
            response.raise_for_status()
            data = response.json()

            status = data.get("status")
            if status not in ("OK", "ZERO_RESULTS"):
                message = data.get("error_message") or status
                return SearchResult.failed(f"Google Places API error: {message}", api_calls=1)

            results: list[dict[str, Any]] = data.get("results") or []
            logger.debug(f"Google Places returned {len(results)} {self.type} results")

            limit = params.limit or self._default_limit
            candidates = [
                self._to_candidate(result, index) for index, result in enumerate(results[:limit])
            ]

            return SearchResult.ok(
                candidates,
                api_calls=1,
                provenance=provenance_for_http(f"google_places.{self.type}", url),
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Google Places search failed for {self.type}: {e}")
            return SearchResult.failed(f"{type(e).__name__}: {e}", api_calls=1)
        finally:
            if close_client:
                await client.aclose()

    def _to_candidate(self, result: dict[str, Any], index: int) -> LocationCandidate:
        location = result["geometry"]["location"]
        lat, lon = location["lat"], location["lng"]
        place_id = result.get("place_id")

        return LocationCandidate(
            id=f"google-{self.type}-{place_id or index}",
            title=result.get("name") or self.name,
            description=self.blurb,
            lat=lat,
            lon=lon,
            place=result.get("vicinity") or f"{self.name} ({lat:.4f}, {lon:.4f})",
            provider_type=self.type,
            rating=result.get("rating"),
            url=f"https://www.google.com/maps/place/?q=place_id:{place_id}" if place_id else None,
            tags=tuple(result.get("types") or ()),
        )
