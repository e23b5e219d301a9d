"""Tests for the Overpass hiking adapter."""

from urllib.parse import parse_qs

import httpx
import pytest

from sidequest.adapters.geo import miles_to_meters
from sidequest.adapters.overpass import (
    DEFAULT_TRAIL_DESCRIPTION,
    OverpassHikingProvider,
    build_query,
)
from sidequest.models.common import QuestMode, Theme
from sidequest.models.locations import ProviderConditions, SearchParams

OVERPASS_RESPONSE = {
    "elements": [
        {
            "type": "relation",
            "id": 101,
            "center": {"lat": 39.95, "lon": -74.05},
            "tags": {
                "route": "hiking",
                "name": "Pine Barrens Trail",
                "surface": "sand",
                "addr:city": "Chatsworth",
                "addr:state": "NJ",
            },
        },
        {
            "type": "way",
            "id": 202,
            "geometry": [{"lat": 40.0, "lon": -74.0}, {"lat": 40.2, "lon": -74.2}],
            "tags": {"highway": "path", "ref": "7"},
        },
        {"type": "node", "id": 303, "lat": 40.0, "lon": -74.0},
        {"type": "way", "id": 404, "tags": {"highway": "footway"}},
        {
            "type": "relation",
            "id": 101,
            "center": {"lat": 39.95, "lon": -74.05},
            "tags": {"route": "hiking"},
        },
        {
            "type": "way",
            "id": 505,
            "center": {"lat": 40.1, "lon": -74.1},
            "tags": {"description": "Loop around the reservoir."},
        },
    ]
}


def make_client(payload: dict, seen: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_query_covers_trails_and_routes() -> None:
    query = build_query(40.0, -74.0, 1609)

    assert query.startswith("[out:json][timeout:30];")
    assert 'relation["route"="hiking"](around:1609,40.0,-74.0);' in query
    assert 'way["leisure"="nature_reserve"](around:1609,40.0,-74.0);' in query
    assert query.endswith("out center meta;")


class TestSearch:
    """Test OverpassHikingProvider.search()."""

    @pytest.mark.asyncio
    async def test_parses_elements(self) -> None:
        """Test that ways and relations are normalized and the rest skipped."""
        client = make_client(OVERPASS_RESPONSE)
        provider = OverpassHikingProvider(client=client)

        result = await provider.search(SearchParams(lat=40.0, lon=-74.0))

        assert result.success
        ids = [c.id for c in result.candidates]
        assert ids == ["osm-relation-101", "osm-way-202", "osm-way-505"]

        trail = result.candidates[0]
        assert trail.title == "Pine Barrens Trail"
        assert trail.description == (
            "A dedicated hiking trail perfect for outdoor enthusiasts. Features sand surface."
        )
        assert trail.place == "Chatsworth, NJ"
        assert trail.provider_type == "hiking"
        assert trail.tags == ("route=hiking",)

        path = result.candidates[1]
        assert path.title == "Trail 7"
        assert path.lat == pytest.approx(40.1)
        assert path.lon == pytest.approx(-74.1)
        assert path.description == "A natural path through scenic areas."
        assert path.place == "Trail Location (40.1000, -74.1000)"

        untagged = result.candidates[2]
        assert untagged.title == "Walking Trail"
        assert untagged.description == "Loop around the reservoir."
        assert DEFAULT_TRAIL_DESCRIPTION != untagged.description

        assert result.api_calls == 1
        assert result.provenance is not None
        assert result.provenance.source == "provider.overpass.hiking"

        await client.aclose()

    @pytest.mark.asyncio
    async def test_posts_capped_query(self) -> None:
        seen: list[httpx.Request] = []
        client = make_client({"elements": []}, seen)
        provider = OverpassHikingProvider(client=client)

        result = await provider.search(SearchParams(lat=40.0, lon=-74.0, radius_miles=80))

        assert result.success
        assert result.candidates == []

        request = seen[0]
        assert request.method == "POST"
        assert request.headers["User-Agent"] == "SIDEQUEST/1.0"
        query = parse_qs(request.content.decode())["data"][0]
        assert f"(around:{round(miles_to_meters(25))},40.0,-74.0)" in query

        await client.aclose()

    @pytest.mark.asyncio
    async def test_limit_capped_at_ten(self) -> None:
        elements = [
            {"type": "way", "id": i, "center": {"lat": 40.0, "lon": -74.0}, "tags": {}}
            for i in range(15)
        ]
        client = make_client({"elements": elements})
        provider = OverpassHikingProvider(client=client)

        result = await provider.search(SearchParams(lat=40.0, lon=-74.0, limit=50))

        assert len(result.candidates) == 10

        await client.aclose()

    @pytest.mark.asyncio
    async def test_server_error_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(504, text="Gateway Timeout")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = OverpassHikingProvider(client=client)

        result = await provider.search(SearchParams(lat=40.0, lon=-74.0))

        assert result.success is False
        assert result.error is not None
        assert result.error.startswith("HTTPStatusError")
        assert result.api_calls == 1

        await client.aclose()


class TestAvailability:
    """Test keyless availability and the adventure gate."""

    def test_available_without_credentials(self) -> None:
        assert OverpassHikingProvider().is_available()

    def test_gated_to_adventure(self) -> None:
        provider = OverpassHikingProvider()
        params = SearchParams(lat=40.0, lon=-74.0)

        adventure = ProviderConditions(mode=QuestMode.pure_location, theme=Theme.adventure)
        wildcard = ProviderConditions(mode=QuestMode.pure_location, theme=Theme.wildcard)

        assert provider.can_activate(params, adventure)
        assert not provider.can_activate(params, wildcard)
