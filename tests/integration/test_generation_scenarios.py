"""End-to-end generation scenarios through a real registry and composer."""

import random
from datetime import datetime

import httpx
import pytest

from sidequest.config import Settings
from sidequest.content.store import InMemoryContentStore
from sidequest.models.common import (
    Difficulty,
    QuestMode,
    Theme,
    TimeOfDay,
    Timeframe,
    Transportation,
    Weather,
)
from sidequest.models.locations import ProviderConditions
from sidequest.models.quests import QuestRequest, UserLocation
from sidequest.orchestration.composer import QuestComposer
from sidequest.orchestration.scorer import score_quest
from sidequest.providers.catalog import build_default_registry
from sidequest.providers.registry import ProviderRegistry
from sidequest.tools.executor import CallConfig
from tests.helpers import SlowProvider, StubProvider, make_block, make_candidate

NIGHT = datetime(2025, 10, 3, 23, 0)
NOON = datetime(2025, 10, 3, 12, 0)

TRAILS = {
    "elements": [
        {
            "type": "way",
            "id": 9000 + i,
            "center": {"lat": 40.0 + i / 100, "lon": -74.0},
            "tags": {"highway": "path", "name": f"Ridge Path {i}"},
        }
        for i in range(5)
    ]
}


def adventure_request(location: UserLocation | None) -> QuestRequest:
    return QuestRequest(
        timeframe=Timeframe.day,
        difficulty=Difficulty.medium,
        transportation=Transportation.has_car,
        theme=Theme.adventure,
        location=location,
    )


@pytest.mark.asyncio
async def test_single_provider_yields_three_ranked_quests(test_settings: Settings) -> None:
    """One always-available provider with five candidates gives three distinct quests."""
    candidates = [
        make_candidate(f"c{i}", "lighthouse", rating=rating, lat=40.0 + i / 100)
        for i, rating in enumerate([3.0, 4.2, 4.9, 4.0, 4.6])
    ]
    registry = ProviderRegistry(rng=random.Random(21))
    registry.register(StubProvider("lighthouse", candidates))
    composer = QuestComposer(
        registry, settings=test_settings, rng=random.Random(21), clock=lambda: NIGHT
    )

    result = await composer.generate(adventure_request(UserLocation(lat=40.0, lon=-74.0)))

    assert result.success
    assert result.mode == QuestMode.pure_location
    assert len(result.quests) == 3

    ids = [q.primary_location.id for q in result.quests]
    assert len(set(ids)) == 3
    assert set(ids) <= {c.id for c in candidates}

    scores = [score_quest(q) for q in result.quests]
    assert scores == sorted(scores, reverse=True)
    assert all(q.primary_location.distance_miles is not None for q in result.quests)


@pytest.mark.asyncio
async def test_no_providers_is_structured_failure(test_settings: Settings) -> None:
    registry = ProviderRegistry()
    registry.register(StubProvider("lighthouse", configured=False))
    composer = QuestComposer(registry, settings=test_settings, clock=lambda: NIGHT)

    result = await composer.generate(adventure_request(UserLocation(lat=40.0, lon=-74.0)))

    assert result.success is False
    assert result.error_code == "no_candidates"
    assert "No interesting locations found nearby" in (result.error or "")
    assert result.quests == []


@pytest.mark.asyncio
async def test_block_mode_without_location(test_settings: Settings) -> None:
    """Four eligible blocks and no location: each quest uses one block and no places."""
    store = InMemoryContentStore(
        [make_block(f"b{i}", theme_tags="social") for i in range(4)]
    )
    registry = ProviderRegistry()
    registry.register(StubProvider("lighthouse"))
    composer = QuestComposer(
        registry, store, test_settings, rng=random.Random(5), clock=lambda: NIGHT
    )

    result = await composer.generate(
        QuestRequest(
            timeframe=Timeframe.afternoon,
            difficulty=Difficulty.medium,
            transportation=Transportation.no_car,
            theme=Theme.playbook,
        )
    )

    assert result.success
    assert result.mode == QuestMode.content_block
    assert result.considered_count == 4
    assert 1 <= len(result.quests) <= 3
    for quest in result.quests:
        assert quest.block is not None
        assert quest.location_refs == []


@pytest.mark.asyncio
async def test_slow_provider_does_not_starve_generation(test_settings: Settings) -> None:
    registry = ProviderRegistry(
        rng=random.Random(8), call_config=CallConfig(timeout_seconds=0.05)
    )
    registry.register(SlowProvider("slow", weight=1))
    registry.register(
        StubProvider("fast", [make_candidate("fast-1", "google_psychic")], weight=1)
    )
    composer = QuestComposer(registry, settings=test_settings, clock=lambda: NIGHT)

    result = await composer.generate(adventure_request(UserLocation(lat=40.0, lon=-74.0)))

    # Variety slots push draws toward the fast provider after the first slow one
    assert result.success
    assert [q.primary_location.id for q in result.quests] == ["fast-1"]


def test_provider_listing_is_idempotent(test_settings: Settings) -> None:
    settings = test_settings.model_copy(update={"geoapify_api_key": "a"})
    composer = QuestComposer(build_default_registry(settings), settings=settings)
    conditions = ProviderConditions(
        weather=Weather.clear, time_of_day=TimeOfDay.night, mode=QuestMode.pure_location
    )

    first = composer.list_available_providers(conditions)
    second = composer.list_available_providers(conditions)

    assert [(s.type, s.available) for s in first] == [(s.type, s.available) for s in second]
    available = {s.type for s in first if s.available}
    assert "stargazing" in available
    assert "lighthouse" in available
    assert "google_cat_cafe" not in available


def trails_client(calls: list[str]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.host)
        return httpx.Response(200, json=TRAILS)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_keyless_registry_serves_daytime_adventure(test_settings: Settings) -> None:
    """Without API keys a daytime adventure request still finds hiking trails."""
    calls: list[str] = []
    client = trails_client(calls)
    registry = build_default_registry(test_settings, client=client, rng=random.Random(3))
    composer = QuestComposer(
        registry, settings=test_settings, rng=random.Random(3), clock=lambda: NOON
    )

    result = await composer.generate(adventure_request(UserLocation(lat=40.0, lon=-74.0)))

    assert result.success
    assert result.quests
    assert all(q.primary_location.id.startswith("osm-way-") for q in result.quests)
    assert set(calls) == {"overpass-api.de"}

    await client.aclose()


@pytest.mark.asyncio
async def test_wildcard_does_not_draw_adventure_providers(test_settings: Settings) -> None:
    calls: list[str] = []
    client = trails_client(calls)
    registry = build_default_registry(test_settings, client=client, rng=random.Random(3))
    composer = QuestComposer(registry, settings=test_settings, clock=lambda: NOON)

    result = await composer.generate(
        QuestRequest(
            timeframe=Timeframe.day,
            difficulty=Difficulty.medium,
            transportation=Transportation.has_car,
            theme=Theme.wildcard,
            location=UserLocation(lat=40.0, lon=-74.0),
        )
    )

    assert result.success is False
    assert result.error_code == "no_candidates"
    assert calls == []

    await client.aclose()
