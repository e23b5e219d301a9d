"""Stub providers and builders shared by test suites."""

import asyncio
import random

from sidequest.models.blocks import ContentBlock
from sidequest.models.common import Difficulty, TransportRequirement
from sidequest.models.locations import LocationCandidate, ProviderGate, SearchParams, SearchResult
from sidequest.providers.base import LocationProvider


def make_candidate(
    id: str,
    provider_type: str = "lighthouse",
    *,
    rating: float | None = None,
    description: str = "A place worth a visit.",
    url: str | None = None,
    lat: float = 40.0,
    lon: float = -74.0,
) -> LocationCandidate:
    """Helper to create test candidates."""
    return LocationCandidate(
        id=id,
        title=f"Place {id}",
        description=description,
        lat=lat,
        lon=lon,
        place="Somewhere, NJ",
        provider_type=provider_type,
        rating=rating,
        url=url,
    )


def make_block(
    block_id: str,
    *,
    difficulty: Difficulty = Difficulty.medium,
    minutes: int = 30,
    transportation: TransportRequirement = TransportRequirement.no_car_needed,
    theme_tags: str = "",
    location_dependent: bool = False,
) -> ContentBlock:
    """Helper to create test content blocks."""
    return ContentBlock(
        block_id=block_id,
        idea=f"Do activity {block_id}",
        minutes_required=minutes,
        difficulty=difficulty,
        transportation=transportation,
        theme_tags=theme_tags,
        location_dependent=location_dependent,
    )


class StubProvider(LocationProvider):
    """Provider returning a fixed candidate list."""

    def __init__(
        self,
        type: str,
        candidates: list[LocationCandidate] | None = None,
        *,
        weight: float = 1.0,
        gate: ProviderGate | None = None,
        configured: bool = True,
    ) -> None:
        super().__init__(f"Stub {type}", type, weight, gate)
        if candidates is None:
            candidates = [make_candidate(f"{type}-1", type)]
        self.candidates = candidates
        self.configured = configured
        self.search_calls = 0

    def _service_available(self) -> bool:
        return self.configured

    async def search(self, params: SearchParams) -> SearchResult:
        self.search_calls += 1
        return SearchResult.ok(list(self.candidates))


class FailingProvider(StubProvider):
    """Provider reporting a tagged failure."""

    async def search(self, params: SearchParams) -> SearchResult:
        self.search_calls += 1
        return SearchResult.failed("upstream returned 503")


class RaisingProvider(StubProvider):
    """Provider that breaks the contract and raises."""

    async def search(self, params: SearchParams) -> SearchResult:
        self.search_calls += 1
        raise RuntimeError("boom")


class SlowProvider(StubProvider):
    """Provider that never answers in time."""

    async def search(self, params: SearchParams) -> SearchResult:
        self.search_calls += 1
        await asyncio.sleep(10)
        return SearchResult.ok(list(self.candidates))


class SequenceRandom(random.Random):
    """Random source whose random() replays a fixed cycle of values."""

    def __init__(self, values: list[float], seed: int = 0) -> None:
        super().__init__(seed)
        self._values = values
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value
