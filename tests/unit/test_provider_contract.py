"""Tests for the provider contract (gate matching, availability, random pick)."""

import random

import pytest

from sidequest.models.common import QuestMode, Season, Theme, TimeOfDay, Weather
from sidequest.models.locations import ProviderConditions, ProviderGate, SearchParams
from tests.helpers import FailingProvider, StubProvider, make_candidate


class TestProviderGate:
    """Test ProviderGate.admits."""

    def test_default_gate_admits_everything(self) -> None:
        gate = ProviderGate()
        conditions = ProviderConditions(
            season=Season.winter,
            weather=Weather.snow,
            time_of_day=TimeOfDay.night,
            region="UT",
            mode=QuestMode.content_block,
        )
        assert gate.admits(conditions)
        assert gate.admits(None)

    def test_absent_condition_fields_always_match(self) -> None:
        gate = ProviderGate(
            season=Season.summer,
            weather=Weather.clear,
            time_of_day=TimeOfDay.night,
            regions=frozenset({"CA"}),
            modes=frozenset({QuestMode.pure_location}),
            themes=frozenset({Theme.adventure}),
        )
        assert gate.admits(ProviderConditions())

    def test_region_must_be_member(self) -> None:
        gate = ProviderGate(regions=frozenset({"CA", "OR"}))
        assert gate.admits(ProviderConditions(region="OR"))
        assert not gate.admits(ProviderConditions(region="TX"))

    def test_season_weather_time_must_match_unless_any(self) -> None:
        gate = ProviderGate(weather=Weather.clear, time_of_day=TimeOfDay.night)
        assert gate.admits(ProviderConditions(weather=Weather.clear, time_of_day=TimeOfDay.night))
        assert not gate.admits(ProviderConditions(weather=Weather.rain))
        assert not gate.admits(ProviderConditions(time_of_day=TimeOfDay.morning))

        seasonal = ProviderGate(season=Season.summer)
        assert seasonal.admits(ProviderConditions(season=Season.summer))
        assert not seasonal.admits(ProviderConditions(season=Season.winter))

    def test_mode_must_be_member(self) -> None:
        gate = ProviderGate(modes=frozenset({QuestMode.pure_location}))
        assert gate.admits(ProviderConditions(mode=QuestMode.pure_location))
        assert not gate.admits(ProviderConditions(mode=QuestMode.content_block))

    def test_theme_must_be_member(self) -> None:
        gate = ProviderGate(themes=frozenset({Theme.adventure}))
        assert gate.admits(ProviderConditions(theme=Theme.adventure))
        assert not gate.admits(ProviderConditions(theme=Theme.wildcard))
        assert gate.admits(ProviderConditions(mode=QuestMode.content_block))


class TestAvailability:
    """Test is_available / set_enabled / can_activate."""

    def test_available_when_enabled_and_configured(self) -> None:
        provider = StubProvider("beach")
        assert provider.is_available()

    def test_unconfigured_provider_is_unavailable(self) -> None:
        provider = StubProvider("beach", configured=False)
        assert provider.is_available() is False

    def test_disabling_makes_unavailable(self) -> None:
        provider = StubProvider("beach")
        provider.set_enabled(False)
        assert provider.is_available() is False
        provider.set_enabled(True)
        assert provider.is_available() is True

    def test_can_activate_uses_gate(self, search_params: SearchParams) -> None:
        provider = StubProvider(
            "stargazing", gate=ProviderGate(time_of_day=TimeOfDay.night)
        )
        assert provider.can_activate(search_params, ProviderConditions(time_of_day=TimeOfDay.night))
        assert not provider.can_activate(
            search_params, ProviderConditions(time_of_day=TimeOfDay.afternoon)
        )


class TestRandomCandidate:
    """Test get_random_candidate."""

    @pytest.mark.asyncio
    async def test_returns_member_of_search_results(self, search_params: SearchParams) -> None:
        candidates = [make_candidate(f"c{i}") for i in range(5)]
        provider = StubProvider("lighthouse", candidates)

        picked = await provider.get_random_candidate(search_params, random.Random(3))

        assert picked in candidates
        assert provider.search_calls == 1

    @pytest.mark.asyncio
    async def test_empty_search_returns_none(self, search_params: SearchParams) -> None:
        provider = StubProvider("lighthouse", [])
        assert await provider.get_random_candidate(search_params) is None

    @pytest.mark.asyncio
    async def test_failed_search_returns_none(self, search_params: SearchParams) -> None:
        provider = FailingProvider("lighthouse")
        assert await provider.get_random_candidate(search_params) is None

    @pytest.mark.asyncio
    async def test_pick_is_roughly_uniform(self, search_params: SearchParams) -> None:
        candidates = [make_candidate(f"c{i}") for i in range(4)]
        provider = StubProvider("lighthouse", candidates)
        rng = random.Random(99)

        counts: dict[str, int] = {}
        for _ in range(2000):
            picked = await provider.get_random_candidate(search_params, rng)
            assert picked is not None
            counts[picked.id] = counts.get(picked.id, 0) + 1

        assert set(counts) == {"c0", "c1", "c2", "c3"}
        assert all(350 < n < 650 for n in counts.values())
