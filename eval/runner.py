"""Eval runner - loads scenarios and runs them against fixture providers."""

import asyncio
import random
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from sidequest.config import Settings
from sidequest.content.store import InMemoryContentStore
from sidequest.models import (
    ContentBlock,
    GenerationResult,
    LocationCandidate,
    ProviderGate,
    QuestRequest,
    SearchParams,
    SearchResult,
)
from sidequest.orchestration.composer import QuestComposer
from sidequest.orchestration.scorer import score_quest
from sidequest.providers.base import LocationProvider
from sidequest.providers.registry import ProviderRegistry

SCENARIOS_PATH = Path(__file__).parent / "scenarios.yaml"
EVAL_CLOCK = datetime(2025, 6, 1, 14, 0)
ORIGIN = SearchParams(lat=40.0, lon=-74.0, radius_miles=25, limit=10)


class FixtureProvider(LocationProvider):
    """Provider serving the candidates declared in a scenario."""

    def __init__(self, data: dict[str, Any]) -> None:
        provider_type = data["type"]
        gate = ProviderGate(**data["gate"]) if "gate" in data else None
        super().__init__(
            data.get("name", provider_type), provider_type, data.get("weight", 1.0), gate
        )
        self._configured = data.get("available", True)

        candidates = [
            LocationCandidate(provider_type=provider_type, **c) for c in data.get("candidates", [])
        ]
        for i in range(data.get("candidate_count", 0)):
            candidates.append(
                LocationCandidate(
                    id=f"{provider_type}-{i}",
                    title=f"{provider_type.replace('_', ' ').title()} #{i + 1}",
                    lat=ORIGIN.lat + (i + 1) / 100,
                    lon=ORIGIN.lon,
                    provider_type=provider_type,
                )
            )
        self._candidates = candidates

    def _service_available(self) -> bool:
        return self._configured

    async def search(self, params: SearchParams) -> SearchResult:
        return SearchResult.ok(list(self._candidates), api_calls=0)


def load_scenarios(path: Path = SCENARIOS_PATH) -> dict[str, Any]:
    """Load scenarios from YAML."""
    with open(path) as f:
        result: dict[str, Any] = yaml.safe_load(f)
        return result


def build_registry(scenario: dict[str, Any], rng: random.Random) -> ProviderRegistry:
    """Build a registry of fixture providers from scenario data."""
    registry = ProviderRegistry(rng=rng)
    for provider_data in scenario.get("providers", []):
        registry.register(FixtureProvider(provider_data))
    return registry


def run_selection(scenario: dict[str, Any]) -> dict[str, Any]:
    """Draw providers repeatedly; expose per-type counts."""
    registry = build_registry(scenario, random.Random(scenario.get("rng_seed", 42)))
    trials = scenario["trials"]

    counts: Counter[str] = Counter()
    for _ in range(trials):
        provider = registry.select_weighted(ORIGIN)
        if provider is not None:
            counts[provider.type] += 1

    return {"counts": dict(counts), "trials": trials}


def run_generation(scenario: dict[str, Any]) -> dict[str, Any]:
    """Run one composer request; expose the result and quest scores."""
    seed = scenario.get("rng_seed", 42)
    settings = Settings(_env_file=None, rng_seed=seed)
    registry = build_registry(scenario, random.Random(seed))
    store = InMemoryContentStore([ContentBlock(**b) for b in scenario.get("blocks", [])])
    composer = QuestComposer(
        registry, store, settings, rng=random.Random(seed), clock=lambda: EVAL_CLOCK
    )

    request = QuestRequest.model_validate(scenario["request"])
    result: GenerationResult = asyncio.run(composer.generate(request))

    return {
        "result": result,
        "scores": [score_quest(q) for q in result.quests],
        "location_ids": [q.primary_location.id for q in result.quests if q.primary_location],
    }


RUNNERS = {
    "selection": run_selection,
    "generation": run_generation,
}


def evaluate_predicates(env: dict[str, Any], predicates: list[dict[str, str]]) -> tuple[int, int]:
    """Evaluate predicates; return (passed, total)."""
    passed = 0
    total = len(predicates)
    scope = {
        "__builtins__": {},
        "len": len,
        "sorted": sorted,
        "set": set,
        "all": all,
        "any": any,
        **env,
    }

    for pred_data in predicates:
        predicate = pred_data["predicate"]
        description = pred_data.get("description", predicate)
        try:
            result = eval(predicate, scope)
            if result:
                passed += 1
                print(f"  ✓ PASS: {description}")
            else:
                print(f"  ✗ FAIL: {description}")
        except Exception as e:
            print(f"  ✗ ERROR: {description} - {e}")

    return passed, total


def main() -> int:
    """Run eval scenarios."""
    scenarios_data = load_scenarios()
    scenarios = scenarios_data["scenarios"]

    total_passed = 0
    total_predicates = 0

    for scenario in scenarios:
        scenario_id = scenario["scenario_id"]
        description = scenario["description"]
        print(f"\n=== Scenario: {scenario_id} ===")
        print(f"Description: {description}")

        env = RUNNERS[scenario["kind"]](scenario)

        predicates = scenario["must_satisfy"]
        passed, total = evaluate_predicates(env, predicates)
        total_passed += passed
        total_predicates += total

        print(f"Result: {passed}/{total} predicates passed")

    print("\n=== Summary ===")
    print(f"Total: {total_passed}/{total_predicates} predicates passed")

    if total_passed < total_predicates:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
