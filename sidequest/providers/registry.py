"""Provider registry - availability filtering, weighted selection, guarded fetching.

Selection mass for each available provider is its weight squared, which
concentrates draws on a few strong providers while leaving long-tail
providers a non-zero chance.
"""

import logging
import math
import random

from sidequest.adapters.geo import haversine_miles
from sidequest.models.locations import (
    LocationCandidate,
    ProviderConditions,
    RegistryStats,
    SearchParams,
    SearchResult,
)
from sidequest.providers.base import LocationProvider
from sidequest.tools.executor import (
    CallConfig,
    CallContext,
    ProviderCallError,
    ProviderCallExecutor,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)


class ProviderRegistrationError(ValueError):
    """Provider rejected at registration time."""

    pass


class ProviderRegistry:
    """Holds registered providers keyed by type tag."""

    def __init__(
        self,
        *,
        executor: ProviderCallExecutor | None = None,
        call_config: CallConfig | None = None,
        rng: random.Random | None = None,
        variety_fraction: float = 0.7,
        variety_retry_limit: int = 10,
    ) -> None:
        """Initialize registry.

        Args:
            executor: Call executor enforcing the per-call timeout (default: no-op hooks)
            call_config: Per-call configuration (default: 10s timeout)
            rng: Random source for selection (default: fresh unseeded Random)
            variety_fraction: Leading share of fetch_many draws that avoid repeats
            variety_retry_limit: Redraws per slot before accepting a repeat
        """
        self._providers: dict[str, LocationProvider] = {}
        self._executor = executor or ProviderCallExecutor()
        self._call_config = call_config or CallConfig()
        self._rng = rng or random.Random()
        self._variety_fraction = variety_fraction
        self._variety_retry_limit = variety_retry_limit
        # Advisory only; concurrent callers may interleave
        self.last_selected_type: str | None = None

    def register(self, provider: LocationProvider) -> None:
        """Register a provider under its type tag.

        Re-registering the same provider object is a no-op.

        Raises:
            ProviderRegistrationError: Non-positive weight, or a different
                provider already holds the type tag
        """
        if not (provider.weight > 0 and math.isfinite(provider.weight)):
            raise ProviderRegistrationError(
                f"Provider {provider.type!r} weight must be positive, got {provider.weight}"
            )

        existing = self._providers.get(provider.type)
        if existing is provider:
            return
        if existing is not None:
            raise ProviderRegistrationError(
                f"Provider type {provider.type!r} already registered by {existing.name!r}"
            )

        self._providers[provider.type] = provider
        logger.info(f"Registered provider: {provider.name} ({provider.type})")

    def get(self, provider_type: str) -> LocationProvider | None:
        """Get a provider by type tag."""
        return self._providers.get(provider_type)

    def providers(self) -> list[LocationProvider]:
        """All registered providers in registration order."""
        return list(self._providers.values())

    def list_available(
        self,
        params: SearchParams | None,
        conditions: ProviderConditions | None = None,
    ) -> list[LocationProvider]:
        """Providers that are available and whose gate admits the conditions.

        Every provider is evaluated so the availability log stays complete.
        """
        available: list[LocationProvider] = []
        for provider in self._providers.values():
            is_available = provider.is_available()
            can_activate = provider.can_activate(params, conditions)
            logger.debug(
                f"Provider {provider.name}: available={is_available} can_activate={can_activate}",
                extra={
                    "structured": {
                        "provider": provider.type,
                        "available": is_available,
                        "can_activate": can_activate,
                        "modes": sorted(m.value for m in provider.gate.modes)
                        if provider.gate.modes
                        else "any",
                    }
                },
            )
            if is_available and can_activate:
                available.append(provider)

        logger.debug(f"Found {len(available)}/{len(self._providers)} available providers")
        return available

    def select_weighted(
        self,
        params: SearchParams | None,
        conditions: ProviderConditions | None = None,
    ) -> LocationProvider | None:
        """Draw one available provider with probability proportional to weight squared."""
        available = self.list_available(params, conditions)
        if not available:
            logger.warning("No available providers for current conditions")
            return None
        return self._draw(available)

    def _draw(self, available: list[LocationProvider]) -> LocationProvider:
        total_mass = sum(p.weight**2 for p in available)
        remaining = self._rng.random() * total_mass

        for provider in available:
            remaining -= provider.weight**2
            if remaining <= 0:
                self.last_selected_type = provider.type
                logger.debug(f"Selected provider: {provider.name} ({provider.type})")
                return provider

        # Float rounding left mass over; fall back to the heaviest provider
        selected = max(available, key=lambda p: p.weight)
        self.last_selected_type = selected.type
        logger.debug(f"Fallback selected provider: {selected.name} ({selected.type})")
        return selected

    def _plan_draws(
        self, available: list[LocationProvider], target_count: int
    ) -> list[LocationProvider]:
        """Build the provider sequence for one fetch_many call."""
        variety_slots = math.ceil(target_count * self._variety_fraction)
        used_types: set[str] = set()
        selections: list[LocationProvider] = []

        for slot in range(target_count):
            provider = self._draw(available)
            if slot < variety_slots:
                redraws = 1
                while provider.type in used_types and redraws < self._variety_retry_limit:
                    provider = self._draw(available)
                    redraws += 1
            used_types.add(provider.type)
            selections.append(provider)

        return selections

    async def fetch_many(
        self,
        params: SearchParams,
        target_count: int,
        conditions: ProviderConditions | None = None,
    ) -> list[LocationCandidate]:
        """Fetch up to target_count candidates, one per weighted draw.

        Providers are queried sequentially in draw order. Each call runs under
        its own timeout; timeouts and errors are logged and skipped.
        """
        if target_count <= 0:
            return []

        available = self.list_available(params, conditions)
        if not available:
            logger.warning("No available providers")
            return []

        selections = self._plan_draws(available, target_count)

        candidates: list[LocationCandidate] = []
        seen_ids: set[str] = set()

        for provider in selections:
            ctx = CallContext(provider_type=provider.type)
            try:
                candidate = await self._executor.execute(
                    ctx,
                    self._call_config,
                    lambda: provider.get_random_candidate(params, self._rng),
                    count=lambda c: 0 if c is None else 1,
                )
            except (ProviderTimeoutError, ProviderCallError) as e:
                logger.warning(f"Skipping provider {provider.name}: {e}")
                continue

            if candidate is None:
                logger.info(f"No candidate returned from {provider.name}")
                continue
            if candidate.id in seen_ids:
                logger.info(f"Dropping duplicate candidate {candidate.id} from {provider.name}")
                continue

            seen_ids.add(candidate.id)
            candidates.append(_with_distance(candidate, params))

        logger.info(
            f"Retrieved {len(candidates)} candidates from {len(selections)} provider selections"
        )
        return candidates

    async def search_provider(self, provider_type: str, params: SearchParams) -> SearchResult:
        """Search one provider directly; results sorted by distance ascending."""
        provider = self._providers.get(provider_type)
        if provider is None:
            return SearchResult.failed(f"Provider type '{provider_type}' not found")
        if not provider.is_available():
            return SearchResult.failed(f"Provider '{provider_type}' is not available")

        ctx = CallContext(provider_type=provider.type)
        try:
            result = await self._executor.execute(
                ctx,
                self._call_config,
                lambda: provider.search(params),
                count=lambda r: len(r.candidates),
            )
        except (ProviderTimeoutError, ProviderCallError) as e:
            return SearchResult.failed(str(e))

        if not result.success:
            return result

        located = [_with_distance(c, params, overwrite=True) for c in result.candidates]
        located.sort(key=lambda c: c.distance_miles or 0.0)
        return SearchResult(
            success=True,
            candidates=located,
            api_calls=result.api_calls,
            provenance=result.provenance,
        )

    def get_stats(self) -> RegistryStats:
        """Read-only registry introspection."""
        return RegistryStats(
            total=len(self._providers),
            enabled=sum(1 for p in self._providers.values() if p.is_available()),
            types=list(self._providers.keys()),
            last_selected_type=self.last_selected_type,
        )


def _with_distance(
    candidate: LocationCandidate, params: SearchParams, *, overwrite: bool = False
) -> LocationCandidate:
    if candidate.distance_miles is not None and not overwrite:
        return candidate
    distance = haversine_miles(params.lat, params.lon, candidate.lat, candidate.lon)
    return candidate.model_copy(update={"distance_miles": round(distance, 1)})
