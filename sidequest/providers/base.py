"""Provider contract - the capability interface every location provider implements."""

import random
from abc import ABC, abstractmethod

from sidequest.models.locations import (
    LocationCandidate,
    ProviderConditions,
    ProviderGate,
    SearchParams,
    SearchResult,
)


class LocationProvider(ABC):
    """Base class for a pluggable adapter over one external location source.

    Subclasses implement search() and _service_available(). search() must
    return SearchResult.failed(...) for expected failure modes (network
    errors, empty payloads, quota) instead of raising.
    """

    def __init__(
        self,
        name: str,
        type: str,
        weight: float = 1.0,
        gate: ProviderGate | None = None,
    ) -> None:
        self.name = name
        self.type = type
        self.weight = weight
        self.gate = gate or ProviderGate()
        self._enabled = True

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable this provider."""
        self._enabled = enabled

    def is_available(self) -> bool:
        """True iff enabled and the underlying service is configured."""
        return self._enabled and self._service_available()

    def can_activate(
        self,
        params: SearchParams | None,
        conditions: ProviderConditions | None = None,
    ) -> bool:
        """True iff the provider's gate is satisfied by the situational context."""
        return self.gate.admits(conditions)

    @abstractmethod
    async def search(self, params: SearchParams) -> SearchResult:
        """Perform the external lookup."""

    async def get_random_candidate(
        self,
        params: SearchParams,
        rng: random.Random | None = None,
    ) -> LocationCandidate | None:
        """Return one candidate chosen uniformly at random, or None."""
        result = await self.search(params)
        if not result.success or not result.candidates:
            return None
        return (rng or random).choice(result.candidates)

    @abstractmethod
    def _service_available(self) -> bool:
        """Check if the underlying service/API is configured."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r}, weight={self.weight})"
