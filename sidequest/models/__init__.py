"""Models package - re-exports for convenience."""

from sidequest.models.blocks import ContentBlock
from sidequest.models.common import (
    Difficulty,
    Provenance,
    QuestMode,
    Season,
    Theme,
    TimeOfDay,
    Timeframe,
    Transportation,
    TransportRequirement,
    Weather,
)
from sidequest.models.locations import (
    LocationCandidate,
    ProviderConditions,
    ProviderGate,
    ProviderSummary,
    RegistryStats,
    SearchParams,
    SearchResult,
)
from sidequest.models.quests import ComposedQuest, GenerationResult, QuestRequest, UserLocation

__all__ = [
    # Common
    "Difficulty",
    "Timeframe",
    "Transportation",
    "TransportRequirement",
    "Theme",
    "QuestMode",
    "Season",
    "Weather",
    "TimeOfDay",
    "Provenance",
    # Locations
    "LocationCandidate",
    "SearchParams",
    "ProviderConditions",
    "ProviderGate",
    "SearchResult",
    "ProviderSummary",
    "RegistryStats",
    # Blocks
    "ContentBlock",
    # Quests
    "UserLocation",
    "QuestRequest",
    "ComposedQuest",
    "GenerationResult",
]
