"""Quest composer - end-to-end generation for both operating modes.

Pure-location mode turns fetched candidates into single-location quests.
Content-block mode pairs eligible content blocks with optional nearby
candidates. Both modes run a bounded generate/score/accept loop where the
first quest is always kept, so a caller never gets an empty success when
anything was found.
"""

import logging
import random
import uuid
from collections.abc import Callable
from datetime import datetime

from sidequest.config import Settings, get_settings
from sidequest.content.store import ContentStore, ContentStoreError
from sidequest.models.blocks import ContentBlock
from sidequest.models.common import QuestMode, Theme, Weather
from sidequest.models.locations import (
    LocationCandidate,
    ProviderConditions,
    ProviderSummary,
    RegistryStats,
    SearchParams,
)
from sidequest.models.quests import ComposedQuest, GenerationResult, QuestRequest, UserLocation
from sidequest.orchestration.blocks import extract_tags, filter_blocks
from sidequest.orchestration.conditions import derive_conditions
from sidequest.orchestration.scorer import categorize, meets_minimum, score_quest, sort_descending
from sidequest.providers.catalog import describe_provider
from sidequest.providers.registry import ProviderRegistry
from sidequest.utils.metrics import record_generation

logger = logging.getLogger(__name__)

LOCATION_THEMES = frozenset({Theme.adventure, Theme.wildcard})

ON_SITE_MINUTES = 60
DRIVING_SPEED_MPH = 30.0

NO_CANDIDATES_MESSAGE = "No interesting locations found nearby. Try a different area or theme."
LOCATION_REQUIRED_MESSAGE = "A location is required to explore nearby places."


def mode_for(request: QuestRequest) -> QuestMode:
    """Location themes run pure-location mode; everything else runs content-block mode."""
    if request.theme in LOCATION_THEMES:
        return QuestMode.pure_location
    return QuestMode.content_block


def new_quest_id() -> str:
    return f"quest_{uuid.uuid4().hex[:12]}"


class QuestComposer:
    """Orchestrates provider fetching, quest building, scoring and ranking."""

    def __init__(
        self,
        registry: ProviderRegistry,
        content_store: ContentStore | None = None,
        settings: Settings | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize composer.

        Args:
            registry: Provider registry built at startup
            content_store: Source of content blocks (required for content-block mode)
            settings: Engine settings (default: get_settings())
            rng: Random source for block/location picks (default: seeded from settings)
            clock: Injectable clock for season/time-of-day (default: datetime.now)
        """
        self._registry = registry
        self._content_store = content_store
        self._settings = settings or get_settings()
        self._rng = rng or random.Random(self._settings.rng_seed)
        self._clock = clock or datetime.now

    async def generate(
        self, request: QuestRequest, *, weather: Weather | None = None
    ) -> GenerationResult:
        """Generate ranked quests for a request.

        Args:
            request: Timeframe, difficulty, transportation, theme, optional location
            weather: Current weather if known (unknown matches every provider gate)

        Returns:
            GenerationResult; failures carry a specific error and error_code
        """
        mode = mode_for(request)
        logger.info(f"Generating quests in {mode.value} mode (theme={request.theme})")

        if mode == QuestMode.pure_location:
            result = await self._generate_location_quests(request, weather)
        else:
            result = await self._generate_block_quests(request, weather)

        outcome = "success" if result.success else (result.error_code or "error")
        record_generation(mode.value, outcome)
        logger.info(
            f"Generation finished: {outcome}",
            extra={
                "structured": {
                    "mode": mode.value,
                    "outcome": outcome,
                    "quests": len(result.quests),
                    "considered": result.considered_count,
                }
            },
        )
        return result

    async def _generate_location_quests(
        self, request: QuestRequest, weather: Weather | None
    ) -> GenerationResult:
        mode = QuestMode.pure_location
        settings = self._settings

        if request.location is None:
            return GenerationResult(
                success=False,
                mode=mode,
                error=LOCATION_REQUIRED_MESSAGE,
                error_code="location_required",
            )

        params = self._search_params(request.location)
        conditions = derive_conditions(request, mode, self._clock(), weather)
        candidates = await self._registry.fetch_many(
            params, settings.location_fetch_count, conditions
        )

        if not candidates:
            return GenerationResult(
                success=False,
                mode=mode,
                error=NO_CANDIDATES_MESSAGE,
                error_code="no_candidates",
            )

        max_attempts = min(settings.location_max_attempts, 2 * len(candidates))
        accepted: list[ComposedQuest] = []
        accepted_ids: set[str] = set()

        for attempt in range(max_attempts):
            candidate = candidates[attempt % len(candidates)]
            if candidate.id in accepted_ids:
                continue

            quest = self._location_quest(candidate, request)
            if self._accept(quest, accepted, settings.location_min_score, attempt):
                accepted.append(quest)
                accepted_ids.add(candidate.id)
                if len(accepted) >= settings.target_quest_count:
                    break

        return self._finish(mode, accepted, len(candidates), max_attempts)

    async def _generate_block_quests(
        self, request: QuestRequest, weather: Weather | None
    ) -> GenerationResult:
        mode = QuestMode.content_block
        settings = self._settings

        try:
            blocks = await self._load_blocks()
        except ContentStoreError as e:
            logger.warning(f"Content store unavailable: {e}")
            return GenerationResult(
                success=False,
                mode=mode,
                error=f"Content store unavailable: {e}",
                error_code="content_unavailable",
            )

        eligible = filter_blocks(
            blocks,
            request,
            exclude_location_dependent=settings.location_mode_enabled,
        )
        logger.info(f"{len(eligible)}/{len(blocks)} content blocks eligible")

        if not eligible:
            return GenerationResult(
                success=False,
                mode=mode,
                error="No content blocks match your preferences.",
                error_code="no_eligible_blocks",
            )

        locations: list[LocationCandidate] = []
        if request.location is not None:
            conditions = derive_conditions(request, mode, self._clock(), weather)
            locations = await self._registry.fetch_many(
                self._search_params(request.location), settings.block_fetch_count, conditions
            )
            logger.info(f"Fetched {len(locations)} locations to pair with content blocks")

        accepted: list[ComposedQuest] = []
        seen: set[tuple[str, str | None]] = set()

        for attempt in range(settings.block_max_attempts):
            block = self._rng.choice(eligible)
            location = self._rng.choice(locations) if locations else None
            key = (block.block_id, location.id if location else None)
            if key in seen:
                continue
            seen.add(key)

            quest = self._block_quest(block, location)
            if self._accept(quest, accepted, settings.block_min_score, attempt):
                accepted.append(quest)
                if len(accepted) >= settings.target_quest_count:
                    break

        return self._finish(mode, accepted, len(eligible), settings.block_max_attempts)

    async def _load_blocks(self) -> list[ContentBlock]:
        if self._content_store is None:
            raise ContentStoreError("no content store configured")
        return await self._content_store.get_content_blocks()

    def _accept(
        self,
        quest: ComposedQuest,
        accepted: list[ComposedQuest],
        threshold: float,
        attempt: int,
    ) -> bool:
        # The first quest is always kept, even below threshold
        ok = not accepted or meets_minimum(quest, threshold)
        score = score_quest(quest)
        logger.debug(
            f"Attempt {attempt + 1}: {'accepted' if ok else 'rejected'} quest scoring {score}",
            extra={
                "structured": {
                    "attempt": attempt + 1,
                    "score": score,
                    "category": categorize(score),
                    "threshold": threshold,
                    "accepted": ok,
                }
            },
        )
        return ok

    def _finish(
        self,
        mode: QuestMode,
        accepted: list[ComposedQuest],
        considered: int,
        attempts: int,
    ) -> GenerationResult:
        if not accepted:
            return GenerationResult(
                success=False,
                mode=mode,
                considered_count=considered,
                error=f"Failed to generate quests after {attempts} attempts.",
                error_code="generation_exhausted",
            )
        return GenerationResult(
            success=True,
            mode=mode,
            quests=sort_descending(accepted),
            considered_count=considered,
        )

    def _search_params(self, location: UserLocation) -> SearchParams:
        return SearchParams(
            lat=location.lat,
            lon=location.lon,
            radius_miles=self._settings.default_search_radius_miles,
            limit=self._settings.default_result_limit,
        )

    def _location_quest(self, candidate: LocationCandidate, request: QuestRequest) -> ComposedQuest:
        description = f"Visit {candidate.title}"
        if candidate.place:
            description += f" in {candidate.place}"
        description += "."
        if candidate.description:
            description += f" {candidate.description}"

        minutes = ON_SITE_MINUTES
        if candidate.distance_miles is not None:
            minutes += round(2 * candidate.distance_miles / DRIVING_SPEED_MPH * 60)

        tags = [candidate.provider_type]
        tags.extend(t for t in candidate.tags if t not in tags)

        return ComposedQuest(
            id=new_quest_id(),
            mode=QuestMode.pure_location,
            description=description,
            total_minutes=minutes,
            difficulty=request.difficulty,
            primary_location=candidate,
            tags=tuple(tags),
        )

    def _block_quest(
        self, block: ContentBlock, location: LocationCandidate | None
    ) -> ComposedQuest:
        description = block.idea
        if location is not None:
            description = f"{block.idea} at {location.title}"

        return ComposedQuest(
            id=new_quest_id(),
            mode=QuestMode.content_block,
            description=description,
            total_minutes=block.minutes_required,
            difficulty=block.difficulty,
            primary_location=location,
            block=block,
            tags=tuple(extract_tags([block])),
        )

    def list_available_providers(
        self, conditions: ProviderConditions | None = None
    ) -> list[ProviderSummary]:
        """Summaries of every registered provider with current availability."""
        return [
            ProviderSummary(
                name=p.name,
                type=p.type,
                weight=p.weight,
                available=p.is_available() and p.can_activate(None, conditions),
                description=describe_provider(p.type),
            )
            for p in self._registry.providers()
        ]

    def get_stats(self) -> RegistryStats:
        return self._registry.get_stats()
