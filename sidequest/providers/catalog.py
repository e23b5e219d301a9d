"""Provider catalog - static descriptions and the default registry bootstrap."""

import logging
import random
from dataclasses import dataclass

import httpx

from sidequest.adapters.dark_sky import DarkSkyProvider
from sidequest.adapters.geoapify import GeoapifyProvider
from sidequest.adapters.google_places import GooglePlacesProvider
from sidequest.adapters.overpass import OverpassHikingProvider
from sidequest.config import Settings
from sidequest.models.common import QuestMode, Theme
from sidequest.models.locations import ProviderGate
from sidequest.providers.registry import ProviderRegistry
from sidequest.tools.executor import CallConfig, ProviderCallExecutor
from sidequest.utils.logging import StructuredProviderLogger
from sidequest.utils.metrics import PrometheusProviderMetrics

logger = logging.getLogger(__name__)

PROVIDER_DESCRIPTIONS: dict[str, str] = {
    "obscura": "Discover unusual and fascinating places from Atlas Obscura",
    "hiking": "Find beautiful hiking trails and nature spots",
    "beach": "Explore coastal areas and waterfront locations",
    "google_beach": "Discover beaches and coastal attractions via Google Places",
    "google_hiking_area": "Find hiking areas and outdoor activities",
    "google_marina": "Locate marinas, harbors, and waterfront facilities",
    "google_observation_deck": "Find scenic viewpoints and observation decks",
    "google_psychic": "Discover metaphysical and spiritual locations",
    "google_japanese_inn": "Find Japanese-style accommodations and cultural sites",
    "google_cat_cafe": "Locate cat cafes and animal-themed venues",
    "google_off_roading": "Discover off-road and adventure vehicle locations",
    "skateboard_park": "Find skateboard parks and skating venues",
    "national_park": "Explore national parks and protected areas",
    "wind_generator": "Discover renewable energy and wind farm locations",
    "mountain": "Find mountain peaks and elevated terrain",
    "lighthouse": "Locate historic lighthouses and maritime landmarks",
    "pier": "Discover piers, docks, and waterfront structures",
    "stargazing": "Find certified dark sky places for stargazing",
}

DEFAULT_DESCRIPTION = "Explore interesting locations in this category"

ADVENTURE = ProviderGate(themes=frozenset({Theme.adventure}))
WILDCARD = ProviderGate(themes=frozenset({Theme.wildcard}))
ADVENTURE_LOCATION_ONLY = ProviderGate(
    modes=frozenset({QuestMode.pure_location}),
    themes=frozenset({Theme.adventure}),
)


def describe_provider(provider_type: str) -> str:
    """Human description for a provider type tag."""
    return PROVIDER_DESCRIPTIONS.get(provider_type, DEFAULT_DESCRIPTION)


@dataclass(frozen=True)
class GoogleSpec:
    name: str
    type: str
    keyword: str
    weight: float
    blurb: str
    gate: ProviderGate | None = None


@dataclass(frozen=True)
class GeoapifySpec:
    name: str
    type: str
    categories: str
    weight: float
    blurb: str
    gate: ProviderGate | None = None


GOOGLE_PROVIDERS: tuple[GoogleSpec, ...] = (
    GoogleSpec(
        "Cat Cafe Explorer",
        "google_cat_cafe",
        "cat cafe",
        4,
        "A cozy cat cafe where you can enjoy coffee, snacks, and quality time with "
        "friendly feline companions.",
        WILDCARD,
    ),
    GoogleSpec(
        "Japanese Inn Explorer",
        "google_japanese_inn",
        "japanese inn ryokan",
        4,
        "A traditional Japanese-style inn offering an authentic cultural experience.",
        WILDCARD,
    ),
    GoogleSpec(
        "Psychic Explorer",
        "google_psychic",
        "psychic reading",
        4,
        "A metaphysical shop or reader offering a glimpse into the mystical.",
        WILDCARD,
    ),
    GoogleSpec(
        "Observation Deck Explorer",
        "google_observation_deck",
        "observation deck",
        3,
        "A scenic viewpoint with sweeping views of the surrounding area.",
        ADVENTURE,
    ),
    GoogleSpec(
        "Off-Roading Explorer",
        "google_off_roading",
        "off road trail",
        1,
        "An off-road area for adventurous driving on rugged terrain.",
        ADVENTURE_LOCATION_ONLY,
    ),
    GoogleSpec(
        "Google Hiking Area Explorer",
        "google_hiking_area",
        "hiking trail",
        1,
        "A hiking area with trails through natural scenery.",
        ADVENTURE,
    ),
    GoogleSpec(
        "Google Beach Explorer",
        "google_beach",
        "beach",
        2,
        "A beach with room to relax by the water.",
        ADVENTURE,
    ),
    GoogleSpec(
        "Marina Explorer",
        "google_marina",
        "marina harbor",
        2,
        "A marina where boats come and go along the waterfront.",
        WILDCARD,
    ),
    GoogleSpec(
        "Skateboard Park Explorer",
        "skateboard_park",
        "skateboard park",
        2,
        "A skatepark with ramps and bowls to watch or ride.",
        WILDCARD,
    ),
)

GEOAPIFY_PROVIDERS: tuple[GeoapifySpec, ...] = (
    GeoapifySpec(
        "Wind Farm Explorer",
        "wind_generator",
        "power.generator.wind",
        4,
        "A wind farm where towering turbines turn in the breeze.",
        ADVENTURE_LOCATION_ONLY,
    ),
    GeoapifySpec(
        "Lighthouse Explorer",
        "lighthouse",
        "man_made.lighthouse",
        3,
        "A historic lighthouse watching over the coast.",
        ADVENTURE,
    ),
    GeoapifySpec(
        "Beach Explorer",
        "beach",
        "beach",
        2,
        "A beautiful beach perfect for relaxation and water activities.",
        WILDCARD,
    ),
    GeoapifySpec(
        "Mountain Explorer",
        "mountain",
        "natural.mountain",
        1,
        "A mountain peak rising above the surrounding terrain.",
        ADVENTURE_LOCATION_ONLY,
    ),
    GeoapifySpec(
        "National Park Explorer",
        "national_park",
        "national_park",
        1,
        "A protected park with landscapes worth exploring.",
        ADVENTURE_LOCATION_ONLY,
    ),
    GeoapifySpec(
        "Pier Explorer",
        "pier",
        "man_made.pier",
        1,
        "A pier stretching out over the water.",
        ADVENTURE,
    ),
)


def build_default_registry(
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
    executor: ProviderCallExecutor | None = None,
) -> ProviderRegistry:
    """Register the full provider catalog.

    Providers whose credentials are missing are still registered; they report
    is_available() == False. The dark-sky and hiking providers need no keys.

    Args:
        settings: Engine settings (credentials, timeouts, defaults)
        client: Shared httpx client for all HTTP providers (optional)
        rng: Random source for selection (optional)
        executor: Call executor (default: Prometheus metrics + structured logging)
    """
    registry = ProviderRegistry(
        executor=executor
        or ProviderCallExecutor(
            metrics=PrometheusProviderMetrics(),
            logger=StructuredProviderLogger(),
        ),
        call_config=CallConfig(timeout_seconds=settings.provider_timeout_seconds),
        rng=rng,
        variety_fraction=settings.variety_fraction,
        variety_retry_limit=settings.variety_retry_limit,
    )

    registry.register(DarkSkyProvider())
    registry.register(
        OverpassHikingProvider(
            base_url=settings.overpass_url,
            client=client,
            http_timeout=settings.http_timeout_seconds,
            default_radius_miles=settings.default_search_radius_miles,
            default_limit=settings.default_result_limit,
        )
    )

    for spec in GOOGLE_PROVIDERS:
        registry.register(
            GooglePlacesProvider(
                spec.name,
                spec.type,
                spec.keyword,
                spec.blurb,
                api_key=settings.google_maps_api_key,
                weight=spec.weight,
                gate=spec.gate,
                base_url=settings.google_places_url,
                client=client,
                http_timeout=settings.http_timeout_seconds,
                default_radius_miles=settings.default_search_radius_miles,
                default_limit=settings.default_result_limit,
            )
        )

    for spec in GEOAPIFY_PROVIDERS:
        registry.register(
            GeoapifyProvider(
                spec.name,
                spec.type,
                spec.categories,
                spec.blurb,
                api_key=settings.geoapify_api_key,
                weight=spec.weight,
                gate=spec.gate,
                base_url=settings.geoapify_places_url,
                client=client,
                http_timeout=settings.http_timeout_seconds,
                default_radius_miles=settings.default_search_radius_miles,
                default_limit=settings.default_result_limit,
            )
        )

    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not set, Google Places providers unavailable")
    if not settings.geoapify_api_key:
        logger.warning("GEOAPIFY_API_KEY not set, Geoapify providers unavailable")

    stats = registry.get_stats()
    logger.info(f"Provider registry initialized: {stats.enabled}/{stats.total} providers enabled")
    return registry
