"""Provenance helpers for provider adapters."""

from datetime import UTC, datetime

from sidequest.models.common import Provenance


def provenance_for_fixture(source: str, ref_id: str | None = None) -> Provenance:
    """Create provenance for results served from a bundled dataset.

    Args:
        source: Source identifier (e.g., "fixtures.dark_sky")
        ref_id: Optional reference ID within the dataset

    Returns:
        Provenance with source=provider-specific string, fetched_at=now(UTC), cache_hit=False
    """
    return Provenance(
        source=f"provider.{source}",
        ref_id=f"{source}/{ref_id}" if ref_id else source,
        source_url=f"fixtures://{source}/{ref_id}" if ref_id else f"fixtures://{source}",
        fetched_at=datetime.now(UTC),
        cache_hit=False,
    )


def provenance_for_http(source: str, url: str, cache_hit: bool = False) -> Provenance:
    """Create provenance for HTTP-based provider results.

    The URL must already have credentials stripped.

    Args:
        source: Source identifier (e.g., "google_places.google_cat_cafe")
        url: URL of the HTTP request
        cache_hit: Whether result came from cache

    Returns:
        Provenance with source=provider-specific string, fetched_at=now(UTC)
    """
    return Provenance(
        source=f"provider.{source}",
        ref_id=source,
        source_url=url,
        fetched_at=datetime.now(UTC),
        cache_hit=cache_hit,
    )
