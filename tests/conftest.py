"""Shared pytest fixtures for all test suites."""

import random

import pytest

from sidequest.config import Settings
from sidequest.models.locations import SearchParams


@pytest.fixture
def search_params() -> SearchParams:
    return SearchParams(lat=40.0, lon=-74.0, radius_miles=25, limit=10)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None, google_maps_api_key="", geoapify_api_key="", rng_seed=7)
