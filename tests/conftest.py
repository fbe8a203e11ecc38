"""Shared test fixtures for all tests."""

import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "nws"


def load_fixture(name: str) -> dict:
    """Load a JSON document from the NWS fixtures directory."""
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture
def sample_station_url() -> str:
    """Station URL reported by the API for the sample station."""
    return "https://api.weather.gov/stations/KBOS"


@pytest.fixture
def observation_data() -> dict:
    """Fully populated latest-observation document."""
    return load_fixture("observation_kbos.json")


@pytest.fixture
def partial_observation_data() -> dict:
    """Observation document with missing and mistyped fields."""
    return load_fixture("observation_partial.json")


@pytest.fixture
def station_data() -> dict:
    """Station metadata document."""
    return load_fixture("station_kbos.json")
