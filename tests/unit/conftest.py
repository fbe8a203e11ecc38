"""Unit test fixtures - fake clients and collectors."""

import pytest
from prometheus_client import CollectorRegistry

from nws_exporter.collector import StationCollector
from nws_exporter.metrics import CollectorMetrics
from nws_exporter.registry import StationRegistry
from nws_fakes import FakeClient


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def metric_registry() -> CollectorRegistry:
    """Fresh process registry, never the prometheus_client default."""
    return CollectorRegistry()


@pytest.fixture
def collector_metrics(metric_registry: CollectorRegistry) -> CollectorMetrics:
    return CollectorMetrics(metric_registry)


@pytest.fixture
def make_collector(fake_client: FakeClient, collector_metrics: CollectorMetrics):
    """Factory for collectors over the fake client."""

    def _make(
        station_ids: list[str],
        deadline: float = 5.0,
        registry: StationRegistry | None = None,
    ) -> StationCollector:
        return StationCollector(
            fake_client,
            registry or StationRegistry(station_ids),
            collector_metrics,
            deadline=deadline,
            timeout=1.0,
        )

    return _make
