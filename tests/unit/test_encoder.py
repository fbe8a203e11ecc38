"""Unit tests for the metric encoder."""

import pytest
from prometheus_client import CollectorRegistry
from prometheus_client.parser import text_string_to_metric_families

from nws_exporter.encoder import EncodingError, MetricEncoder
from nws_exporter.metrics import CollectorMetrics
from nws_exporter.schemas import MetricSample

KBOS = "https://api.weather.gov/stations/KBOS"
KJFK = "https://api.weather.gov/stations/KJFK"


@pytest.fixture
def encoder(metric_registry: CollectorRegistry) -> MetricEncoder:
    return MetricEncoder(metric_registry)


@pytest.fixture
def samples() -> list[MetricSample]:
    return [
        MetricSample(
            "nws_station",
            {"station": KBOS, "station_id": "KBOS", "station_name": 'Boston "Logan"'},
            1.0,
        ),
        MetricSample("nws_temperature_degrees", {"station": KBOS}, -1.1),
        MetricSample("nws_barometric_pressure_pascals", {"station": KBOS}, 102000.0),
        MetricSample(
            "nws_station",
            {"station": KJFK, "station_id": "KJFK", "station_name": ""},
            1.0,
        ),
        MetricSample("nws_temperature_degrees", {"station": KJFK}, 3.3),
        MetricSample("nws_relative_humidity", {"station": KJFK}, 55.39),
    ]


def parse_gauges(body: bytes) -> set[tuple[str, tuple[tuple[str, str], ...], float]]:
    """Parse exposition text back into (name, labels, value) triples for gauges."""
    triples = set()
    for family in text_string_to_metric_families(body.decode("utf-8")):
        if family.type != "gauge":
            continue
        for sample in family.samples:
            triples.add((sample.name, tuple(sorted(sample.labels.items())), sample.value))
    return triples


class TestEncode:
    def test_round_trip(self, encoder: MetricEncoder, samples: list[MetricSample]):
        """Test parsing the output yields the encoded (name, labels, value) triples."""
        body = encoder.encode(samples)

        expected = {(s.name, tuple(sorted(s.labels.items())), s.value) for s in samples}
        assert parse_gauges(body) == expected

    def test_each_group_rendered_once(self, encoder: MetricEncoder, samples: list[MetricSample]):
        text = encoder.encode(samples).decode("utf-8")

        assert text.count("# HELP nws_temperature_degrees Temperature in celsius") == 1
        assert text.count("# TYPE nws_temperature_degrees gauge") == 1
        assert text.count("# TYPE nws_station gauge") == 1

    def test_absent_metrics_not_rendered(
        self, encoder: MetricEncoder, samples: list[MetricSample]
    ):
        """Test metrics with no samples produce no lines at all."""
        text = encoder.encode(samples).decode("utf-8")

        assert "nws_dewpoint_degrees" not in text
        assert "nws_wind_chill_degrees" not in text
        assert "nws_visibility_meters" not in text

    def test_output_independent_of_sample_order(
        self, encoder: MetricEncoder, samples: list[MetricSample]
    ):
        assert encoder.encode(samples) == encoder.encode(list(reversed(samples)))

    def test_empty_samples(self, encoder: MetricEncoder):
        assert parse_gauges(encoder.encode([])) == set()

    def test_includes_process_registry_metrics(
        self, metric_registry: CollectorRegistry, encoder: MetricEncoder
    ):
        CollectorMetrics(metric_registry).record_failure("KJFK", "timeout")

        text = encoder.encode([]).decode("utf-8")

        assert 'nws_station_fetch_failures_total{station="KJFK",reason="timeout"} 1.0' in text

    def test_unknown_metric_rejected(self, encoder: MetricEncoder):
        with pytest.raises(EncodingError):
            encoder.encode([MetricSample("nws_wind_speed", {"station": KBOS}, 1.0)])

    def test_wrong_labels_rejected(self, encoder: MetricEncoder):
        with pytest.raises(EncodingError):
            encoder.encode([MetricSample("nws_temperature_degrees", {"station_id": "KBOS"}, 1.0)])
