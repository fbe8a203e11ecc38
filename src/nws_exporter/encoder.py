"""Encode metric samples into the Prometheus text exposition format."""

import logging
from collections.abc import Iterator, Sequence

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.metrics_core import GaugeMetricFamily, Metric

from .metrics import FIELD_LABELS, FIELD_METRICS, STATION_HELP, STATION_LABELS, STATION_METRIC
from .schemas import MetricSample

logger = logging.getLogger(__name__)

CONTENT_TYPE = CONTENT_TYPE_LATEST

# Metric name -> (help, label names), in exposition order
_FAMILIES: dict[str, tuple[str, tuple[str, ...]]] = {
    STATION_METRIC: (STATION_HELP, STATION_LABELS),
    **{m.name: (m.help, FIELD_LABELS) for m in FIELD_METRICS},
}


class EncodingError(Exception):
    """Samples do not match the fixed metric table."""


class _ScrapeSnapshot:
    """Metric families for one scrape followed by the process registry's own metrics."""

    def __init__(self, families: list[Metric], registry: CollectorRegistry) -> None:
        self._families = families
        self._registry = registry

    def collect(self) -> Iterator[Metric]:
        yield from self._families
        yield from self._registry.collect()


class MetricEncoder:
    """Render samples plus the process metric registry as exposition text."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

    def encode(self, samples: Sequence[MetricSample]) -> bytes:
        """Encode samples into the text exposition format.

        Samples are grouped by metric name; each group is written once with its
        help text followed by one line per label set, sorted by label values.

        Raises:
            EncodingError: If a sample's name or label names are not in the
                fixed metric table.
        """
        grouped: dict[str, list[tuple[list[str], float]]] = {name: [] for name in _FAMILIES}
        for sample in samples:
            if sample.name not in _FAMILIES:
                raise EncodingError(f"unknown metric {sample.name!r}")
            _, label_names = _FAMILIES[sample.name]
            if set(sample.labels) != set(label_names):
                raise EncodingError(
                    f"metric {sample.name!r} expects labels {label_names}, "
                    f"got {tuple(sorted(sample.labels))}"
                )
            grouped[sample.name].append(([sample.labels[n] for n in label_names], sample.value))

        families: list[Metric] = []
        for name, values in grouped.items():
            if not values:
                continue
            help_text, label_names = _FAMILIES[name]
            family = GaugeMetricFamily(name, help_text, labels=list(label_names))
            for label_values, value in sorted(values, key=lambda v: v[0]):
                family.add_metric(label_values, value)
            families.append(family)

        body = generate_latest(_ScrapeSnapshot(families, self.registry))  # type: ignore[arg-type]
        logger.debug("Encoded prometheus metrics to text format (%d bytes)", len(body))
        return body
