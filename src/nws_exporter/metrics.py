"""Metric names, labels and the process-wide failure counter.

The field-to-metric mapping is a fixed table so that dashboards referencing
these names keep working across releases. All metrics share the ``nws_``
prefix and carry a ``station`` label set to the station URL reported by the
API (e.g. ``{station="https://api.weather.gov/stations/KBOS"}``).
"""

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter

from .units import Dimension

LABEL_STATION = "station"
LABEL_STATION_ID = "station_id"
LABEL_STATION_NAME = "station_name"
LABEL_REASON = "reason"

STATION_METRIC = "nws_station"
STATION_HELP = "Station metadata"
STATION_LABELS = (LABEL_STATION, LABEL_STATION_ID, LABEL_STATION_NAME)

FIELD_LABELS = (LABEL_STATION,)


@dataclass(frozen=True)
class FieldMetric:
    """Gauge exported for one numeric field of an observation."""

    field: str
    name: str
    help: str
    dimension: Dimension


FIELD_METRICS: tuple[FieldMetric, ...] = (
    FieldMetric("elevation", "nws_elevation_meters", "Elevation in meters", Dimension.LENGTH),
    FieldMetric(
        "temperature", "nws_temperature_degrees", "Temperature in celsius", Dimension.TEMPERATURE
    ),
    FieldMetric("dewpoint", "nws_dewpoint_degrees", "Dewpoint in celsius", Dimension.TEMPERATURE),
    FieldMetric(
        "barometric_pressure",
        "nws_barometric_pressure_pascals",
        "Barometric pressure in pascals",
        Dimension.PRESSURE,
    ),
    FieldMetric("visibility", "nws_visibility_meters", "Visibility in meters", Dimension.LENGTH),
    FieldMetric(
        "relative_humidity", "nws_relative_humidity", "Relative humidity (0-100)", Dimension.RATIO
    ),
    FieldMetric(
        "wind_chill",
        "nws_wind_chill_degrees",
        "Temperature with wind chill in celsius",
        Dimension.TEMPERATURE,
    ),
)


class CollectorMetrics:
    """Internal metrics about the collector itself.

    Registered on an explicit registry created once at startup rather than the
    ``prometheus_client`` default registry.
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self.fetch_failures = Counter(
            "nws_station_fetch_failures",
            "Observation fetches that failed, by station and reason",
            [LABEL_STATION, LABEL_REASON],
            registry=registry,
        )

    def record_failure(self, station: str, reason: str) -> None:
        """Increment the failure counter for a station."""
        self.fetch_failures.labels(station=station, reason=reason).inc()
