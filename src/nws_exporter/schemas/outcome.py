"""Per-station fetch outcomes and the metric samples built from them."""

from dataclasses import dataclass, field

from .enums import FetchErrorKind
from .observation import ObservationRecord, StationId


@dataclass(frozen=True)
class FetchSuccess:
    """Observation fetched for a station."""

    station: StationId
    record: ObservationRecord


@dataclass(frozen=True)
class FetchFailure:
    """Observation fetch that failed for a station."""

    station: StationId
    kind: FetchErrorKind
    detail: str


FetchOutcome = FetchSuccess | FetchFailure


@dataclass(frozen=True)
class MetricSample:
    """A single gauge value: metric name, label set and value."""

    name: str
    labels: dict[str, str] = field(hash=False)
    value: float
