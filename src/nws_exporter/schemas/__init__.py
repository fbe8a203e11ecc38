"""Schemas for observations, fetch outcomes and metric samples.

Pydantic models for decoded API documents, dataclasses for the values that
live for a single scrape.
"""

from .enums import FetchErrorKind
from .observation import Measurement, ObservationRecord, StationId, StationInfo
from .outcome import FetchFailure, FetchOutcome, FetchSuccess, MetricSample

__all__ = [
    "FetchErrorKind",
    "FetchFailure",
    "FetchOutcome",
    "FetchSuccess",
    "Measurement",
    "MetricSample",
    "ObservationRecord",
    "StationId",
    "StationInfo",
]
