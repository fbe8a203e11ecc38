"""Observation and station schemas decoded from the api.weather.gov API."""

import math
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

StationId = str


class Measurement(BaseModel):
    """A unit-tagged numeric value (QuantitativeValue in the NWS schema)."""

    model_config = ConfigDict(frozen=True)

    value: float
    unit_code: Annotated[str, Field(min_length=1)]

    @field_validator("value")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinities."""
        if not math.isfinite(v):
            raise ValueError("measurement value must be finite")
        return v


class ObservationRecord(BaseModel):
    """Latest observation for one station.

    Every numeric field is independently optional. A missing reading is
    ``None`` and never a zero or other sentinel value.
    """

    model_config = ConfigDict(frozen=True)

    # Station metadata
    station: Annotated[str, Field(min_length=1)]  # Station URL, used as the label key
    station_code: str | None = None
    # Observation documents carry no name; it is known only from a station lookup
    station_name: str | None = None
    observed_at: datetime | None = None

    elevation: Measurement | None = None
    temperature: Measurement | None = None
    dewpoint: Measurement | None = None
    barometric_pressure: Measurement | None = None
    visibility: Measurement | None = None
    relative_humidity: Measurement | None = None
    wind_chill: Measurement | None = None


class StationInfo(BaseModel):
    """Station metadata from the ``/stations/{id}`` endpoint."""

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(min_length=1)]  # e.g. https://api.weather.gov/stations/KBOS
    station_identifier: Annotated[str, Field(min_length=1)]
    name: str
    elevation: Measurement | None = None
    timezone: str | None = None
