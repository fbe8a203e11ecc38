"""NWS exporter - Prometheus metrics for api.weather.gov station observations.

On each scrape the exporter fetches the latest observation for every
configured station concurrently and exposes the readings as gauges:

- nws_station: station metadata (station, station_id, station_name labels)
- nws_elevation_meters, nws_visibility_meters
- nws_temperature_degrees, nws_dewpoint_degrees, nws_wind_chill_degrees
- nws_barometric_pressure_pascals
- nws_relative_humidity

Usage:
    from nws_exporter import NWSClient, StationCollector, StationRegistry
"""

__version__ = "0.5.1"

from .clients import NWSClient, NWSClientError
from .collector import StationCollector
from .config import ConfigurationError, Settings, get_settings
from .encoder import EncodingError, MetricEncoder
from .registry import StationRegistry
from .schemas import FetchFailure, FetchSuccess, MetricSample, ObservationRecord

__all__ = [
    "ConfigurationError",
    "EncodingError",
    "FetchFailure",
    "FetchSuccess",
    "MetricEncoder",
    "MetricSample",
    "NWSClient",
    "NWSClientError",
    "ObservationRecord",
    "Settings",
    "StationCollector",
    "StationRegistry",
    "get_settings",
]
