"""HTTP clients for weather data sources."""

from .nws import NWSClient, NWSClientError

__all__ = [
    "NWSClient",
    "NWSClientError",
]
