"""Enums for observation fetch outcomes."""

from enum import Enum


class FetchErrorKind(str, Enum):
    """Classification of a failed observation fetch for one station."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    INVALID_STATION = "invalid_station"  # HTTP 404 from the API
    HTTP_STATUS = "http_status"  # Any other non-2xx status
    DECODE = "decode"
    INTERNAL = "internal"  # Fetch task raised unexpectedly
