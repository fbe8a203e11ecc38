"""NOAA NWS (National Weather Service) API client."""

import asyncio
import logging
import math
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from ..config import NWSConfig
from ..schemas import (
    FetchErrorKind,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    Measurement,
    ObservationRecord,
    StationInfo,
)
from ..units import Dimension, is_supported

logger = logging.getLogger(__name__)

# Observation property name -> (record field, dimension)
OBSERVATION_FIELDS: dict[str, tuple[str, Dimension]] = {
    "elevation": ("elevation", Dimension.LENGTH),
    "temperature": ("temperature", Dimension.TEMPERATURE),
    "dewpoint": ("dewpoint", Dimension.TEMPERATURE),
    "barometricPressure": ("barometric_pressure", Dimension.PRESSURE),
    "visibility": ("visibility", Dimension.LENGTH),
    "relativeHumidity": ("relative_humidity", Dimension.RATIO),
    "windChill": ("wind_chill", Dimension.TEMPERATURE),
}


class NWSClientError(Exception):
    """Request to the NWS API failed."""

    def __init__(self, kind: FetchErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


def parse_measurement(value: Any, dimension: Dimension) -> Measurement | None:
    """Extract a measurement from a QuantitativeValue object.

    Anything that is not a ``{"value": <number>, "unitCode": <str>}`` object
    with a finite value and a unit accepted for the dimension is treated as
    missing.
    """
    if not isinstance(value, dict):
        return None
    raw = value.get("value")
    unit = value.get("unitCode")
    # bool is an int subclass but never a reading
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if not isinstance(unit, str) or not is_supported(unit, dimension):
        return None
    if not math.isfinite(raw):
        return None
    return Measurement(value=float(raw), unit_code=unit)


class NWSClient:
    """HTTP client for fetching station observations from the NOAA NWS API.

    A single pooled ``httpx.AsyncClient`` is shared by every request, so one
    client instance can serve concurrent fetches for many stations.
    """

    def __init__(
        self,
        config: NWSConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize NWS client.

        Args:
            config: NWS configuration settings.
            http_client: Optional custom HTTP client for testing.
        """
        self.config = config or NWSConfig()
        self._http_client = http_client
        self._request_semaphore = asyncio.Semaphore(self.config.max_concurrent)

    @property
    def timeout(self) -> float:
        """Default per-request timeout in seconds."""
        return self.config.timeout_ms / 1000

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client with required User-Agent."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/geo+json",
                },
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def station_url(self, station_id: str) -> str:
        """URL of a station, with the identifier percent-encoded as one path segment."""
        return f"{self.config.base_url.rstrip('/')}/stations/{quote(station_id, safe='')}"

    def observation_url(self, station_id: str) -> str:
        """URL of the latest observation for a station."""
        return f"{self.station_url(station_id)}/observations/latest"

    async def _get_json(
        self, station_id: str, url: str, timeout: float | None = None
    ) -> dict[str, Any]:
        """GET a URL and decode the JSON body, classifying any failure."""
        try:
            response = await self.http_client.get(
                url, timeout=self.timeout if timeout is None else timeout
            )
        except httpx.TimeoutException as e:
            raise NWSClientError(FetchErrorKind.TIMEOUT, f"timeout requesting {url}") from e
        except httpx.HTTPError as e:
            raise NWSClientError(FetchErrorKind.TRANSPORT, f"error requesting {url}: {e}") from e

        if response.status_code == 404:
            raise NWSClientError(FetchErrorKind.INVALID_STATION, f"invalid station {station_id}")
        if not response.is_success:
            raise NWSClientError(
                FetchErrorKind.HTTP_STATUS,
                f"unexpected status {response.status_code} for {url}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NWSClientError(FetchErrorKind.DECODE, f"invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise NWSClientError(FetchErrorKind.DECODE, f"unexpected document from {url}")
        return data

    async def fetch(self, station_id: str, timeout: float | None = None) -> FetchOutcome:
        """Fetch the latest observation for a station.

        Never raises for request or decode problems; those are returned as a
        ``FetchFailure`` so that other stations can carry on.

        Args:
            station_id: NWS station identifier (e.g., "KBOS").
            timeout: Per-request timeout in seconds, defaults to the configured one.

        Returns:
            FetchSuccess with the decoded record, or FetchFailure.
        """
        url = self.observation_url(station_id)
        logger.debug("Making latest observation request: %s", url)

        try:
            data = await self._get_json(station_id, url, timeout)
            record = self._parse_observation(station_id, data)
        except NWSClientError as e:
            return FetchFailure(station=station_id, kind=e.kind, detail=str(e))

        return FetchSuccess(station=station_id, record=record)

    def _parse_observation(self, station_id: str, data: dict[str, Any]) -> ObservationRecord:
        """Parse an observation document into an ObservationRecord.

        Args:
            station_id: Station identifier the observation was requested for.
            data: API response data.

        Returns:
            ObservationRecord with every recognised field that has a usable value.

        Raises:
            NWSClientError: If the document has no ``properties`` object.
        """
        props = data.get("properties")
        if not isinstance(props, dict):
            raise NWSClientError(
                FetchErrorKind.DECODE, f"observation for {station_id} has no properties"
            )

        station = props.get("station")
        if not isinstance(station, str) or not station:
            station = self.station_url(station_id)

        fields = {
            record_field: parse_measurement(props.get(prop), dimension)
            for prop, (record_field, dimension) in OBSERVATION_FIELDS.items()
        }

        return ObservationRecord(
            station=station,
            station_code=station_id,
            observed_at=self._parse_timestamp(props.get("timestamp")),
            **fields,
        )

    @staticmethod
    def _parse_timestamp(value: Any) -> datetime | None:
        if not isinstance(value, str):
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Invalid timestamp format: %s", value)
            return None

    async def station_info(self, station_id: str) -> StationInfo:
        """Fetch metadata for a station.

        Args:
            station_id: NWS station identifier (e.g., "KBOS").

        Returns:
            StationInfo for the station.

        Raises:
            NWSClientError: If the request fails or the response is malformed.
        """
        url = self.station_url(station_id)
        logger.debug("Making station information request: %s", url)

        # Only the startup lookups are bounded; scrapes fetch every station at once
        async with self._request_semaphore:
            data = await self._get_json(station_id, url)
        props = data.get("properties")
        if not isinstance(props, dict):
            raise NWSClientError(FetchErrorKind.DECODE, f"station {station_id} has no properties")

        identifier = props.get("stationIdentifier")
        if not isinstance(identifier, str) or not identifier:
            identifier = station_id
        url_id = props.get("@id")
        if not isinstance(url_id, str) or not url_id:
            url_id = url
        name = props.get("name")
        timezone = props.get("timeZone")

        return StationInfo(
            id=url_id,
            station_identifier=identifier,
            name=name if isinstance(name, str) else "",
            elevation=parse_measurement(props.get("elevation"), Dimension.LENGTH),
            timezone=timezone if isinstance(timezone, str) else None,
        )
