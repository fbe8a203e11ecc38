"""Station registry: the validated, immutable list of stations to export."""

import asyncio
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .clients.nws import NWSClient, NWSClientError
from .config import ConfigurationError
from .schemas import StationId, StationInfo

logger = logging.getLogger(__name__)

STATION_ID_PATTERN = re.compile(r"[A-Za-z0-9]{1,16}")


class StationRegistry:
    """Configured station identifiers, fixed for the lifetime of the process.

    Identifiers are case-preserved and compared by exact string match.
    Duplicates are dropped, keeping the first occurrence.
    """

    def __init__(
        self,
        station_ids: Iterable[str],
        info: Mapping[StationId, StationInfo] | None = None,
    ) -> None:
        ids: list[StationId] = []
        for station_id in station_ids:
            if not isinstance(station_id, str) or not STATION_ID_PATTERN.fullmatch(station_id):
                raise ConfigurationError(f"malformed station identifier: {station_id!r}")
            if station_id in ids:
                logger.warning("Ignoring duplicate station %s", station_id)
                continue
            ids.append(station_id)

        if not ids:
            raise ConfigurationError("at least one station must be configured")

        self._station_ids: tuple[StationId, ...] = tuple(ids)
        self._info: Mapping[StationId, StationInfo] = MappingProxyType(dict(info or {}))

    @property
    def station_ids(self) -> tuple[StationId, ...]:
        return self._station_ids

    def info(self, station_id: StationId) -> StationInfo | None:
        """Metadata looked up at startup, if verification was done."""
        return self._info.get(station_id)

    def __iter__(self) -> Iterator[StationId]:
        return iter(self._station_ids)

    def __len__(self) -> int:
        return len(self._station_ids)

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._station_ids

    def __repr__(self) -> str:
        return f"StationRegistry({list(self._station_ids)!r})"

    async def verified(self, client: NWSClient) -> "StationRegistry":
        """Look up every station in the API and return a registry with its metadata.

        This checks both that the stations exist and that the API is reachable
        before the exporter starts serving.

        Raises:
            ConfigurationError: If any station cannot be looked up.
        """
        results = await asyncio.gather(
            *(client.station_info(sid) for sid in self._station_ids),
            return_exceptions=True,
        )

        info: dict[StationId, StationInfo] = {}
        for station_id, result in zip(self._station_ids, results):
            if isinstance(result, NWSClientError):
                raise ConfigurationError(
                    f"failed to fetch station information for {station_id}: {result}"
                ) from result
            if isinstance(result, BaseException):
                raise result
            logger.info("Loaded station %s (%s)", station_id, result.name)
            info[station_id] = result

        return StationRegistry(self._station_ids, info)
