"""Station metrics collector: concurrent fan-out and sample mapping."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from .metrics import (
    FIELD_METRICS,
    LABEL_STATION,
    LABEL_STATION_ID,
    LABEL_STATION_NAME,
    STATION_METRIC,
    CollectorMetrics,
)
from .registry import StationRegistry
from .schemas import (
    FetchErrorKind,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    MetricSample,
    ObservationRecord,
    StationId,
)
from .units import convert

logger = logging.getLogger(__name__)


class ObservationClient(Protocol):
    """Protocol for the observation client to allow mocking."""

    async def fetch(self, station_id: str, timeout: float | None = None) -> FetchOutcome: ...


class StationCollector:
    """Fetch observations for every station on each scrape and map them to samples.

    Each call to ``collect`` builds its outcomes and samples from scratch;
    nothing is cached between scrapes.
    """

    def __init__(
        self,
        client: ObservationClient,
        registry: StationRegistry,
        metrics: CollectorMetrics,
        deadline: float,
        timeout: float | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            client: Client used for one fetch per station.
            registry: Stations to collect by default.
            metrics: Internal metrics (failure counter).
            deadline: Collector-wide deadline per scrape, in seconds.
            timeout: Per-request timeout passed to the client, in seconds.
        """
        self.client = client
        self.registry = registry
        self.metrics = metrics
        self.deadline = deadline
        self.timeout = timeout
        # Fetches that outlived their scrape, kept referenced until they finish
        self._abandoned: set[asyncio.Task] = set()

    async def collect(
        self,
        stations: Sequence[StationId] | None = None,
        deadline: float | None = None,
    ) -> list[MetricSample]:
        """Fetch all stations and return samples for those that succeeded.

        Failures are logged and counted, never raised.
        """
        outcomes = await self.fetch_all(stations, deadline)

        failures = [o for o in outcomes if isinstance(o, FetchFailure)]
        for failure in failures:
            self._record_failure(failure)

        samples = self.to_samples(outcomes)
        logger.debug(
            "Collected %d samples from %d stations (%d failed)",
            len(samples),
            len(outcomes),
            len(failures),
        )
        return samples

    async def fetch_all(
        self,
        stations: Sequence[StationId] | None = None,
        deadline: float | None = None,
    ) -> list[FetchOutcome]:
        """Fetch observations for all stations concurrently.

        Args:
            stations: Stations to fetch, defaults to every registered station.
            deadline: Caller's deadline in seconds, capped at the collector deadline.

        Returns:
            Exactly one outcome per station, in completion order. Stations that
            did not finish before the deadline get a timeout failure.
        """
        if stations is None:
            stations = self.registry.station_ids
        if deadline is None:
            deadline = self.deadline
        else:
            deadline = min(deadline, self.deadline)
        # Abandoned fetches end by the deadline too
        timeout = deadline if self.timeout is None else min(self.timeout, deadline)

        tasks: dict[asyncio.Task, StationId] = {
            asyncio.create_task(
                self.client.fetch(station, timeout=timeout), name=f"fetch-{station}"
            ): station
            for station in stations
        }
        if not tasks:
            return []

        done, pending = await asyncio.wait(tasks, timeout=deadline)

        outcomes: list[FetchOutcome] = [self._task_outcome(tasks[task], task) for task in done]
        for task in pending:
            outcomes.append(
                FetchFailure(
                    station=tasks[task],
                    kind=FetchErrorKind.TIMEOUT,
                    detail=f"no observation within {deadline:.3f}s deadline",
                )
            )
            self._abandon(task)

        return outcomes

    def to_samples(self, outcomes: Sequence[FetchOutcome]) -> list[MetricSample]:
        """Convert successful outcomes into metric samples; failures emit nothing.

        Series are keyed by the reported station URL, so when two configured
        identifiers resolve to the same station only the record of the one
        configured first is used.
        """
        order = {station: i for i, station in enumerate(self.registry.station_ids)}
        successes = sorted(
            (o for o in outcomes if isinstance(o, FetchSuccess)),
            key=lambda o: order.get(o.station, len(order)),
        )

        samples: list[MetricSample] = []
        seen: dict[str, StationId] = {}
        for outcome in successes:
            url = outcome.record.station
            if url in seen:
                logger.warning(
                    "Skipping observation for %s: station %s already exported for %s",
                    outcome.station,
                    url,
                    seen[url],
                )
                continue
            seen[url] = outcome.station
            samples.extend(self._record_samples(outcome.station, outcome.record))
        return samples

    def _record_samples(
        self, station_id: StationId, record: ObservationRecord
    ) -> list[MetricSample]:
        """Metadata sample plus one gauge per populated field of a record."""
        info = self.registry.info(station_id)
        code = info.station_identifier if info else record.station_code
        name = info.name if info else record.station_name

        samples = [
            MetricSample(
                name=STATION_METRIC,
                labels={
                    LABEL_STATION: record.station,
                    LABEL_STATION_ID: code or station_id,
                    LABEL_STATION_NAME: name or "",
                },
                value=1.0,
            )
        ]

        for metric in FIELD_METRICS:
            measurement = getattr(record, metric.field)
            if measurement is None:
                continue
            value = convert(measurement, metric.dimension)
            if value is None:
                continue
            samples.append(
                MetricSample(name=metric.name, labels={LABEL_STATION: record.station}, value=value)
            )

        return samples

    @staticmethod
    def _task_outcome(station: StationId, task: asyncio.Task) -> FetchOutcome:
        """Outcome of a finished fetch task, turning an unexpected exception into a failure."""
        error = task.exception()
        if error is not None:
            logger.error("Unexpected error fetching %s", station, exc_info=error)
            return FetchFailure(station=station, kind=FetchErrorKind.INTERNAL, detail=repr(error))
        return task.result()

    def _record_failure(self, failure: FetchFailure) -> None:
        logger.warning(
            "Failed to fetch observation for %s (%s): %s",
            failure.station,
            failure.kind.value,
            failure.detail,
        )
        self.metrics.record_failure(failure.station, failure.kind.value)

    def _abandon(self, task: asyncio.Task) -> None:
        """Let a fetch that missed the deadline finish in the background."""
        self._abandoned.add(task)
        task.add_done_callback(self._discard_abandoned)

    def _discard_abandoned(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Abandoned fetch %s failed: %r", task.get_name(), task.exception())

    async def close(self) -> None:
        """Cancel fetches still running from earlier scrapes."""
        tasks = list(self._abandoned)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
