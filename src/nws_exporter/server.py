"""HTTP scrape endpoint serving ``GET /metrics``."""

import logging

from fastapi import FastAPI, Request, Response

from .collector import StationCollector
from .encoder import CONTENT_TYPE, EncodingError, MetricEncoder

logger = logging.getLogger(__name__)

SCRAPE_TIMEOUT_HEADER = "X-Prometheus-Scrape-Timeout-Seconds"
SCRAPE_TIMEOUT_OFFSET = 0.5  # Leave time to encode and write the response
MIN_DEADLINE = 0.1


def scrape_deadline(request: Request) -> float | None:
    """Deadline derived from the scraper's own timeout header, if it sent one."""
    header = request.headers.get(SCRAPE_TIMEOUT_HEADER)
    if header is None:
        return None
    try:
        timeout = float(header)
    except ValueError:
        logger.debug("Ignoring invalid %s header: %s", SCRAPE_TIMEOUT_HEADER, header)
        return None
    return max(timeout - SCRAPE_TIMEOUT_OFFSET, MIN_DEADLINE)


def create_app(collector: StationCollector, encoder: MetricEncoder) -> FastAPI:
    """Build the FastAPI app exposing the collector's metrics.

    Args:
        collector: Collector invoked once per scrape.
        encoder: Encoder for the collected samples.

    Returns:
        FastAPI application.
    """
    app = FastAPI(title="nws_exporter", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/metrics")
    async def metrics(request: Request) -> Response:
        samples = await collector.collect(deadline=scrape_deadline(request))
        try:
            body = encoder.encode(samples)
        except EncodingError as e:
            logger.error("Error encoding metrics: %s", e)
            return Response(status_code=503)

        return Response(content=body, media_type=CONTENT_TYPE)

    return app
