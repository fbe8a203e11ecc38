"""Main entry point for running the exporter."""

import argparse
import asyncio
import logging
import sys
from typing import NoReturn

import uvicorn
from prometheus_client import CollectorRegistry
from pydantic import ValidationError

from . import __version__
from .clients import NWSClient
from .collector import StationCollector
from .config import ConfigurationError, NWSConfig, ServerConfig, Settings, get_settings
from .encoder import MetricEncoder
from .metrics import CollectorMetrics
from .registry import StationRegistry
from .server import create_app

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Reduce noise from httpx and per-request access logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="nws-exporter",
        description="Export National Weather Service observations as Prometheus metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export observations for Boston Logan and JFK
  nws-exporter KBOS KJFK

  # Listen on a different port with debug logging
  nws-exporter KBOS --port 9000 --log-level DEBUG

Environment Variables:
  NWS_STATION_IDS           Comma-separated station IDs (used if none given)
  NWS_BASE_URL              Base URL for the Weather.gov API
  NWS_TIMEOUT_MS            Per-request timeout in milliseconds (default: 5000)
  NWS_VERIFY_STATIONS       Look up stations at startup (default: true)
  NWS_MAX_CONCURRENT        Station lookups in flight at startup (default: 10)
  SERVER_HOST, SERVER_PORT  Address to bind to (default: 0.0.0.0:9782)
  SERVER_SCRAPE_DEADLINE_MS Collector deadline per scrape (default: 9000)
        """,
    )

    parser.add_argument(
        "station",
        nargs="*",
        help="NWS weather station ID to fetch observations for (e.g. KBOS)",
    )

    parser.add_argument("--api-url", help="Base URL for the Weather.gov API")

    parser.add_argument(
        "--timeout-millis",
        type=int,
        help="Timeout for each Weather.gov API request, in milliseconds",
    )

    parser.add_argument(
        "--deadline-millis",
        type=int,
        help="Deadline for collecting all stations on a scrape, in milliseconds",
    )

    parser.add_argument("--bind", help="Address to bind to")

    parser.add_argument("--port", type=int, help="Port to listen on")

    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip looking up station information at startup",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Override environment settings with command line arguments.

    Raises:
        ConfigurationError: If an override fails validation.
    """
    nws_updates: dict[str, object] = {}
    if args.station:
        nws_updates["station_ids"] = ",".join(args.station)
    if args.api_url:
        nws_updates["base_url"] = args.api_url
    if args.timeout_millis is not None:
        nws_updates["timeout_ms"] = args.timeout_millis
    if args.no_verify:
        nws_updates["verify_stations"] = False

    server_updates: dict[str, object] = {}
    if args.bind:
        server_updates["host"] = args.bind
    if args.port is not None:
        server_updates["port"] = args.port
    if args.deadline_millis is not None:
        server_updates["scrape_deadline_ms"] = args.deadline_millis

    try:
        nws = NWSConfig(**{**settings.nws.model_dump(), **nws_updates})
        server = ServerConfig(**{**settings.server.model_dump(), **server_updates})
    except ValidationError as e:
        raise ConfigurationError(f"invalid arguments: {e}") from e

    return settings.model_copy(
        update={
            "log_level": args.log_level or settings.log_level,
            "nws": nws,
            "server": server,
        }
    )


async def serve(settings: Settings, registry: StationRegistry) -> None:
    """Verify stations, then serve metrics until shutdown.

    Args:
        settings: Application settings.
        registry: Validated station registry.

    Raises:
        ConfigurationError: If station verification fails.
    """
    client = NWSClient(settings.nws)
    collector: StationCollector | None = None

    try:
        if settings.nws.verify_stations:
            # Fail fast on unknown stations or an unreachable API before serving
            registry = await registry.verified(client)

        deadline = settings.server.scrape_deadline_ms / 1000
        metric_registry = CollectorRegistry()
        collector = StationCollector(
            client,
            registry,
            CollectorMetrics(metric_registry),
            deadline=deadline,
            timeout=min(client.timeout, deadline),
        )
        app = create_app(collector, MetricEncoder(metric_registry))

        config = uvicorn.Config(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_config=None,
            log_level=settings.log_level.lower(),
        )
        logger.info(
            "Starting server on %s:%d for stations: %s",
            settings.server.host,
            settings.server.port,
            ", ".join(registry),
        )
        await uvicorn.Server(config).serve()
    finally:
        if collector is not None:
            await collector.close()
        await client.close()


def main() -> NoReturn:
    """Main entry point."""
    args = parse_args()

    try:
        settings = apply_args(get_settings(), args)
        setup_logging(settings.log_level)
        registry = StationRegistry(settings.nws.get_station_ids_list())
    except ConfigurationError as e:
        setup_logging()
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    logger.info("nws_exporter %s starting", __version__)

    try:
        asyncio.run(serve(settings, registry))
    except ConfigurationError as e:
        logger.error("Failed to start: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    logger.info("Server shutdown")
    sys.exit(0)


if __name__ == "__main__":
    main()
