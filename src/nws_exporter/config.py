"""Configuration settings loaded from environment variables."""

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Invalid configuration; fatal at startup."""


class NWSConfig(BaseSettings):
    """NOAA NWS API configuration."""

    base_url: str = "https://api.weather.gov"
    user_agent: str = "nws_exporter/0.5.1 (Prometheus metrics exporter for api.weather.gov)"
    station_ids: str = ""  # Comma-separated NWS station IDs (e.g., "KBOS,KJFK")
    timeout_ms: int = Field(default=5000, gt=0)  # Per-request timeout
    max_concurrent: int = Field(default=10, gt=0)  # Startup station lookups in flight
    verify_stations: bool = True  # Look up each station at startup

    model_config = {"env_prefix": "NWS_"}

    def get_station_ids_list(self) -> list[str]:
        """Parse station_ids string into list (case preserved)."""
        if not self.station_ids.strip():
            return []
        return [s.strip() for s in self.station_ids.split(",") if s.strip()]


class ServerConfig(BaseSettings):
    """Scrape endpoint configuration."""

    host: str = "0.0.0.0"
    port: int = Field(default=9782, gt=0, le=65535)
    scrape_deadline_ms: int = Field(default=9000, gt=0)  # Collector-wide deadline per scrape

    model_config = {"env_prefix": "SERVER_"}


class Settings(BaseSettings):
    """Application settings combining all configs."""

    log_level: str = "INFO"
    nws: NWSConfig = Field(default_factory=NWSConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def get_settings() -> Settings:
    """Load settings from environment.

    Raises:
        ConfigurationError: If an environment variable has an invalid value.
    """
    try:
        return Settings(nws=NWSConfig(), server=ServerConfig())
    except ValidationError as e:
        raise ConfigurationError(f"invalid settings: {e}") from e
