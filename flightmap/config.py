"""
Configuration management for FlightMap.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic numbers scattered
across the poller, locator and API layers.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    username: Optional[str] = os.getenv('OPENSKY_USER') or None
    password: Optional[str] = os.getenv('OPENSKY_PASS') or None
    timeout_seconds: float = float(os.getenv('OPENSKY_TIMEOUT_SECONDS', '10'))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.username and self.password)

    @property
    def min_request_interval(self) -> float:
        # Authenticated users can poll more frequently
        return 5.0 if self.is_authenticated else 10.0


@dataclass(frozen=True)
class PollingConfig:
    """Viewport polling settings."""
    interval_seconds: float = float(os.getenv('POLL_INTERVAL_SECONDS', '15'))
    max_backoff_seconds: float = float(os.getenv('POLL_MAX_BACKOFF_SECONDS', '120'))


@dataclass(frozen=True)
class LocatorConfig:
    """Flight search recenter settings."""
    zoom: float = float(os.getenv('LOCATOR_ZOOM', '10'))
    transition_seconds: float = float(os.getenv('LOCATOR_TRANSITION_SECONDS', '2.0'))


@dataclass(frozen=True)
class MapConfig:
    """Initial map view."""
    center: Tuple[float, float] = (10.0, 45.0)  # (lon, lat)
    zoom: float = 4.0


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    polling: PollingConfig
    locator: LocatorConfig
    map: MapConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        polling=PollingConfig(),
        locator=LocatorConfig(),
        map=MapConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
