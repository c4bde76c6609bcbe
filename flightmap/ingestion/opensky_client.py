"""
OpenSky Network API client.

Provides the two upstream collaborators the core depends on:
- bbox-fetch: all state vectors inside a bounding box
- callsign-search: all state vectors whose callsign contains a query

Both return raw state vector arrays (see flightmap.models.flight_state for
the index layout) and fail with a classified error:
- UpstreamRateLimited on HTTP 429
- UpstreamUnavailable on anything else (auth, network, timeout, bad JSON)
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, List, Optional

import requests
from requests.auth import HTTPBasicAuth

from flightmap.config import config
from flightmap.errors import UpstreamRateLimited, UpstreamUnavailable, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box in WGS84 degrees.

    Always ordered west, south, east, north. OpenSky expects
    lamin, lomin, lamax, lomax.
    """
    west: float
    south: float
    east: float
    north: float

    @classmethod
    def parse(cls, text: Optional[str]) -> 'BoundingBox':
        """
        Parse 'west,south,east,north'.

        Raises ValidationError when the string is missing, malformed,
        or out of range.
        """
        if not text:
            raise ValidationError('Missing bbox query parameter.')

        try:
            west, south, east, north = (float(v) for v in text.split(','))
        except ValueError:
            raise ValidationError('Invalid bbox format. Expected: west,south,east,north')

        bbox = cls(west=west, south=south, east=east, north=north)
        if not bbox.is_valid():
            raise ValidationError('Coordinates out of valid range')
        return bbox

    def is_valid(self) -> bool:
        lons_ok = all(-180 <= v <= 180 for v in (self.west, self.east))
        lats_ok = all(-90 <= v <= 90 for v in (self.south, self.north))
        return lons_ok and lats_ok

    def as_list(self) -> List[float]:
        return [self.west, self.south, self.east, self.north]

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.south,
            'lomin': self.west,
            'lamax': self.north,
            'lomax': self.east,
        }


class OpenSkyClient:
    """
    Client for OpenSky Network API.

    Handles:
    - GET requests to /states/all endpoint
    - Optional authentication for higher rate limits
    - Bounding box filtering
    - Rate limiting (internal tracking)
    - Error classification
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 10.0,
        min_interval: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.auth = None
        if username and password:
            self.auth = HTTPBasicAuth(username, password)
            logger.info('OpenSky client initialized with authentication')
        else:
            logger.warning('OpenSky client running without authentication (lower rate limits)')

        self.session = session or requests.Session()
        self.last_request_time: float = 0
        self._rate_lock = threading.Lock()
        if min_interval is None:
            min_interval = 5.0 if self.auth else 10.0
        self._min_interval = min_interval

    @classmethod
    def from_config(cls) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            username=config.opensky.username,
            password=config.opensky.password,
            base_url=config.opensky.base_url,
            timeout=config.opensky.timeout_seconds,
            min_interval=config.opensky.min_request_interval,
        )

    def _wait_for_rate_limit(self) -> None:
        """
        Enforce minimum interval between requests.

        OpenSky rate limits:
        - Anonymous: ~10 seconds between requests
        - Authenticated: ~5 seconds between requests
        """
        elapsed = time.time() - self.last_request_time
        if elapsed < self._min_interval:
            sleep_time = self._min_interval - elapsed
            logger.debug(f'Rate limiting: sleeping {sleep_time:.1f}s')
            time.sleep(sleep_time)

    def _reserve_request_slot(self) -> None:
        """
        Wait for and claim the next request slot.

        Threads queue on the lock; each stamps last_request_time before
        its request goes out, so concurrent callers stay spaced apart.
        """
        with self._rate_lock:
            self._wait_for_rate_limit()
            self.last_request_time = time.time()

    def _get_states(self, params: dict) -> dict:
        """
        GET /states/all and return the decoded payload.

        Raises:
            UpstreamRateLimited on HTTP 429
            UpstreamUnavailable on every other failure
        """
        self._reserve_request_slot()

        url = f'{self.base_url}/states/all'
        logger.debug(f'Fetching states: {url} params={params}')

        try:
            response = self.session.get(
                url,
                params=params,
                auth=self.auth,
                timeout=self.timeout,
            )

            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout as e:
            logger.error('OpenSky API timeout')
            raise UpstreamUnavailable('OpenSky request timed out.') from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 429:
                logger.warning('OpenSky rate limit exceeded')
                raise UpstreamRateLimited() from e
            if status in (401, 403):
                logger.error(f'OpenSky authentication failed: {status}')
                raise UpstreamUnavailable(
                    'Authentication failed with OpenSky Network.',
                    status_code=status,
                ) from e
            logger.error(f'OpenSky API error: {status}')
            raise UpstreamUnavailable(status_code=status) from e
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise UpstreamUnavailable() from e
        except ValueError as e:
            logger.error(f'OpenSky returned malformed JSON: {e}')
            raise UpstreamUnavailable('Malformed response from OpenSky.') from e

        if not isinstance(data, dict):
            logger.error('OpenSky returned unexpected payload type')
            raise UpstreamUnavailable('Malformed response from OpenSky.')

        return data

    def fetch_states(self, bbox: BoundingBox) -> List[Any]:
        """
        Fetch raw state vectors inside a bounding box.

        Returns the raw 'states' arrays, possibly empty.
        """
        data = self._get_states(bbox.to_params())
        states = data.get('states') or []
        logger.info(f'Received {len(states)} state vectors from OpenSky')
        return states

    def fetch_snapshot(self, bbox: BoundingBox) -> dict:
        """Fetch the full payload ({'time', 'states'}) for proxying."""
        data = self._get_states(bbox.to_params())
        return {
            'time': data.get('time', int(time.time())),
            'states': data.get('states') or [],
        }

    def search_callsign(self, callsign: str) -> List[Any]:
        """
        Find state vectors whose callsign contains the query.

        OpenSky has no callsign filter, so this pulls the global snapshot
        and matches on the trimmed, upper-cased callsign field.
        """
        query = callsign.strip().upper()
        data = self._get_states({})
        states = data.get('states') or []

        matches = [
            sv for sv in states
            if isinstance(sv, (list, tuple)) and len(sv) > 1
            and isinstance(sv[1], str) and query in sv[1].strip().upper()
        ]
        logger.info(f'Callsign search {query!r}: {len(matches)} of {len(states)} states match')
        return matches
