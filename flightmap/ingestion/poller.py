"""
Viewport poller - keeps the live feature set in sync with the map view.

Cycle (Idle -> Fetching -> Applied | Failed -> Idle):
1. Read the current viewport bounding box
2. Fetch raw state vectors for it
3. Parse and build features
4. Publish as the new live set (full replace, never merge)

Triggers are the initial kick when the map is ready, a fixed interval
(15s by default) and every viewport change. They all go through poll().

Overlapping triggers:
Every poll takes a generation number before fetching. When a response
comes back, it is only published if no newer poll has been issued since;
otherwise it is discarded as superseded. Rapid panning therefore always
ends with the data for the last viewport, not whichever response was
slowest.

Failures:
Any upstream error publishes an empty set (stale aircraft are never left
on screen) and records whether it was a rate limit. Nothing is retried
immediately; after a rate limit the background interval doubles up to
max_backoff and resets after the next success.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from flightmap.config import config
from flightmap.errors import UpstreamError
from flightmap.ingestion.opensky_client import BoundingBox
from flightmap.models.feature import FeatureCollection, features_from_records
from flightmap.store import LiveFeatureStore

logger = logging.getLogger(__name__)

FAILURE_RATE_LIMITED = 'rate_limited'
FAILURE_UNAVAILABLE = 'unavailable'


class PollState(str, Enum):
    """Poll cycle state."""
    IDLE = 'idle'
    FETCHING = 'fetching'
    APPLIED = 'applied'
    FAILED = 'failed'


@dataclass
class PollResult:
    """Outcome of one poll() call."""
    state: PollState
    generation: int
    count: int = 0
    failure: Optional[str] = None
    superseded: bool = False


class ViewportPoller:
    """
    Polls the upstream feed for the current viewport.

    Can run as a background thread for continuous polling, with viewport
    changes triggering extra polls from the caller's thread.
    """

    def __init__(
        self,
        client,
        store: LiveFeatureStore,
        bounds_provider: Callable[[], Optional[BoundingBox]],
        interval: Optional[float] = None,
        max_backoff: Optional[float] = None,
    ):
        """
        Initialize the poller.

        Args:
            client: bbox-fetch collaborator with fetch_states(bbox)
            store: Live feature store to publish into
            bounds_provider: Returns the current viewport, or None if the
                map is not ready yet
            interval: Seconds between background polls
            max_backoff: Upper bound on the interval after rate limiting
        """
        self.client = client
        self.store = store
        self.bounds_provider = bounds_provider
        self.interval = interval or config.polling.interval_seconds
        self.max_backoff = max_backoff or config.polling.max_backoff_seconds

        self._lock = threading.Lock()
        self._generation = 0
        self._in_flight = 0
        self._current_wait = self.interval

        # Background loop
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Statistics
        self._fetch_count = 0
        self._error_count = 0
        self._superseded_count = 0
        self._last_fetch_time: float = 0
        self.last_failure: Optional[str] = None
        self.last_result: Optional[PollResult] = None

    @property
    def state(self) -> PollState:
        return PollState.FETCHING if self._in_flight else PollState.IDLE

    @property
    def next_wait(self) -> float:
        """Seconds the background loop waits before the next poll."""
        return self._current_wait

    def poll(self) -> PollResult:
        """
        Execute one poll cycle. Never raises.

        Returns a PollResult describing what was published, if anything.
        """
        try:
            bbox = self.bounds_provider()
        except Exception as e:
            logger.exception('Failed to read viewport bounds')
            with self._lock:
                self._generation += 1
                generation = self._generation
            return self._fail(generation, FAILURE_UNAVAILABLE, e)

        if bbox is None:
            logger.debug('Viewport not ready, skipping poll')
            return PollResult(state=PollState.IDLE, generation=self._generation)

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._in_flight += 1

        try:
            try:
                records = self.client.fetch_states(bbox)
                collection = features_from_records(records)
            except UpstreamError as e:
                return self._fail(generation, e.reason, e)
            except Exception as e:
                logger.exception('Unexpected error while polling')
                return self._fail(generation, FAILURE_UNAVAILABLE, e)

            return self._apply(generation, collection)
        finally:
            with self._lock:
                self._in_flight -= 1

    def notify_viewport_changed(self) -> PollResult:
        """Viewport (pan/zoom end) trigger."""
        return self.poll()

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            self._superseded_count += 1
            logger.debug(f'Discarding response for generation {generation}, latest is {self._generation}')
            return True
        return False

    def _apply(self, generation: int, collection: FeatureCollection) -> PollResult:
        with self._lock:
            if self._is_stale(generation):
                return self._record(PollResult(PollState.IDLE, generation, superseded=True))
            self.store.replace(collection)
            self._fetch_count += 1
            self._last_fetch_time = time.time()
            self._current_wait = self.interval
            self.last_failure = None

        logger.info(f'Published {len(collection)} flights for current view')
        return self._record(PollResult(PollState.APPLIED, generation, count=len(collection)))

    def _fail(self, generation: int, reason: str, error: Exception) -> PollResult:
        with self._lock:
            if self._is_stale(generation):
                return self._record(PollResult(PollState.IDLE, generation, superseded=True))
            self.store.replace(FeatureCollection.empty())
            self._error_count += 1
            self.last_failure = reason
            if reason == FAILURE_RATE_LIMITED:
                self._current_wait = min(self._current_wait * 2, self.max_backoff)

        if reason == FAILURE_RATE_LIMITED:
            logger.warning(f'Rate limited, next poll in {self._current_wait:.0f}s')
        else:
            logger.error(f'Poll failed: {error}')
        return self._record(PollResult(PollState.FAILED, generation, failure=reason))

    def _record(self, result: PollResult) -> PollResult:
        self.last_result = result
        return result

    # -------------------------------------------------------------------------
    # Background loop
    # -------------------------------------------------------------------------

    def run_continuous(self) -> None:
        """
        Poll immediately, then every interval until stopped.

        This method blocks - use start_background() for non-blocking.
        """
        logger.info(f'Starting viewport polling (interval={self.interval}s)')

        while not self._stop_event.is_set():
            self.poll()
            self._stop_event.wait(self._current_wait)

        logger.info('Viewport polling stopped')

    def start_background(self) -> None:
        """Start polling in background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Polling already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_continuous,
            daemon=True,
        )
        self._thread.start()
        logger.info('Background polling started')

    def stop(self) -> None:
        """Stop background polling."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    @property
    def stats(self) -> dict:
        """Get polling statistics."""
        return {
            'state': self.state.value,
            'generation': self._generation,
            'fetch_count': self._fetch_count,
            'error_count': self._error_count,
            'superseded_count': self._superseded_count,
            'last_failure': self.last_failure,
            'last_fetch_time': self._last_fetch_time,
            'next_wait': self._current_wait,
            'running': self.running,
        }
