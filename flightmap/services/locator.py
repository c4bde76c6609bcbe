"""
Flight locator - find one flight by callsign and bring it into view.

Unlike the poller this runs only on user action. A successful search:
1. Recenters the map on the aircraft
2. Merges the aircraft into the live set, replacing any feature with the
   same callsign
3. Opens the detail popup once the recenter transition has finished

Concurrent searches are not serialized here; callers disable the search
control while one is in flight, and the last result to arrive wins.
"""

import logging
import threading
from typing import Any, Callable, Optional

from flightmap.config import config
from flightmap.errors import LocationUnavailableError, NotFoundError, ValidationError
from flightmap.models.details import FlightDetails
from flightmap.models.feature import RenderedFeature, build_feature
from flightmap.models.flight_state import parse_state_vector
from flightmap.render import PopupDirective, RecenterDirective
from flightmap.store import LiveFeatureStore

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]


def _timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class FlightLocator:
    """Looks up a single flight and merges it into the live feature set."""

    def __init__(
        self,
        client,
        store: LiveFeatureStore,
        renderer,
        zoom: Optional[float] = None,
        transition_seconds: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """
        Args:
            client: callsign-search collaborator with search_callsign(query)
            store: Live feature store to merge into
            renderer: Receives recenter and popup directives
            zoom: Target zoom level for the recenter
            transition_seconds: Recenter duration; the popup waits this long
            scheduler: Called as scheduler(delay, callback); defaults to a
                daemon threading.Timer
        """
        self.client = client
        self.store = store
        self.renderer = renderer
        self.zoom = zoom if zoom is not None else config.locator.zoom
        self.transition_seconds = (
            transition_seconds if transition_seconds is not None
            else config.locator.transition_seconds
        )
        self.scheduler = scheduler or _timer_scheduler

    def locate(self, callsign: Optional[str]) -> RenderedFeature:
        """
        Search for a flight, recenter on it and merge it into the live set.

        Raises:
            ValidationError: empty input (no network call is made)
            NotFoundError: no aircraft matches
            LocationUnavailableError: first match has no position
            UpstreamRateLimited / UpstreamUnavailable: feed failure
        """
        query = (callsign or '').strip().upper()
        if not query:
            raise ValidationError()

        records = self.client.search_callsign(query)
        if not records:
            logger.info(f'No flight found for {query}')
            raise NotFoundError(f'Flight {query} not found. Check the flight number and try again.')

        state = parse_state_vector(records[0])
        # Same placement rule as the poll cycle, so 0.0 counts as absent
        if not state.has_position():
            logger.info(f'Flight {state.callsign} has no position')
            raise LocationUnavailableError(
                f'Flight {state.callsign} found, but its location is currently unavailable.'
            )

        feature = build_feature(state)
        logger.info(f'Located {state.callsign} at ({state.longitude:.4f}, {state.latitude:.4f})')

        self.renderer.recenter(RecenterDirective(
            coordinates=feature.coordinates,
            zoom=self.zoom,
            duration_ms=int(self.transition_seconds * 1000),
        ))
        self.store.merge(feature)

        # Popup only once the camera has arrived
        self.scheduler(self.transition_seconds, lambda: self._show_popup(feature))

        return feature

    def _show_popup(self, feature: RenderedFeature) -> None:
        self.renderer.show_popup(PopupDirective(
            coordinates=feature.coordinates,
            details=FlightDetails.from_feature(feature),
        ))
