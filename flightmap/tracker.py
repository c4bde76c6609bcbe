"""
FlightTracker - coordinator for one map view.

Owns the live feature store and the components acting on it:
- ViewportPoller writes the store on every cycle
- FlightLocator merges search results into it
- The current FilterPredicate is pushed to the renderer, which applies it

Every store publish is forwarded to the renderer. Nothing here raises to
the UI: search failures come back as a message string.
"""

import logging
from typing import Optional

from flightmap.errors import FlightMapError
from flightmap.filters import FilterPredicate, compile_filter
from flightmap.geo import wrap_longitude
from flightmap.ingestion.poller import ViewportPoller
from flightmap.models.details import FlightDetails
from flightmap.models.feature import FeatureCollection, RenderedFeature
from flightmap.render import MapRenderer, PopupDirective
from flightmap.services.locator import FlightLocator, Scheduler
from flightmap.store import LiveFeatureStore

logger = logging.getLogger(__name__)


class FlightTracker:
    """Wires the polling, search and filter pipeline to a renderer."""

    def __init__(
        self,
        client,
        renderer: MapRenderer,
        interval: Optional[float] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.renderer = renderer
        self.store = LiveFeatureStore()
        self.store.subscribe(renderer.set_features)

        self.poller = ViewportPoller(
            client=client,
            store=self.store,
            bounds_provider=renderer.get_bounds,
            interval=interval,
        )
        self.locator = FlightLocator(
            client=client,
            store=self.store,
            renderer=renderer,
            scheduler=scheduler,
        )
        self.filter: FilterPredicate = compile_filter('')

    @property
    def features(self) -> FeatureCollection:
        return self.store.current

    @property
    def visible_features(self) -> FeatureCollection:
        """Live features the current filter accepts."""
        return self.store.current.filter(self.filter)

    def start(self) -> None:
        """Map is ready: poll now and keep polling."""
        self.poller.start_background()

    def stop(self) -> None:
        self.poller.stop()

    def on_viewport_changed(self) -> None:
        self.poller.notify_viewport_changed()

    def set_filter(self, text: Optional[str]) -> FilterPredicate:
        """Recompile the filter from input text and push it to the renderer."""
        self.filter = compile_filter(text)
        self.renderer.set_filter(self.filter)
        return self.filter

    def clear_filter(self) -> FilterPredicate:
        return self.set_filter('')

    def search(self, callsign: Optional[str]) -> Optional[str]:
        """
        Locate a flight by callsign.

        Returns None on success, otherwise the message to show the user.
        """
        try:
            self.locator.locate(callsign)
        except FlightMapError as e:
            logger.info(f'Search for {callsign!r} failed: {e.user_message}')
            return e.user_message
        return None

    def click(self, feature: RenderedFeature, clicked_lng: float) -> PopupDirective:
        """Open the detail popup for a clicked feature, next to the click."""
        longitude = wrap_longitude(feature.longitude, clicked_lng)
        directive = PopupDirective(
            coordinates=(longitude, feature.latitude),
            details=FlightDetails.from_feature(feature),
        )
        self.renderer.show_popup(directive)
        return directive
