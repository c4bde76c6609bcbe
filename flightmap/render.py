"""
Rendering layer contract.

The core never draws anything. It hands the renderer:
- a full feature collection on every publish
- the current filter predicate
- recenter and popup directives

Any map technology can sit behind MapRenderer.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, runtime_checkable

from flightmap.filters import FilterPredicate
from flightmap.ingestion.opensky_client import BoundingBox
from flightmap.models.details import FlightDetails
from flightmap.models.feature import FeatureCollection


@dataclass(frozen=True)
class RecenterDirective:
    """Fly the viewport to a coordinate."""
    coordinates: Tuple[float, float]  # (lon, lat)
    zoom: float
    duration_ms: int


@dataclass(frozen=True)
class PopupDirective:
    """Show a detail popup anchored at a coordinate."""
    coordinates: Tuple[float, float]  # (lon, lat)
    details: FlightDetails


@runtime_checkable
class MapRenderer(Protocol):
    """Interface a map front end implements to display live flights."""

    def get_bounds(self) -> Optional[BoundingBox]:
        """Current viewport, or None before the map is ready."""
        ...

    def set_features(self, collection: FeatureCollection) -> None:
        """Replace the drawn feature set."""
        ...

    def set_filter(self, predicate: FilterPredicate) -> None:
        """Restrict drawn features to those the predicate accepts."""
        ...

    def recenter(self, directive: RecenterDirective) -> None:
        ...

    def show_popup(self, directive: PopupDirective) -> None:
        ...
