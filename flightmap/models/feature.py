"""
Renderable features and the published feature collection.

A RenderedFeature is a GeoJSON-style point plus every FlightState field as
properties. A FeatureCollection is an immutable, ordered set of them; the
live set is always replaced wholesale, never edited in place, so readers
holding a reference never see a half-built collection.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from flightmap.models.flight_state import FlightState, parse_state_vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedFeature:
    """Point geometry ([longitude, latitude]) with flight attributes."""
    coordinates: Tuple[float, float]
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def icao24(self) -> str:
        return self.properties.get('icao24', '')

    @property
    def callsign(self) -> Optional[str]:
        return self.properties.get('callsign')

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    def with_longitude(self, longitude: float) -> 'RenderedFeature':
        """Copy of this feature placed at a different longitude."""
        return RenderedFeature(
            coordinates=(longitude, self.coordinates[1]),
            properties=self.properties,
        )

    def to_geojson(self) -> dict:
        return {
            'type': 'Feature',
            'geometry': {
                'type': 'Point',
                'coordinates': list(self.coordinates),
            },
            'properties': dict(self.properties),
        }


class FeatureCollection:
    """
    Immutable ordered collection of RenderedFeature.

    Every operation returns a new collection.
    """

    __slots__ = ('_features',)

    def __init__(self, features: Iterable[RenderedFeature] = ()):
        self._features: Tuple[RenderedFeature, ...] = tuple(features)

    @classmethod
    def empty(cls) -> 'FeatureCollection':
        return cls()

    @property
    def features(self) -> Tuple[RenderedFeature, ...]:
        return self._features

    def __iter__(self) -> Iterator[RenderedFeature]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureCollection):
            return NotImplemented
        return self._features == other._features

    def __repr__(self) -> str:
        return f'<FeatureCollection {len(self._features)} features>'

    def filter(self, predicate: Callable[[RenderedFeature], bool]) -> 'FeatureCollection':
        return FeatureCollection(f for f in self._features if predicate(f))

    def merge(self, feature: RenderedFeature) -> 'FeatureCollection':
        """
        Merge a single feature in by callsign.

        Any feature with the same callsign is dropped and the new one is
        appended; everything else keeps its position.
        """
        kept = [f for f in self._features if f.callsign != feature.callsign]
        kept.append(feature)
        return FeatureCollection(kept)

    def to_geojson(self) -> dict:
        return {
            'type': 'FeatureCollection',
            'features': [f.to_geojson() for f in self._features],
        }


def build_feature(state: FlightState) -> RenderedFeature:
    """Build one feature from a FlightState (position assumed present)."""
    return RenderedFeature(
        coordinates=(state.longitude, state.latitude),
        properties=state.to_dict(),
    )


def build_features(states: Iterable[FlightState]) -> FeatureCollection:
    """
    Convert flight states into a feature collection.

    States without a usable position are dropped, including those at
    exactly 0.0 longitude or latitude (see FlightState.has_position).
    Input order is preserved.
    """
    features = []
    dropped = 0
    for state in states:
        if state.has_position():
            features.append(build_feature(state))
        else:
            dropped += 1

    if dropped:
        logger.debug(f'Dropped {dropped} states without position')

    return FeatureCollection(features)


def features_from_records(records: Iterable[Any]) -> FeatureCollection:
    """Parse raw upstream records and build features in one pass."""
    return build_features(parse_state_vector(r) for r in records)
