"""
Data models for FlightMap.

Plain dataclasses, recreated every poll cycle:
1. FlightState - one parsed state vector
2. RenderedFeature / FeatureCollection - what the map layer draws
3. FlightDetails - popup view-model
"""

from flightmap.models.flight_state import FlightState, parse_state_vector
from flightmap.models.feature import (
    RenderedFeature,
    FeatureCollection,
    build_feature,
    build_features,
    features_from_records,
)
from flightmap.models.details import FlightDetails

__all__ = [
    'FlightState',
    'parse_state_vector',
    'RenderedFeature',
    'FeatureCollection',
    'build_feature',
    'build_features',
    'features_from_records',
    'FlightDetails',
]
