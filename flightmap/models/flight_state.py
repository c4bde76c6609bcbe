"""
FlightState - one aircraft's reported state, parsed from the feed.

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max, space padded)
2: origin_country  - Country of registration
3: time_position   - Unix timestamp of last position update
4: last_contact    - Unix timestamp of last message
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
9: velocity        - Ground speed (m/s)
10: true_track     - Track angle (degrees, 0=north)
11: vertical_rate  - Vertical rate (m/s)
12: sensors        - Sensor IDs (unused)
13: geo_altitude   - Geometric altitude (meters)
14-16              - squawk, spi, position_source (unused)

Design notes:
- Parsing never raises. Short or malformed records degrade to absent fields.
- Only callsign, origin_country and true_track get defaults. Altitude and
  speed stay None when unknown so display code can tell "unknown" from 0.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional, Sequence

DEFAULT_CALLSIGN = 'N/A'
DEFAULT_COUNTRY = 'Unknown'
DEFAULT_TRACK = 0


def _field(arr: Sequence[Any], index: int) -> Any:
    """Value at index, or None if the record is too short."""
    try:
        return arr[index]
    except (IndexError, KeyError, TypeError):
        return None


@dataclass
class FlightState:
    """
    Current state of one aircraft as reported by the feed.

    Telemetry fields mirror the OpenSky state vector in SI units.
    """
    icao24: str
    callsign: str
    origin_country: str
    time_position: Optional[int]
    last_contact: Optional[int]
    longitude: Optional[float]
    latitude: Optional[float]
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: float
    vertical_rate: Optional[float]
    geo_altitude: Optional[float]

    @classmethod
    def from_array(cls, arr: Any) -> 'FlightState':
        """Parse a raw state vector array into a FlightState."""
        if not isinstance(arr, (list, tuple)):
            arr = ()

        icao24 = _field(arr, 0)

        # Normalize callsign (strip padding, handle None)
        callsign = _field(arr, 1)
        callsign = callsign.strip() if isinstance(callsign, str) else None

        country = _field(arr, 2)
        if not isinstance(country, str):
            country = None

        true_track = _field(arr, 10)

        return cls(
            icao24=icao24 if isinstance(icao24, str) else '',
            callsign=callsign or DEFAULT_CALLSIGN,
            origin_country=country or DEFAULT_COUNTRY,
            time_position=_field(arr, 3),
            last_contact=_field(arr, 4),
            longitude=_field(arr, 5),
            latitude=_field(arr, 6),
            baro_altitude=_field(arr, 7),
            on_ground=bool(_field(arr, 8)),
            velocity=_field(arr, 9),
            true_track=true_track or DEFAULT_TRACK,
            vertical_rate=_field(arr, 11),
            geo_altitude=_field(arr, 13),
        )

    def __repr__(self) -> str:
        return f'<FlightState {self.icao24} {self.callsign} @ ({self.longitude}, {self.latitude})>'

    def to_dict(self) -> dict:
        return asdict(self)

    # -------------------------------------------------------------------------
    # Display helpers - convert to human-friendly units
    # -------------------------------------------------------------------------

    def has_position(self) -> bool:
        """
        Check if this state can be placed on the map.

        Uses truthiness, so a coordinate of exactly 0.0 counts as absent.
        Aircraft on the equator or prime meridian are dropped; this is a
        known approximation kept for parity with the map layer.
        """
        return bool(self.longitude) and bool(self.latitude)

    @property
    def altitude_m(self) -> Optional[float]:
        """Barometric altitude, falling back to geometric."""
        if self.baro_altitude is not None:
            return self.baro_altitude
        return self.geo_altitude

    @property
    def altitude_ft(self) -> Optional[int]:
        if self.altitude_m is None:
            return None
        return round(self.altitude_m * 3.28084)

    @property
    def speed_kmh(self) -> Optional[int]:
        """Ground speed in km/h."""
        if self.velocity is None:
            return None
        return round(self.velocity * 3.6)


def parse_state_vector(arr: Any) -> FlightState:
    """Parse one raw upstream record. Never raises."""
    return FlightState.from_array(arr)
