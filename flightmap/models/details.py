"""
Popup view-model for a single flight.

Holds display-ready values only. Turning these into markup is the job of
whatever presentation layer sits on top.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from flightmap.airlines import airline_for_callsign
from flightmap.models.feature import RenderedFeature
from flightmap.models.flight_state import DEFAULT_CALLSIGN, DEFAULT_COUNTRY


@dataclass(frozen=True)
class FlightDetails:
    """Structured content of a flight detail popup."""
    callsign: str
    airline: str
    on_ground: bool
    altitude_m: float
    altitude_ft: int
    speed_kmh: int
    country: str
    icao24: str

    @property
    def status(self) -> str:
        return 'On Ground' if self.on_ground else 'In Flight'

    @property
    def altitude_display(self) -> str:
        """E.g. '12,500 ft (3810 m)', or 'Ground' when on the ground."""
        if self.on_ground:
            return 'Ground'
        return f'{self.altitude_ft:,} ft ({round(self.altitude_m)} m)'

    @classmethod
    def from_feature(cls, feature: RenderedFeature) -> 'FlightDetails':
        props = feature.properties
        callsign = props.get('callsign') or DEFAULT_CALLSIGN

        # Unknown altitude/speed display as 0
        altitude_m = props.get('baro_altitude')
        if altitude_m is None:
            altitude_m = props.get('geo_altitude')
        if altitude_m is None:
            altitude_m = 0

        velocity: Optional[float] = props.get('velocity')
        speed_kmh = round(velocity * 3.6) if velocity is not None else 0

        return cls(
            callsign=callsign,
            airline=airline_for_callsign(callsign),
            on_ground=bool(props.get('on_ground')),
            altitude_m=altitude_m,
            altitude_ft=round(altitude_m * 3.28084),
            speed_kmh=speed_kmh,
            country=props.get('origin_country') or DEFAULT_COUNTRY,
            icao24=props.get('icao24') or 'Unknown',
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data['status'] = self.status
        data['altitude_display'] = self.altitude_display
        return data
