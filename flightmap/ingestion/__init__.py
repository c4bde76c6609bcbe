"""
Data ingestion module for FlightMap.

Handles talking to the OpenSky API and polling it for the current
viewport.
"""

from flightmap.ingestion.opensky_client import BoundingBox, OpenSkyClient
from flightmap.ingestion.poller import PollResult, PollState, ViewportPoller

__all__ = ['BoundingBox', 'OpenSkyClient', 'PollResult', 'PollState', 'ViewportPoller']
