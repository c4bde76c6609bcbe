"""
API module for FlightMap.

Provides REST endpoints proxying the upstream state vector feed.
"""

from flightmap.api.flights import flights_bp

__all__ = ['flights_bp']
