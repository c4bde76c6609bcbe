"""
User-triggered services.

Work that runs on explicit user action rather than on the polling loop.
"""

from flightmap.services.locator import FlightLocator

__all__ = ['FlightLocator']
