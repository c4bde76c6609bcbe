"""
Error taxonomy for FlightMap.

Two families:
- Search errors raised by the flight locator (bad input, no match,
  match without a position). These are shown to the user verbatim.
- Upstream errors raised by the OpenSky client. The poller swallows them
  into an empty feature set; the locator lets them propagate.

Every error carries a ``user_message`` suitable for display.
"""

from typing import Optional


class FlightMapError(Exception):
    """Base class for all FlightMap errors."""

    default_message = 'Something went wrong.'

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class ValidationError(FlightMapError):
    """User input rejected before any network call."""
    default_message = 'Please enter a flight number.'


class NotFoundError(FlightMapError):
    """Search returned zero matching aircraft."""
    default_message = 'Flight not found. Check the flight number and try again.'


class LocationUnavailableError(FlightMapError):
    """Aircraft exists but has no reported position."""
    default_message = 'Flight found, but its location is currently unavailable.'


class UpstreamError(FlightMapError):
    """Base class for failures talking to the state vector feed."""
    default_message = 'Flight data is currently unavailable.'
    reason = 'unavailable'


class UpstreamRateLimited(UpstreamError):
    """Feed refused the request because of rate limiting (HTTP 429)."""
    default_message = 'Rate limit exceeded. Please wait before making another request.'
    reason = 'rate_limited'


class UpstreamUnavailable(UpstreamError):
    """Any other feed failure: network, authentication, malformed response."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
