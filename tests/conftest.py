import json
from typing import Any, List, Optional

import pytest
import requests

from flightmap.errors import UpstreamRateLimited, UpstreamUnavailable
from flightmap.ingestion.opensky_client import BoundingBox


def make_record(
    icao24='abc123',
    callsign='BAW287 ',
    lon=-0.45,
    lat=51.47,
    country='United Kingdom',
    baro_altitude=3657.6,
    on_ground=False,
    velocity=164.6,
    true_track=90.0,
    vertical_rate=2.0,
    geo_altitude=3700.0,
):
    return [
        icao24,
        callsign,
        country,
        1714765198,  # time_position
        1714765200,  # last_contact
        lon,
        lat,
        baro_altitude,
        on_ground,
        velocity,
        true_track,
        vertical_rate,
        None,  # sensors
        geo_altitude,
        '7000',  # squawk
        False,  # spi
        0,  # position_source
    ]


def make_response(status_code: int, payload: Any = None, text: Optional[str] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = 'https://example.test/states/all'
    response.encoding = 'utf-8'
    body = text if text is not None else json.dumps(payload)
    response._content = body.encode('utf-8')
    return response


class FakeSession:
    """requests.Session stand-in returning queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, auth=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'auth': auth, 'timeout': timeout})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class StubClient:
    """Upstream collaborator returning canned records or raising."""

    def __init__(self, states=None, search=None, error=None):
        self.states = states or []
        self.search = search or []
        self.error = error
        self.fetch_calls: List[BoundingBox] = []
        self.search_calls: List[str] = []

    def fetch_states(self, bbox):
        self.fetch_calls.append(bbox)
        if self.error:
            raise self.error
        return self.states

    def fetch_snapshot(self, bbox):
        return {'time': 1714765200, 'states': self.fetch_states(bbox)}

    def search_callsign(self, callsign):
        self.search_calls.append(callsign)
        if self.error:
            raise self.error
        return self.search


class RecordingRenderer:
    """MapRenderer that records everything it is told to draw."""

    def __init__(self, bounds=None):
        self.bounds = bounds if bounds is not None else BoundingBox(-10.0, 40.0, 10.0, 55.0)
        self.published = []
        self.filters = []
        self.recenters = []
        self.popups = []

    def get_bounds(self):
        return self.bounds

    def set_features(self, collection):
        self.published.append(collection)

    def set_filter(self, predicate):
        self.filters.append(predicate)

    def recenter(self, directive):
        self.recenters.append(directive)

    def show_popup(self, directive):
        self.popups.append(directive)


def immediate_scheduler(delay, callback):
    callback()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def rate_limited():
    return UpstreamRateLimited()


@pytest.fixture
def unavailable():
    return UpstreamUnavailable(status_code=503)
