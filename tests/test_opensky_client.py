import threading
import time

import pytest
import requests

from flightmap.errors import UpstreamRateLimited, UpstreamUnavailable, ValidationError
from flightmap.ingestion.opensky_client import BoundingBox, OpenSkyClient

from conftest import FakeSession, make_record, make_response

BBOX = BoundingBox(west=-10.0, south=40.0, east=10.0, north=55.0)


def _client(*responses):
    session = FakeSession(*responses)
    client = OpenSkyClient(base_url='https://example.test/', timeout=12.0, min_interval=0, session=session)
    return client, session


def test_fetch_states_sends_bbox_params():
    payload = {'time': 1714765200, 'states': [make_record()]}
    client, session = _client(make_response(200, payload))

    states = client.fetch_states(BBOX)

    assert states == [make_record()]
    call = session.calls[0]
    assert call['url'] == 'https://example.test/states/all'
    assert call['params'] == {'lamin': 40.0, 'lomin': -10.0, 'lamax': 55.0, 'lomax': 10.0}
    assert call['timeout'] == 12.0
    assert call['auth'] is None


def test_fetch_states_handles_null_states():
    client, _ = _client(make_response(200, {'time': 1, 'states': None}))

    assert client.fetch_states(BBOX) == []


def test_rate_limit_is_classified():
    client, _ = _client(make_response(429, text='rate limited'))

    with pytest.raises(UpstreamRateLimited):
        client.fetch_states(BBOX)


@pytest.mark.parametrize('status', [401, 403, 500, 503])
def test_other_http_errors_are_unavailable(status):
    client, _ = _client(make_response(status, text='nope'))

    with pytest.raises(UpstreamUnavailable) as exc_info:
        client.fetch_states(BBOX)

    assert exc_info.value.status_code == status


def test_auth_failure_message():
    client, _ = _client(make_response(401, text='unauthorized'))

    with pytest.raises(UpstreamUnavailable, match='Authentication failed'):
        client.fetch_states(BBOX)


@pytest.mark.parametrize('error', [
    requests.exceptions.Timeout('slow'),
    requests.exceptions.ConnectionError('down'),
])
def test_network_errors_are_unavailable(error):
    client, _ = _client(error)

    with pytest.raises(UpstreamUnavailable):
        client.fetch_states(BBOX)


def test_malformed_json_is_unavailable():
    client, _ = _client(make_response(200, text='<html>oops</html>'))

    with pytest.raises(UpstreamUnavailable):
        client.fetch_states(BBOX)


def test_non_object_payload_is_unavailable():
    client, _ = _client(make_response(200, [1, 2, 3]))

    with pytest.raises(UpstreamUnavailable):
        client.fetch_states(BBOX)


def test_search_callsign_filters_by_substring():
    payload = {
        'time': 1,
        'states': [
            make_record(icao24='a1', callsign='BAW287  '),
            make_record(icao24='a2', callsign='CCA910  '),
            make_record(icao24='a3', callsign=None),
            make_record(icao24='a4', callsign='BAW2870 '),
        ],
    }
    client, session = _client(make_response(200, payload))

    matches = client.search_callsign(' baw287 ')

    assert [m[0] for m in matches] == ['a1', 'a4']
    assert session.calls[0]['params'] == {}


def test_authenticated_client_sends_credentials():
    session = FakeSession(make_response(200, {'states': []}))
    client = OpenSkyClient(username='u', password='p', min_interval=0, session=session)

    client.fetch_states(BBOX)

    assert session.calls[0]['auth'] is not None


def test_fetch_snapshot_includes_time():
    client, _ = _client(make_response(200, {'time': 99, 'states': [make_record()]}))

    snapshot = client.fetch_snapshot(BBOX)

    assert snapshot == {'time': 99, 'states': [make_record()]}


def test_bbox_parse():
    assert BoundingBox.parse('-10,40,10,55') == BBOX
    assert BBOX.as_list() == [-10.0, 40.0, 10.0, 55.0]


@pytest.mark.parametrize('text, message', [
    (None, 'Missing bbox'),
    ('', 'Missing bbox'),
    ('1,2,3', 'Invalid bbox format'),
    ('a,b,c,d', 'Invalid bbox format'),
    ('-200,40,10,55', 'out of valid range'),
    ('-10,-95,10,55', 'out of valid range'),
])
def test_bbox_parse_rejects_bad_input(text, message):
    with pytest.raises(ValidationError, match=message):
        BoundingBox.parse(text)


def test_concurrent_requests_stay_spaced_apart():
    class TimingSession(FakeSession):
        def get(self, url, params=None, auth=None, timeout=None):
            sent_at.append(time.time())
            return make_response(200, {'states': []})

    sent_at = []
    client = OpenSkyClient(min_interval=0.2, session=TimingSession())
    threads = [threading.Thread(target=client.fetch_states, args=(BBOX,)) for _ in range(2)]

    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(sent_at) == 2
    first, second = sorted(sent_at)
    assert second - first >= 0.19
