from flightmap.errors import UpstreamRateLimited, UpstreamUnavailable
from flightmap.models import features_from_records
from flightmap.render import MapRenderer
from flightmap.tracker import FlightTracker

from conftest import RecordingRenderer, StubClient, immediate_scheduler, make_record


def _tracker(client, renderer):
    return FlightTracker(client, renderer, interval=15, scheduler=immediate_scheduler)


def test_recording_renderer_satisfies_protocol(renderer):
    assert isinstance(renderer, MapRenderer)


def test_viewport_change_publishes_to_renderer(renderer):
    client = StubClient(states=[
        make_record(icao24='abc123', callsign='BAW287 '),
        make_record(icao24='def456', callsign=None, lon=None, lat=None),
    ])
    tracker = _tracker(client, renderer)

    tracker.on_viewport_changed()

    published = renderer.published[-1]
    assert len(published) == 1
    assert published.features[0].icao24 == 'abc123'
    assert published.features[0].callsign == 'BAW287'
    assert client.fetch_calls == [renderer.bounds]


def test_failed_poll_clears_renderer(renderer):
    client = StubClient(states=[make_record()])
    tracker = _tracker(client, renderer)
    tracker.on_viewport_changed()
    assert len(renderer.published[-1]) == 1

    client.error = UpstreamRateLimited()
    tracker.on_viewport_changed()

    assert len(renderer.published[-1]) == 0
    assert tracker.poller.last_failure == 'rate_limited'


def test_filter_is_pushed_and_applied(renderer):
    client = StubClient(states=[
        make_record(icao24='a1', callsign='BAW287'),
        make_record(icao24='a2', callsign='CCA910'),
    ])
    tracker = _tracker(client, renderer)
    tracker.on_viewport_changed()

    predicate = tracker.set_filter('British Airways')

    assert renderer.filters[-1] is predicate
    assert [f.callsign for f in tracker.visible_features] == ['BAW287']

    tracker.clear_filter()
    assert renderer.filters[-1].is_identity
    assert len(tracker.visible_features) == 2


def test_search_returns_user_messages(renderer):
    tracker = _tracker(StubClient(search=[]), renderer)

    assert tracker.search('') == 'Please enter a flight number.'
    assert 'not found' in tracker.search('BAW1')

    tracker.locator.client = StubClient(search=[make_record(callsign='BAW1', lon=None)])
    assert 'unavailable' in tracker.search('BAW1')

    tracker.locator.client = StubClient(error=UpstreamRateLimited())
    assert 'Rate limit' in tracker.search('BAW1')

    tracker.locator.client = StubClient(error=UpstreamUnavailable())
    assert tracker.search('BAW1') == 'Flight data is currently unavailable.'


def test_search_success_merges_into_live_set(renderer):
    client = StubClient(
        states=[make_record(icao24='c2', callsign='CCA2')],
        search=[make_record(icao24='a1', callsign='BAW1', lon=10.0, lat=51.0)],
    )
    tracker = _tracker(client, renderer)
    tracker.on_viewport_changed()

    assert tracker.search('BAW1') is None

    assert sorted(f.callsign for f in renderer.published[-1]) == ['BAW1', 'CCA2']
    assert renderer.recenters[-1].coordinates == (10.0, 51.0)
    assert renderer.popups[-1].details.callsign == 'BAW1'


def test_click_wraps_popup_next_to_click():
    renderer = RecordingRenderer()
    tracker = _tracker(StubClient(), renderer)
    feature = features_from_records([make_record(lon=-179.0, lat=10.0)]).features[0]

    directive = tracker.click(feature, clicked_lng=179.0)

    assert directive.coordinates == (181.0, 10.0)
    assert renderer.popups[-1] is directive
    assert directive.details.icao24 == 'abc123'
