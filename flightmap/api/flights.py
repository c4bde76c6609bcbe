"""
Flight data API endpoints.

Thin proxy in front of the OpenSky feed so browsers never talk to it
directly:
- GET /api/flights/states?bbox=w,s,e,n - Raw upstream snapshot for a bbox
- GET /api/flights/search?callsign=X  - Raw states matching a callsign
- GET /api/flights?bbox=w,s,e,n&filter=X - GeoJSON features, filtered
"""

import logging
import time

from flask import Blueprint, current_app, jsonify, request

from flightmap.errors import UpstreamError, UpstreamRateLimited, ValidationError
from flightmap.filters import compile_filter
from flightmap.ingestion.opensky_client import BoundingBox
from flightmap.models.feature import features_from_records

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


def _client():
    return current_app.config['OPENSKY_CLIENT']


def _upstream_error_response(error: UpstreamError):
    """Map a classified upstream failure onto an HTTP response."""
    if isinstance(error, UpstreamRateLimited):
        return jsonify({
            'error': error.user_message,
            'details': 'OpenSky Network has strict rate limits. Consider adding authentication credentials.',
        }), 429

    return jsonify({
        'error': 'Failed to fetch data from OpenSky.',
        'details': error.user_message,
    }), 500


@flights_bp.errorhandler(ValidationError)
def handle_validation_error(e: ValidationError):
    return jsonify({'error': e.user_message}), 400


@flights_bp.errorhandler(UpstreamError)
def handle_upstream_error(e: UpstreamError):
    return _upstream_error_response(e)


@flights_bp.route('/states', methods=['GET'])
def get_states():
    """
    Proxy the upstream snapshot for a bounding box.

    Query parameters:
    - bbox: 'west,south,east,north' in degrees (required)
    """
    bbox = BoundingBox.parse(request.args.get('bbox'))
    logger.debug(f'Parsed bbox: {bbox}')

    snapshot = _client().fetch_snapshot(bbox)
    logger.info(f'Successfully fetched {len(snapshot["states"])} flights')

    return jsonify(snapshot)


@flights_bp.route('/search', methods=['GET'])
def search_states():
    """
    Proxy a callsign search.

    Query parameters:
    - callsign: substring of the callsign, case-insensitive (required)
    """
    callsign = request.args.get('callsign', '').strip()
    if not callsign:
        raise ValidationError('Missing callsign query parameter.')

    states = _client().search_callsign(callsign)
    return jsonify({'states': states, 'count': len(states)})


@flights_bp.route('', methods=['GET'])
def list_features():
    """
    Live flights in a bounding box as a GeoJSON FeatureCollection.

    Query parameters:
    - bbox: 'west,south,east,north' in degrees (required)
    - filter: airline code/name or callsign fragment (optional)

    Response includes query timing for latency awareness.
    """
    start_time = time.perf_counter()

    bbox = BoundingBox.parse(request.args.get('bbox'))
    predicate = compile_filter(request.args.get('filter', ''))

    records = _client().fetch_states(bbox)
    collection = features_from_records(records).filter(predicate)

    result = collection.to_geojson()
    result['count'] = len(collection)
    result['filter'] = predicate.to_expression()
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)

    return jsonify(result)
