"""
FlightMap Flask Application.

Serves the proxy API the map front end polls. Initializes:
- OpenSky client
- API routes
- Health check

Usage:
    python -m flightmap.app

Or with gunicorn:
    gunicorn 'flightmap.app:create_app()'
"""

import logging
import os

from flask import Flask
from flask_cors import CORS

from flightmap.api import flights_bp
from flightmap.config import config
from flightmap.ingestion import OpenSkyClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(client: OpenSkyClient = None) -> Flask:
    """
    Application factory for Flask.

    Args:
        client: OpenSky client to proxy through. Created from config if
                None; pass a stub for testing.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key
    app.config['OPENSKY_CLIENT'] = client or OpenSkyClient.from_config()

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Register API blueprints
    app.register_blueprint(flights_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    @app.route('/api/config')
    def map_config():
        """Initial map view for the front end."""
        return {
            'center': list(config.map.center),
            'zoom': config.map.zoom,
            'poll_interval_seconds': config.polling.interval_seconds,
        }

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = int(os.environ.get('PORT', 5000))
    logger.info(f'Starting FlightMap API on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
    )


if __name__ == '__main__':
    run_development_server()
