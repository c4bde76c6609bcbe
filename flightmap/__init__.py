"""
FlightMap Package.

Live aircraft map pipeline built on the OpenSky Network feed, with a
Flask proxy API.

Modules:
    ingestion/   OpenSky client and viewport poller
    models/      FlightState, RenderedFeature/FeatureCollection, FlightDetails
    services/    Flight search by callsign (FlightLocator)
    api/         REST endpoints proxying the upstream feed
    filters.py   Free-text airline/callsign filter compiler
    airlines.py  Airline code to name reference data
    geo.py       Antimeridian longitude wrapping
    store.py     Thread-safe live feature set
    render.py    Rendering layer contract and directives
    tracker.py   Coordinator wiring everything to a renderer
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
