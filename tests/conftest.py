from unittest.mock import Mock

import pytest

from application import create_app

PARIS_GEOCODE = {
    "results": [
        {"name": "Paris", "country": "France", "latitude": 48.8566, "longitude": 2.3522},
    ]
}

PARIS_FORECAST = {
    "current_weather": {
        "temperature": 18.5,
        "windspeed": 10.2,
        "weathercode": 1,
        "time": "2024-06-01T14:00",
    },
    "hourly": {
        "time": ["2024-06-01T13:00", "2024-06-01T14:00", "2024-06-01T15:00"],
        "temperature_2m": [17.9, 18.5, 18.8],
        "relativehumidity_2m": [58, 55, 53],
        "pressure_msl": [1012.6, 1013, 1013.4],
    },
}


def fake_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def fake_get(geocode=PARIS_GEOCODE, forecast=PARIS_FORECAST):
    """side_effect for requests.get that answers both Open-Meteo endpoints."""
    def _get(url, params=None, timeout=None):
        if "geocoding" in url:
            return fake_response(geocode)
        return fake_response(forecast)
    return _get


@pytest.fixture
def app():
    app = create_app({"TESTING": True, "PARTICLE_COUNT": 20})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
