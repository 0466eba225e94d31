"""
Shared fixtures: settings, fake upstream providers and sample payloads
"""

import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from aqvision_api.main import create_app
from aqvision_core.config import Settings


OPENAQ_HOST = "api.openaq.org"
OPENWEATHER_HOST = "api.openweathermap.org"
OPENAI_HOST = "api.openai.com"
MAPS_HOST = "maps.googleapis.com"

BENGALURU = {"lat": "12.9716", "lon": "77.5946"}

OPENAQ_PAYLOAD = {
    "meta": {"name": "openaq-api", "found": 3},
    "results": [
        {"value": 10.0, "date": {"local": "2024-01-01T10:00:00+05:30"}, "unit": "µg/m³", "location": "Peenya"},
        {"value": 20.0, "date": {"local": "2024-01-01T11:00:00+05:30"}, "unit": "µg/m³", "location": "Peenya"},
        {"value": "NaN", "date": {"local": "2024-01-01T12:00:00+05:30"}, "unit": "µg/m³", "location": "Hebbal"},
    ],
}

AIR_POLLUTION_PAYLOAD = {
    "coord": {"lon": 77.5946, "lat": 12.9716},
    "list": [
        {
            "main": {"aqi": 2},
            "components": {
                "co": 293.73, "no": 0.1, "no2": 5.14, "o3": 61.51,
                "so2": 2.5, "pm2_5": 12.346, "pm10": 18.9, "nh3": 2.2,
            },
            "dt": 1704103200,
        }
    ],
}

WEATHER_PAYLOAD = {
    "coord": {"lon": 77.5946, "lat": 12.9716},
    "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds"}],
    "main": {"temp": 28.5, "humidity": 48},
    "wind": {"speed": 3.6, "deg": 90},
    "sys": {"country": "IN"},
    "name": "Bengaluru",
}

OPENAI_PAYLOAD = {
    "id": "chatcmpl-1",
    "choices": [
        {"index": 0, "message": {"role": "assistant", "content": "Air quality is moderate."}}
    ],
}


class FakeUpstream:
    """Routes outbound requests by (host, path) and records every call"""

    def __init__(self):
        self.routes = {}
        self.failures = {}
        self.requests = []

    def add(self, host, path, status=200, json=None, text=None, headers=None):
        self.routes[(host, path)] = (status, json, text, headers)

    def fail(self, host, path, make_error):
        """Raise ``make_error(request)`` instead of answering"""
        self.failures[(host, path)] = make_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        make_error = self.failures.get((request.url.host, request.url.path))
        if make_error is not None:
            raise make_error(request)
        route = self.routes.get((request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "not mocked"})
        status, body, text, headers = route
        if text is not None:
            return httpx.Response(status, text=text, headers=headers)
        return httpx.Response(status, json=copy.deepcopy(body), headers=headers)

    def calls_to(self, host):
        return [request for request in self.requests if request.url.host == host]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        openweather_api_key="ow-test-key",
        google_maps_api_key="maps-test-key",
        openai_api_key="sk-test-key",
        openaq_api_key=None,
        log_to_file=False,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def upstream():
    fake = FakeUpstream()
    fake.add(OPENAQ_HOST, "/v3/measurements", json=OPENAQ_PAYLOAD)
    fake.add(OPENWEATHER_HOST, "/data/2.5/weather", json=WEATHER_PAYLOAD)
    fake.add(OPENWEATHER_HOST, "/data/2.5/air_pollution", json=AIR_POLLUTION_PAYLOAD)
    fake.add(OPENAI_HOST, "/v1/chat/completions", json=OPENAI_PAYLOAD)
    fake.add(MAPS_HOST, "/maps/api/js", text="/* maps loader */", headers={"content-type": "text/javascript"})
    return fake


@pytest.fixture
def make_client(upstream):
    """Start the app against the fake upstream with optional settings overrides"""
    clients = []

    def _make(raise_server_exceptions=True, **overrides):
        app = create_app(make_settings(**overrides), transport=upstream.transport)
        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
