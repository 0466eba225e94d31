"""
Tests for the live data endpoints (OpenAQ and OpenWeather proxies)
"""

from datetime import datetime, timedelta

import httpx
import pytest

from conftest import (
    AIR_POLLUTION_PAYLOAD,
    BENGALURU,
    OPENAQ_HOST,
    OPENWEATHER_HOST,
    WEATHER_PAYLOAD,
)


DATA_ENDPOINTS = ["/api/openaq", "/api/openweather", "/api/ow-air"]


class TestMissingCoordinates:
    """Every data endpoint rejects requests without lat/lon"""

    @pytest.mark.parametrize("path", DATA_ENDPOINTS)
    @pytest.mark.parametrize("params", [
        {},
        {"lat": "12.9716"},
        {"lon": "77.5946"},
        {"lat": "", "lon": "77.5946"},
        {"lat": "12.9716", "lon": "   "},
    ])
    def test_missing_lat_or_lon(self, client, upstream, path, params):
        response = client.get(path, params=params)

        assert response.status_code == 400
        assert response.json()["error"] == "lat,lon required"
        assert upstream.requests == []

    @pytest.mark.parametrize("path", DATA_ENDPOINTS)
    @pytest.mark.parametrize("params", [
        {"lat": "95", "lon": "77.5946"},
        {"lat": "12.9716", "lon": "-200"},
        {"lat": "nan", "lon": "77.5946"},
        {"lat": "abc", "lon": "77.5946"},
    ])
    def test_invalid_coordinates(self, client, upstream, path, params):
        response = client.get(path, params=params)

        assert response.status_code == 400
        assert "error" in response.json()
        assert upstream.requests == []


class TestGroundMeasurements:
    """Tests for GET /api/openaq"""

    def test_bengaluru_mean_ignores_nan(self, client):
        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == 200
        body = response.json()
        assert body["mean"] == 15.0
        assert body["values"] == [10.0, 20.0]
        assert len(body["raw"]) == 3
        assert body["raw"][0] == {
            "value": 10.0,
            "timestampLocal": "2024-01-01T10:00:00+05:30",
            "unit": "µg/m³",
            "locationName": "Peenya",
        }
        assert body["raw"][2]["value"] == "NaN"
        assert body["meta"] == {"name": "openaq-api", "found": 3}

    def test_empty_results_is_valid(self, client, upstream):
        upstream.add(OPENAQ_HOST, "/v3/measurements", json={"results": []})

        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == 200
        assert response.json() == {"mean": None, "values": [], "raw": [], "meta": None}

    def test_query_parameters(self, client, upstream):
        client.get("/api/openaq", params={**BENGALURU, "radius": "2500", "days": "3"})

        (request,) = upstream.calls_to(OPENAQ_HOST)
        params = request.url.params
        assert params["parameter"] == "pm25"
        assert params["coordinates"] == "12.9716,77.5946"
        assert params["radius"] == "2500"
        assert params["limit"] == "1000"
        assert params["sort"] == "desc"
        assert params["date_to"].endswith("Z")

        date_from = datetime.fromisoformat(params["date_from"].replace("Z", "+00:00"))
        date_to = datetime.fromisoformat(params["date_to"].replace("Z", "+00:00"))
        assert date_to - date_from == timedelta(days=3)
        assert "X-API-Key" not in request.headers

    def test_defaults_radius_and_days(self, client, upstream):
        client.get("/api/openaq", params=BENGALURU)

        (request,) = upstream.calls_to(OPENAQ_HOST)
        date_from = datetime.fromisoformat(request.url.params["date_from"].replace("Z", "+00:00"))
        date_to = datetime.fromisoformat(request.url.params["date_to"].replace("Z", "+00:00"))
        assert request.url.params["radius"] == "5000"
        assert date_to - date_from == timedelta(days=1)

    def test_api_key_header_when_configured(self, make_client, upstream):
        client = make_client(openaq_api_key="aq-key")

        client.get("/api/openaq", params=BENGALURU)

        (request,) = upstream.calls_to(OPENAQ_HOST)
        assert request.headers["X-API-Key"] == "aq-key"

    @pytest.mark.parametrize("params", [{"radius": "0"}, {"days": "-1"}, {"days": "many"}])
    def test_invalid_radius_or_days(self, client, upstream, params):
        response = client.get("/api/openaq", params={**BENGALURU, **params})

        assert response.status_code == 400
        assert "error" in response.json()
        assert upstream.requests == []

    def test_odd_record_fields_are_stringified(self, client, upstream):
        upstream.add(OPENAQ_HOST, "/v3/measurements", json={
            "results": [{"value": 5, "unit": 7, "date": {"local": 123}, "location": 42}],
        })

        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == 200
        body = response.json()
        assert body["mean"] == 5.0
        assert body["values"] == [5.0]
        assert body["raw"] == [
            {"value": 5.0, "timestampLocal": "123", "unit": "7", "locationName": "42"}
        ]

    @pytest.mark.parametrize("payload", [
        {"results": None},
        {"results": {"value": 5}},
        {"results": [None, "text", 3]},
        ["not", "an", "object"],
    ])
    def test_unexpected_result_shapes_yield_empty_series(self, client, upstream, payload):
        upstream.add(OPENAQ_HOST, "/v3/measurements", json=payload)

        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == 200
        assert response.json()["mean"] is None
        assert response.json()["values"] == []

    @pytest.mark.parametrize("status", [401, 404, 429, 500, 503])
    def test_upstream_status_is_propagated(self, client, upstream, status):
        upstream.add(OPENAQ_HOST, "/v3/measurements", status=status, json={"detail": "nope"})

        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == status
        assert response.json() == {"error": "OpenAQ fetch failed"}


class TestOpenWeather:
    """Tests for GET /api/openweather and GET /api/ow-air"""

    def test_weather_passthrough(self, client, upstream):
        response = client.get("/api/openweather", params=BENGALURU)

        assert response.status_code == 200
        assert response.json() == WEATHER_PAYLOAD

        (request,) = upstream.calls_to(OPENWEATHER_HOST)
        assert request.url.params["units"] == "metric"
        assert request.url.params["appid"] == "ow-test-key"
        assert request.url.params["lat"] == "12.9716"
        assert request.url.params["lon"] == "77.5946"

    def test_air_pollution_passthrough(self, client, upstream):
        response = client.get("/api/ow-air", params=BENGALURU)

        assert response.status_code == 200
        assert response.json() == AIR_POLLUTION_PAYLOAD

        (request,) = upstream.calls_to(OPENWEATHER_HOST)
        assert request.url.path == "/data/2.5/air_pollution"
        assert "units" not in request.url.params

    @pytest.mark.parametrize("path, upstream_path, message", [
        ("/api/openweather", "/data/2.5/weather", "OpenWeather fetch failed"),
        ("/api/ow-air", "/data/2.5/air_pollution", "OpenWeather Air Pollution fetch failed"),
    ])
    @pytest.mark.parametrize("status", [401, 404, 429, 502])
    def test_upstream_status_is_propagated(self, client, upstream, path, upstream_path, message, status):
        upstream.add(OPENWEATHER_HOST, upstream_path, status=status, json={"cod": status})

        response = client.get(path, params=BENGALURU)

        assert response.status_code == status
        assert response.json() == {"error": message}

    def test_repeated_weather_calls_are_identical(self, client):
        first = client.get("/api/openweather", params=BENGALURU).json()
        second = client.get("/api/openweather", params=BENGALURU).json()

        assert first == second

    def test_non_json_body_is_bad_gateway(self, client, upstream):
        upstream.add(OPENWEATHER_HOST, "/data/2.5/weather", text="<html>oops</html>")

        response = client.get("/api/openweather", params=BENGALURU)

        assert response.status_code == 502
        assert "error" in response.json()


UPSTREAM_ROUTES = [
    ("/api/openaq", OPENAQ_HOST, "/v3/measurements"),
    ("/api/openweather", OPENWEATHER_HOST, "/data/2.5/weather"),
    ("/api/ow-air", OPENWEATHER_HOST, "/data/2.5/air_pollution"),
]


class TestTransportErrors:
    """Timeouts and connection failures on the data endpoints"""

    @pytest.mark.parametrize("path, host, upstream_path", UPSTREAM_ROUTES)
    def test_timeout_is_gateway_timeout(self, client, upstream, path, host, upstream_path):
        upstream.fail(host, upstream_path, lambda request: httpx.ReadTimeout("timed out", request=request))

        response = client.get(path, params=BENGALURU)

        assert response.status_code == 504
        assert "timed out" in response.json()["error"]

    @pytest.mark.parametrize("path, host, upstream_path", UPSTREAM_ROUTES)
    def test_connection_error_is_bad_gateway(self, client, upstream, path, host, upstream_path):
        upstream.fail(host, upstream_path, lambda request: httpx.ConnectError("refused", request=request))

        response = client.get(path, params=BENGALURU)

        assert response.status_code == 502
        assert "unreachable" in response.json()["error"]


class TestUnhandledErrors:
    """Unexpected exceptions become a generic 500"""

    def test_internal_detail_is_not_exposed(self, make_client, upstream):
        client = make_client(raise_server_exceptions=False)
        upstream.fail(OPENAQ_HOST, "/v3/measurements", lambda request: RuntimeError("secret internals"))

        response = client.get("/api/openaq", params=BENGALURU)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
