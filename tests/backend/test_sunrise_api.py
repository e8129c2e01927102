"""Tests for the sunrise-sunset.org client."""

import httpx

from solar_phase.services.sunrise_api import SunriseSunsetClient

BODY = {
    "results": {
        "sunrise": "2024-06-01T09:43:12+00:00",
        "sunset": "2024-06-02T00:28:41+00:00",
    },
    "status": "OK",
}


def _client(handler) -> SunriseSunsetClient:
    return SunriseSunsetClient(
        latitude=38.8051095,
        longitude=-77.0470229,
        base_url="https://api.sunrise-sunset.org/json",
        transport=httpx.MockTransport(handler),
    )


class TestFetchDay:
    def test_success(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=BODY)

        result = _client(handler).fetch_day("today")
        assert result.ok
        assert result.payload == BODY
        assert result.error is None

        params = seen[0].url.params
        assert params["lat"] == "38.8051095"
        assert params["lng"] == "-77.0470229"
        assert params["date"] == "today"
        assert params["formatted"] == "0"

    def test_non_200_is_failure(self):
        result = _client(lambda request: httpx.Response(503)).fetch_day("tomorrow")
        assert not result.ok
        assert result.error == "HTTP 503"
        assert result.day == "tomorrow"

    def test_malformed_json_is_failure(self):
        result = _client(lambda request: httpx.Response(200, text="<html>")).fetch_day("today")
        assert not result.ok
        assert result.error == "malformed JSON"

    def test_non_object_body_is_failure(self):
        result = _client(lambda request: httpx.Response(200, json=[1, 2])).fetch_day("today")
        assert not result.ok

    def test_network_error_is_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        result = _client(handler).fetch_day("today")
        assert not result.ok
        assert "unreachable" in result.error
