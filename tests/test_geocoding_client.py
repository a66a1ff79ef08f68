import asyncio

import httpx
import pytest

from route_planner.services.geocoding_client import GeocodingClient, LookupFailed


def _client(handler, **kwargs):
    return GeocodingClient(
        base_url="https://geocoder.test/search",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_search_parses_candidates():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(
            200,
            json=[
                {"lat": "48.8566", "lon": "2.3522", "display_name": "Paris, France"},
                {"lat": "33.6609", "lon": "-95.5555", "display_name": "Paris, Texas"},
            ],
        )

    results = asyncio.run(_client(handler, limit=2).search("  Paris "))

    assert [c.display_name for c in results] == ["Paris, France", "Paris, Texas"]
    assert results[0].lat == 48.8566 and results[0].lon == 2.3522
    assert seen["params"] == {"q": "Paris", "format": "json", "limit": "2"}
    assert seen["ua"]


def test_short_query_skips_request():
    def handler(request):
        raise AssertionError("should not be called")

    assert asyncio.run(_client(handler).search("pa")) == []


def test_http_error_raises_lookup_failed():
    def handler(request):
        return httpx.Response(503, json={"error": "busy"})

    with pytest.raises(LookupFailed, match="503"):
        asyncio.run(_client(handler).search("Paris"))


def test_transport_error_raises_lookup_failed():
    def handler(request):
        raise httpx.ConnectError("no route to host", request=request)

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).search("Paris"))


def test_invalid_json_raises_lookup_failed():
    def handler(request):
        return httpx.Response(200, content=b"<html>nope</html>")

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).search("Paris"))


def test_malformed_result_raises_lookup_failed():
    def handler(request):
        return httpx.Response(200, json=[{"display_name": "No coords"}])

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).search("Paris"))


def test_empty_result_list():
    def handler(request):
        return httpx.Response(200, json=[])

    assert asyncio.run(_client(handler).search("Nowhere at all")) == []
