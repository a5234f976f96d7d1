import asyncio
import random

import httpx

from hangry.directory.client import (
    SORT_MODES,
    DirectoryQuery,
    DirectoryService,
    listing_to_candidate,
    price_param,
)
from hangry.directory.config import DirectoryConfig
from hangry.recommendations.models import Coordinates

KEYED_CONFIG = DirectoryConfig(api_key="test-key", max_offset=10)
NO_KEY_CONFIG = DirectoryConfig(api_key="")

SAMPLE_LISTING = {
    "id": "abc",
    "name": "Nopa",
    "image_url": "",
    "photos": ["https://img.example/nopa.jpg"],
    "categories": [{"alias": "newamerican", "title": "American (New)"}, {"alias": "bars", "title": "Bars"}],
    "rating": 4.5,
    "price": "$$$",
    "location": {"display_address": ["560 Divisadero St", "San Francisco, CA 94117"]},
    "url": "https://directory.example/nopa",
    "coordinates": {"latitude": 37.7748, "longitude": -122.4376},
}


def _search(service, query):
    return asyncio.run(service.search(query))


def _service(handler, config=KEYED_CONFIG):
    return DirectoryService(
        config=config,
        transport=httpx.MockTransport(handler),
        rng=random.Random(0),
    )


# ── Conversion helpers ───────────────────────────────────────────────────


def test_price_param():
    assert price_param(["$", "$$$"]) == "1,3"
    assert price_param(["$$$$", "$", "$"]) == "1,4"
    assert price_param([]) is None
    assert price_param(["€€"]) is None


def test_listing_to_candidate():
    c = listing_to_candidate(SAMPLE_LISTING)
    assert c.id == "abc"
    assert c.categories == ["American (New)", "Bars"]
    assert c.address == "560 Divisadero St, San Francisco, CA 94117"
    assert c.image == "https://img.example/nopa.jpg"
    assert c.coordinates == Coordinates(latitude=37.7748, longitude=-122.4376)
    assert c.price_tier == 3
    assert c.distance is None


def test_listing_without_coordinates():
    c = listing_to_candidate({"id": 7, "name": "Cart", "coordinates": {"latitude": None, "longitude": None}})
    assert c.id == "7"
    assert c.coordinates is None
    assert c.categories == []


# ── Fixture fallback ─────────────────────────────────────────────────────


def test_no_api_key_serves_fixtures():
    result = _search(DirectoryService(config=NO_KEY_CONFIG), DirectoryQuery(location="Anywhere"))
    assert result.source == "fixture"
    assert [c.id for c in result.candidates] == ["1", "2", "3", "4", "5", "6", "7", "8"]


def test_fixture_respects_exclusions_and_price():
    service = DirectoryService(config=NO_KEY_CONFIG)
    result = _search(service, DirectoryQuery(excluded_categories=["italian"]))
    assert "1" not in {c.id for c in result.candidates}
    assert "5" not in {c.id for c in result.candidates}

    result = _search(service, DirectoryQuery(price_tiers=["$"]))
    assert [c.id for c in result.candidates] == ["3", "4"]


def test_upstream_error_falls_back():
    service = _service(lambda request: httpx.Response(500, json={"error": "boom"}))
    result = _search(service, DirectoryQuery(location="SF"))
    assert result.source == "fixture"
    assert len(result.candidates) == 8


def test_malformed_body_falls_back():
    service = _service(lambda request: httpx.Response(200, json={"unexpected": []}))
    assert _search(service, DirectoryQuery(location="SF")).source == "fixture"


def test_transport_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert _search(_service(handler), DirectoryQuery(location="SF")).source == "fixture"


# ── Live path ────────────────────────────────────────────────────────────


def test_request_parameters():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        return httpx.Response(200, json={"businesses": [SAMPLE_LISTING]})

    query = DirectoryQuery(
        coordinates=Coordinates(latitude=37.77, longitude=-122.42),
        radius_meters=50_000,
        open_now=True,
        price_tiers=["$$$", "$"],
    )
    result = _search(_service(handler), query)

    params = seen["params"]
    assert seen["path"] == "/v3/businesses/search"
    assert seen["auth"] == "Bearer test-key"
    assert params["term"] == "restaurants"
    assert params["latitude"] == "37.77"
    assert "location" not in params
    assert params["radius"] == "40000"
    assert params["open_now"] == "true"
    assert params["price"] == "1,3"
    assert params["sort_by"] in SORT_MODES
    assert 0 <= int(params["offset"]) <= 10
    assert result.source == "directory"
    assert [c.name for c in result.candidates] == ["Nopa"]


def test_text_location_default():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"businesses": []})

    _search(_service(handler), DirectoryQuery())
    assert seen["params"]["location"] == "San Francisco"


def test_excluded_categories_applied_to_live_results():
    other = dict(SAMPLE_LISTING, id="def", categories=[{"title": "Thai"}])
    service = _service(lambda request: httpx.Response(200, json={"businesses": [SAMPLE_LISTING, other]}))
    result = _search(service, DirectoryQuery(location="SF", excluded_categories=["BARS"]))
    assert [c.id for c in result.candidates] == ["def"]


def test_malformed_listing_skipped():
    broken = {"name": "No id"}
    service = _service(lambda request: httpx.Response(200, json={"businesses": [broken, SAMPLE_LISTING]}))
    result = _search(service, DirectoryQuery(location="SF"))
    assert [c.id for c in result.candidates] == ["abc"]


def test_results_cached_per_query():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"businesses": [SAMPLE_LISTING]})

    service = _service(handler)
    first = _search(service, DirectoryQuery(location="SF"))
    second = _search(service, DirectoryQuery(location="SF"))
    _search(service, DirectoryQuery(location="Oakland"))

    assert len(calls) == 2
    assert first.cache_hit is False
    assert second.cache_hit is True
    assert second.candidates == first.candidates
    assert service.cache.stats()["hits"] == 1


def test_non_object_listings_skipped():
    service = _service(lambda request: httpx.Response(200, json={"businesses": [None, "abc", SAMPLE_LISTING]}))
    result = _search(service, DirectoryQuery(location="SF"))
    assert result.source == "directory"
    assert [c.id for c in result.candidates] == ["abc"]


def test_odd_nested_shapes_tolerated():
    odd = {"id": "odd", "name": "Corner", "categories": ["Pizza", {"title": "Cafes"}], "location": "Downtown", "coordinates": []}
    service = _service(lambda request: httpx.Response(200, json={"businesses": [odd, SAMPLE_LISTING]}))
    result = _search(service, DirectoryQuery(location="SF"))

    corner = result.candidates[0]
    assert [c.id for c in result.candidates] == ["odd", "abc"]
    assert corner.categories == ["Cafes"]
    assert corner.address == ""
    assert corner.coordinates is None


def test_unconvertible_listings_skipped():
    broken = [{"categories": ["Pizza"]}, {"location": "Downtown"}, {"id": "x", "rating": "great"}]
    service = _service(lambda request: httpx.Response(200, json={"businesses": broken + [SAMPLE_LISTING]}))
    assert [c.id for c in _search(service, DirectoryQuery(location="SF")).candidates] == ["abc"]
