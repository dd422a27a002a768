"""
Tests for the Overpass API client (HTTP mocked)
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from overpass_geojson.config import OVERPASS_ENDPOINTS, Config, RetryOptions
from overpass_geojson.osm.api_client import OverpassAPIClient, default_fallbacks, resolve_endpoint
from overpass_geojson.osm.errors import (
    OverpassError, OverpassGatewayTimeoutError, OverpassQueryError, OverpassRateLimitError,
    OverpassServerError,
)

QUERY = '[out:json];node["amenity"="cafe"](51.5,-0.13,51.51,-0.12);out;'

MAIN = OVERPASS_ENDPOINTS["Main"]
ALT1 = OVERPASS_ENDPOINTS["MainAlt1"]
ALT2 = OVERPASS_ENDPOINTS["MainAlt2"]


def make_response(status=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def config():
    cfg = Config()
    cfg.api.min_request_interval = 0
    return cfg


@pytest.fixture
def sleep():
    with patch("overpass_geojson.osm.api_client.time.sleep") as mocked:
        yield mocked


def called_urls(post):
    return [c.args[0] for c in post.call_args_list]


def test_default_fallbacks():
    assert default_fallbacks("Main") == ["MainAlt1", "MainAlt2"]
    assert default_fallbacks("KumiAlt2") == ["KumiAlt1", "KumiAlt2", "KumiAlt3"]
    assert default_fallbacks("France") == ["Main", "Kumi", "France"]


def test_resolve_endpoint():
    assert resolve_endpoint("Kumi") == ("Kumi", OVERPASS_ENDPOINTS["Kumi"])
    assert resolve_endpoint(OVERPASS_ENDPOINTS["France"]) == ("France", OVERPASS_ENDPOINTS["France"])
    assert resolve_endpoint("https://example.org/api/interpreter") == (
        "Main", "https://example.org/api/interpreter"
    )


def test_successful_query(config, sleep):
    payload = {"elements": [{"type": "node", "id": 1, "lat": 0, "lon": 0}]}
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(json_data=payload)) as post:
        result = OverpassAPIClient(config=config).query(QUERY)

    assert result == payload
    post.assert_called_once()
    assert post.call_args.args[0] == MAIN
    assert post.call_args.kwargs["data"] == {"data": QUERY}
    assert post.call_args.kwargs["headers"]["User-Agent"] == config.api.user_agent
    sleep.assert_not_called()


def test_rate_limit_switches_to_fallback(config, sleep):
    responses = [make_response(429), make_response(json_data={"elements": []})]
    with patch("overpass_geojson.osm.api_client.requests.post", side_effect=responses) as post:
        result = OverpassAPIClient(config=config).query(QUERY)

    assert result == {"elements": []}
    assert called_urls(post) == [MAIN, ALT1]
    sleep.assert_not_called()


def test_backoff_after_all_endpoints_tried(config, sleep):
    config.api.retry = RetryOptions(max_retries=4, initial_delay=1.0, max_delay=1.5, backoff=2.0)
    responses = [make_response(500)] * 4 + [make_response(json_data={"elements": []})]
    with patch("overpass_geojson.osm.api_client.requests.post", side_effect=responses) as post:
        OverpassAPIClient(config=config, fallback_endpoints=["MainAlt1"]).query(QUERY)

    assert called_urls(post) == [MAIN, ALT1, MAIN, ALT1, MAIN]
    assert [c.args[0] for c in sleep.call_args_list] == [1.0, 1.5]


def test_retries_exhausted_raises_classified_error(config, sleep):
    config.api.retry = RetryOptions(max_retries=2)
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(504)) as post:
        with pytest.raises(OverpassGatewayTimeoutError) as exc_info:
            OverpassAPIClient(config=config).query(QUERY)

    assert post.call_count == 3
    assert called_urls(post) == [MAIN, ALT1, ALT2]
    assert exc_info.value.status == 504


def test_rate_limit_error_after_last_attempt(config, sleep):
    config.api.retry = RetryOptions(max_retries=0)
    with patch("overpass_geojson.osm.api_client.requests.post", return_value=make_response(429)):
        with pytest.raises(OverpassRateLimitError):
            OverpassAPIClient(config=config).query(QUERY)


def test_bad_request_fails_immediately(config, sleep):
    page = "<p><strong style=\"color:#FF0000\">Error</strong>: line 1: parse error: &quot;foo&quot; </p>"
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(400, text=page)) as post:
        with pytest.raises(OverpassQueryError) as exc_info:
            OverpassAPIClient(config=config).query(QUERY)

    post.assert_called_once()
    message = str(exc_info.value)
    assert 'line 1: parse error: "foo"' in message
    assert QUERY in message


def test_connection_error_retried(config, sleep):
    responses = [requests.exceptions.ConnectionError("down"), make_response(json_data={"elements": []})]
    with patch("overpass_geojson.osm.api_client.requests.post", side_effect=responses) as post:
        assert OverpassAPIClient(config=config).query(QUERY) == {"elements": []}
    assert called_urls(post) == [MAIN, ALT1]


def test_connection_error_on_last_attempt(config, sleep):
    config.api.retry = RetryOptions(max_retries=1)
    with patch("overpass_geojson.osm.api_client.requests.post",
               side_effect=requests.exceptions.Timeout("slow")):
        with pytest.raises(OverpassError) as exc_info:
            OverpassAPIClient(config=config).query(QUERY)
    assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)


def test_remark_raises(config, sleep):
    payload = {"elements": [], "remark": "runtime error: Query timed out"}
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(json_data=payload)):
        with pytest.raises(OverpassError, match="Query timed out"):
            OverpassAPIClient(config=config).query(QUERY)


def test_invalid_json_raises(config, sleep):
    with patch("overpass_geojson.osm.api_client.requests.post", return_value=make_response(200)):
        with pytest.raises(OverpassError, match="Invalid JSON"):
            OverpassAPIClient(config=config).query(QUERY)


def test_explicit_endpoint_and_user_agent(config, sleep):
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(json_data={"elements": []})) as post:
        client = OverpassAPIClient(config=config, endpoint="Kumi", user_agent="tests/0.1", timeout=5)
        client.query(QUERY)

    assert client.fallback_endpoints == ["KumiAlt1", "KumiAlt2", "KumiAlt3"]
    assert post.call_args.args[0] == OVERPASS_ENDPOINTS["Kumi"]
    assert post.call_args.kwargs["headers"]["User-Agent"] == "tests/0.1"
    assert post.call_args.kwargs["timeout"] == 5


def test_server_error_class_for_other_5xx(config, sleep):
    config.api.retry = RetryOptions(max_retries=0)
    with patch("overpass_geojson.osm.api_client.requests.post", return_value=make_response(503)):
        with pytest.raises(OverpassServerError) as exc_info:
            OverpassAPIClient(config=config).query(QUERY)
    assert exc_info.value.status == 503


def test_empty_fallback_list_disables_fallbacks(config, sleep):
    config.api.retry = RetryOptions(max_retries=2, initial_delay=1.0, max_delay=10.0, backoff=2.0)
    responses = [make_response(429), make_response(429), make_response(json_data={"elements": []})]
    with patch("overpass_geojson.osm.api_client.requests.post", side_effect=responses) as post:
        client = OverpassAPIClient(config=config, fallback_endpoints=[])
        client.query(QUERY)

    assert client.fallback_endpoints == []
    assert called_urls(post) == [MAIN, MAIN, MAIN]
    assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]


def test_configured_empty_fallback_list(config):
    config.api.fallback_endpoints = []
    assert OverpassAPIClient(config=config).fallback_endpoints == []


def test_query_geojson(config, sleep):
    payload = {"version": 0.6, "elements": [
        {"type": "way", "id": 1, "nodes": [10, 11, 12, 10], "tags": {"building": "yes", "building:levels": "2"}},
        {"type": "node", "id": 10, "lat": 0, "lon": 0},
        {"type": "node", "id": 11, "lat": 1, "lon": 0},
        {"type": "node", "id": 12, "lat": 1, "lon": 1},
    ]}
    with patch("overpass_geojson.osm.api_client.requests.post",
               return_value=make_response(json_data=payload)) as post:
        client = OverpassAPIClient(config=config)
        raw = client.query_geojson(QUERY)
        parsed = client.query_geojson(QUERY, parse_tags=True)

    assert post.call_count == 2
    assert raw["type"] == "FeatureCollection"
    feature = raw["features"][0]
    assert feature["id"] == "way/1"
    assert feature["geometry"]["type"] == "Polygon"
    assert feature["properties"] == {"building": "yes", "building:levels": "2", "id": "way/1"}
    assert parsed["features"][0]["properties"] == {"building": True, "building:levels": 2, "id": "way/1"}


def test_query_geojson_propagates_errors(config, sleep):
    config.api.retry = RetryOptions(max_retries=0)
    with patch("overpass_geojson.osm.api_client.requests.post", return_value=make_response(400)):
        with pytest.raises(OverpassQueryError):
            OverpassAPIClient(config=config).query_geojson(QUERY)
