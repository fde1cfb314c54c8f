"""Tests for the geocoding proxy endpoints."""

from __future__ import annotations

import httpx
from flask.testing import FlaskClient

SEARCH_URL = "https://geo.test/search"
REVERSE_URL = "https://geo.test/reverse"
IP_URL = "https://ip.test/json/"


def _connect_error(request: httpx.Request) -> Exception:
    return httpx.ConnectError("connection refused", request=request)


def test_geocode_returns_first_match(client: FlaskClient, upstream):
    upstream.add(
        SEARCH_URL,
        json=[
            {"lat": "43.366", "lon": "-124.217", "display_name": "Coos Bay, Oregon"},
            {"lat": "1", "lon": "2", "display_name": "Elsewhere"},
        ],
    )

    response = client.get("/api/geocode?q=Coos%20Bay")

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "lat": 43.366,
        "lon": -124.217,
        "label": "Coos Bay, Oregon",
    }
    sent = upstream.requests[-1]
    assert sent.url.params["q"] == "Coos Bay"
    assert sent.url.params["limit"] == "1"
    assert sent.headers["User-Agent"].startswith("GetCampWood")


def test_geocode_without_results_is_not_found(client: FlaskClient, upstream):
    upstream.add(SEARCH_URL, json=[])

    response = client.get("/api/geocode?q=nowhere")

    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_geocode_requires_query(client: FlaskClient, upstream):
    response = client.get("/api/geocode?q=%20")

    assert response.status_code == 400
    assert upstream.requests == []


def test_geocode_upstream_error_is_service_unavailable(client: FlaskClient, upstream):
    upstream.add(SEARCH_URL, status_code=502, json={"error": "bad gateway"})

    response = client.get("/api/geocode?q=Coos%20Bay")

    assert response.status_code == 503
    assert response.get_json()["message"] == "Geocoding service is unavailable."


def test_geocode_transport_failure_is_service_unavailable(client: FlaskClient, upstream):
    upstream.add(SEARCH_URL, exc=_connect_error)

    assert client.get("/api/geocode?q=x").status_code == 503


def test_geocode_undecodable_body_is_service_unavailable(client: FlaskClient, upstream):
    upstream.add(SEARCH_URL, content=b"<html>rate limited</html>")

    assert client.get("/api/geocode?q=x").status_code == 503


def test_reverse_returns_label(client: FlaskClient, upstream):
    upstream.add(REVERSE_URL, json={"display_name": "Coos Bay, Oregon"})

    response = client.get("/api/reverse?lat=43.366&lon=-124.217")

    assert response.status_code == 200
    data = response.get_json()
    assert data["label"] == "Coos Bay, Oregon"
    assert data["lat"] == 43.366
    assert upstream.requests[-1].url.params["lat"] == "43.366"


def test_reverse_with_unknown_place_has_empty_label(client: FlaskClient, upstream):
    upstream.add(REVERSE_URL, json={"error": "Unable to geocode"})

    response = client.get("/api/reverse?lat=0&lon=0")

    assert response.status_code == 200
    assert response.get_json()["label"] == ""


def test_reverse_requires_numeric_coordinates(client: FlaskClient):
    assert client.get("/api/reverse?lat=abc&lon=1").status_code == 400
    assert client.get("/api/reverse?lat=1").status_code == 400


def test_ip_lookup(client: FlaskClient, upstream):
    upstream.add(
        IP_URL,
        json={"latitude": 43.4, "longitude": -124.2, "city": "Coos Bay", "region": "Oregon"},
    )

    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "lat": 43.4,
        "lon": -124.2,
        "city": "Coos Bay",
        "region": "Oregon",
    }


def test_ip_lookup_without_coordinates(client: FlaskClient, upstream):
    upstream.add(IP_URL, json={"error": True, "reason": "Reserved IP Address"})

    assert client.get("/api/me").status_code == 404


def test_ip_lookup_failure(client: FlaskClient, upstream):
    upstream.add(IP_URL, exc=_connect_error)

    assert client.get("/api/me").status_code == 503
