"""Tests for FastAPI endpoints."""

import random
import sys
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

import config
from location import FixedLocationProvider
from main import app, get_location_provider, get_pub_service
from models import Coordinate
from pub_service import PubService

ELEMENTS = [
    {"id": 42, "type": "node", "lat": 51.508, "lon": -0.128,
     "tags": {"amenity": "pub", "name": "Ye Olde Cheshire", "addr:street": "Fleet Street"}},
    {"id": 7, "type": "way", "center": {"lat": 51.509, "lon": -0.127},
     "tags": {"craft": "brewery", "name": "Fleet Brewing", "cuisine": "IPA"}},
]


class Upstream:
    def __init__(self):
        self.fail = False
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.fail:
            raise httpx.ConnectError("down", request=request)
        return httpx.Response(200, json={"elements": ELEMENTS})


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def client(upstream):
    service = PubService(
        endpoint="https://overpass.test/api/interpreter",
        client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
        rng=random.Random(0),
    )
    provider = FixedLocationProvider(Coordinate(latitude=51.5074, longitude=-0.1278))
    app.dependency_overrides[get_pub_service] = lambda: service
    app.dependency_overrides[get_location_provider] = lambda: provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_config(client):
    resp = client.get("/config")
    assert resp.status_code == 200
    data = resp.json()
    assert data["max_results"] == 50
    assert "amenity=pub" in data["venue_tags"]


def test_nearby_pubs(client):
    resp = client.get("/pubs?lat=51.5074&lon=-0.1278&radius=1000")
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 2
    assert data["is_mock_data"] is False
    first = data["pubs"][0]
    assert first["id"] == "osm-node-42"
    assert first["address"] == "Fleet Street"
    assert first["coordinate"] == {"latitude": 51.508, "longitude": -0.128}
    assert 0 < first["distance_km"] < 0.1


def test_nearby_pubs_defaults_to_provider_location(client):
    resp = client.get("/pubs")
    assert resp.status_code == 200
    assert resp.json()["location"] == {"latitude": 51.5074, "longitude": -0.1278}


def test_nearby_pubs_requires_both_coordinates(client):
    resp = client.get("/pubs?lat=51.5")
    assert resp.status_code == 400


def test_nearby_pubs_rejects_invalid_latitude(client):
    resp = client.get("/pubs?lat=95&lon=0")
    assert resp.status_code == 422


def test_nearby_pubs_fallback_flag(client, upstream):
    upstream.fail = True
    data = client.get("/pubs?lat=51.5074&lon=-0.1278").json()
    assert data["is_mock_data"] is True
    assert data["count"] == 3
    assert all(p["id"].startswith("mock-") for p in data["pubs"])


def test_search_during_fallback_keeps_mock_flag(client, upstream):
    upstream.fail = True
    data = client.get("/pubs/search?q=zzz&lat=51.5074&lon=-0.1278").json()
    assert data["count"] == 0
    assert data["is_mock_data"] is True


def test_search(client):
    resp = client.get("/pubs/search?q=ipa&lat=51.5074&lon=-0.1278")
    assert resp.status_code == 200
    data = resp.json()
    assert [p["id"] for p in data["pubs"]] == ["osm-way-7"]


def test_clear_cache(client, upstream, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_API_KEY", "")
    client.get("/pubs?lat=51.5074&lon=-0.1278")
    client.get("/pubs?lat=51.5074&lon=-0.1278")
    assert upstream.calls == 1

    resp = client.delete("/cache")
    assert resp.status_code == 200

    client.get("/pubs?lat=51.5074&lon=-0.1278")
    assert upstream.calls == 2


def test_clear_cache_requires_admin_key(client, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_API_KEY", "secret")
    assert client.delete("/cache").status_code == 403
    assert client.delete("/cache", headers={"X-API-Key": "secret"}).status_code == 200
