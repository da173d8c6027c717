"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from racing_map.config import MappingConfig
from racing_map.mapping.session import MappingSession
from racing_map.web.app import create_app


@pytest.fixture
def session() -> MappingSession:
    return MappingSession(MappingConfig(broadcast_interval_s=0.05))


@pytest.fixture
def client(session):
    """FastAPI test client around a fresh, inactive session."""
    with TestClient(create_app(session)) as c:
        yield c


@pytest.fixture
def live_client(client):
    """Client whose session has been started."""
    resp = client.post("/api/session/start", json={"trackName": "Zandvoort"})
    assert resp.status_code == 200
    return client


def post_positions(client: TestClient, points, vehicle: str = "1") -> None:
    for x, y in points:
        resp = client.post(
            "/api/feed/position",
            json={"Position": {vehicle: {"X": str(x), "Y": str(y), "Z": "0"}}},
        )
        assert resp.status_code == 200
