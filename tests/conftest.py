"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402

GEO_BASE = "https://geo.test"
IP_URL = "https://ip.test/json/"
TILE_TEMPLATE = "https://tiles.test/{z}/{x}/{y}.png"


class FakeUpstream:
    """Canned answers for outbound HTTP, keyed by ``scheme://host/path``."""

    def __init__(self) -> None:
        self.routes: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        url: str,
        *,
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        exc: Callable[[httpx.Request], Exception] | None = None,
    ) -> None:
        self.routes[url] = {
            "status_code": status_code,
            "json": json,
            "content": content,
            "headers": headers,
            "exc": exc,
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"error": "unrouted"})
        if route["exc"] is not None:
            raise route["exc"](request)
        if route["content"] is not None:
            return httpx.Response(
                route["status_code"], content=route["content"], headers=route["headers"]
            )
        return httpx.Response(route["status_code"], json=route["json"], headers=route["headers"])


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
    RATE_LIMIT = "1000 per minute"
    GEOCODER_BASE_URL = GEO_BASE
    IP_GEO_URL = IP_URL
    TILE_URL_TEMPLATE = TILE_TEMPLATE


@pytest.fixture()
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture()
def app(upstream: FakeUpstream) -> Flask:
    """Create a Flask application instance for tests."""

    class TestConfig(_BaseTestConfig):
        HTTP_TRANSPORT = httpx.MockTransport(upstream.handle)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def register_user(client: FlaskClient):
    """Register through the API and return ``(token, user)``."""

    def _register(
        name: str = "Ann", email: str = "ann@x.com", password: str = "secret1"
    ) -> tuple[str, dict]:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.get_json()
        payload = response.get_json()
        return payload["token"], payload["user"]

    return _register


@pytest.fixture()
def admin_token(app: Flask, client: FlaskClient) -> str:
    """Seed an administrator and return a token obtained by logging in."""

    with app.app_context():
        admin = User(name="Admin", email="admin@x.com", role="admin")
        admin.set_password("AdminPass123")
        db.session.add(admin)
        db.session.commit()

    response = client.post(
        "/api/auth/login", json={"email": "admin@x.com", "password": "AdminPass123"}
    )
    assert response.status_code == 200
    return response.get_json()["token"]