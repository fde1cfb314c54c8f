"""HTTP client for the GetCampWood API, used by map front-ends and scripts."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .session import AuthState

logger = logging.getLogger(__name__)

# ``error`` name the server uses when it rejects the bearer token itself, as
# opposed to refusing an action the signed-in user is not allowed to take.
INVALID_TOKEN_ERROR = "Invalid Token"


class ApiError(Exception):
    """A non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str, errors: list | None = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


def _token_rejected(status_code: int, body: dict[str, Any]) -> bool:
    if status_code == 401:
        return True
    return status_code == 403 and body.get("error") == INVALID_TOKEN_ERROR


class CampWoodClient:
    """Thin wrapper over the REST API that keeps ``AuthState`` up to date.

    ``geo_url`` defaults to ``base_url`` since the geocoding proxy is served
    from the same application.
    """

    def __init__(
        self,
        base_url: str,
        geo_url: str | None = None,
        auth: AuthState | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.geo_url = (geo_url or base_url).rstrip("/")
        self.auth = auth or AuthState()
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CampWoodClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- plumbing ---------------------------------------------------------

    def _request(
        self,
        method: str,
        url: str,
        *,
        auth: bool = False,
        json: dict | None = None,
        params: dict | None = None,
    ) -> dict[str, Any]:
        headers = {}
        if auth:
            if not self.auth.token:
                raise ApiError(401, "You must be logged in.")
            headers["Authorization"] = f"Bearer {self.auth.token}"

        logger.debug("%s %s", method, url)
        response = self._client.request(method, url, json=json, params=params, headers=headers)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_success:
            return body

        if auth and _token_rejected(response.status_code, body):
            self.auth.clear()
        message = body.get("message") or body.get("error") or response.reason_phrase
        raise ApiError(response.status_code, message, body.get("errors"))

    def _api(self, path: str) -> str:
        return f"{self.base_url}{path}"

    # -- auth -------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        body = self._request(
            "POST",
            self._api("/auth/register"),
            json={"name": name, "email": email, "password": password},
        )
        self.auth.set(body.get("token"), body.get("user"))
        return body["user"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        body = self._request(
            "POST", self._api("/auth/login"), json={"email": email, "password": password}
        )
        self.auth.set(body.get("token"), body.get("user"))
        return body["user"]

    def logout(self) -> None:
        """Revoke the token server-side and forget it locally either way."""
        try:
            if self.auth.token:
                self._request("POST", self._api("/auth/logout"), auth=True)
        finally:
            self.auth.clear()

    def me(self) -> dict[str, Any]:
        body = self._request("GET", self._api("/auth/me"), auth=True)
        self.auth.update_user(body["user"])
        return body["user"]

    # -- locations --------------------------------------------------------

    def list_locations(
        self,
        lat: float | None = None,
        lng: float | None = None,
        radius: float | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = {
            key: value
            for key, value in {"lat": lat, "lng": lng, "radius": radius, "limit": limit}.items()
            if value is not None
        }
        body = self._request("GET", self._api("/locations"), params=params or None)
        return body.get("locations", [])

    def create_location(
        self,
        name: str,
        latitude: float,
        longitude: float,
        description: str | None = None,
        price: float | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "latitude": latitude, "longitude": longitude}
        if description:
            payload["description"] = description
        if price is not None:
            payload["price"] = price
        body = self._request("POST", self._api("/locations"), auth=True, json=payload)
        return body["location"]

    def update_location(self, location_id: int, **changes: Any) -> dict[str, Any]:
        body = self._request(
            "PUT", self._api(f"/locations/{location_id}"), auth=True, json=changes
        )
        return body["location"]

    def delete_location(self, location_id: int) -> None:
        self._request("DELETE", self._api(f"/locations/{location_id}"), auth=True)

    def my_locations(self) -> list[dict[str, Any]]:
        body = self._request("GET", self._api("/locations/user/mine"), auth=True)
        return body.get("locations", [])

    # -- geocoding --------------------------------------------------------

    def geocode(self, query: str) -> dict[str, Any] | None:
        """Return ``{lat, lon, label}`` for an address, or None when unknown."""
        try:
            return self._request("GET", f"{self.geo_url}/geocode", params={"q": query})
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise

    def locate_me(self, device_position: tuple[float, float] | None = None) -> dict[str, Any] | None:
        """Prefer a position reported by the device, fall back to IP lookup."""
        if device_position is not None:
            lat, lon = device_position
            return {"lat": lat, "lon": lon, "source": "device"}
        try:
            body = self._request("GET", f"{self.geo_url}/me")
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        return {"lat": body["lat"], "lon": body["lon"], "source": "ip"}
