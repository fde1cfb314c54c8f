"""Nominatim and ipapi-backed geocoder."""

from __future__ import annotations

from typing import Any

import httpx

from .abstract_geocoder import (
    AbstractGeocoder,
    GeocodeResult,
    GeocoderUnavailable,
    IpLocation,
)


class NominatimGeocoder(AbstractGeocoder):
    """Forward lookups to an OpenStreetMap Nominatim instance.

    IP-based lookups go to a separate JSON endpoint (ipapi.co by default) that
    answers with ``latitude``/``longitude``/``city``/``region`` keys. Nothing is
    retried: a slow or failing upstream surfaces as ``GeocoderUnavailable``.
    """

    def __init__(
        self,
        base_url: str,
        ip_geo_url: str,
        user_agent: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.ip_geo_url = ip_geo_url
        self._client = httpx.Client(
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise GeocoderUnavailable(f"{url}: {exc}") from exc

    def search(self, query: str) -> GeocodeResult | None:
        data = self._get_json(
            f"{self.base_url}/search",
            params={"format": "json", "limit": 1, "q": query},
        )
        if not isinstance(data, list) or not data:
            return None
        first = data[0]
        try:
            return GeocodeResult(
                lat=float(first["lat"]),
                lon=float(first["lon"]),
                label=first.get("display_name") or "",
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocoderUnavailable(f"Malformed search result: {exc}") from exc

    def reverse(self, lat: float, lon: float) -> GeocodeResult:
        data = self._get_json(
            f"{self.base_url}/reverse",
            params={"format": "json", "lat": lat, "lon": lon},
        )
        label = data.get("display_name") if isinstance(data, dict) else None
        return GeocodeResult(lat=lat, lon=lon, label=label or "")

    def locate_ip(self) -> IpLocation | None:
        data = self._get_json(self.ip_geo_url)
        if not isinstance(data, dict):
            return None
        lat = data.get("latitude")
        lon = data.get("longitude")
        if lat is None or lon is None:
            return None
        try:
            return IpLocation(
                lat=float(lat),
                lon=float(lon),
                city=data.get("city"),
                region=data.get("region"),
            )
        except (TypeError, ValueError) as exc:
            raise GeocoderUnavailable(f"Malformed IP location: {exc}") from exc

    def close(self) -> None:
        self._client.close()
