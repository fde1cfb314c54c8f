"""Turn API listings into map markers."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Iterable

DEFAULT_TITLE = "Firewood Spot"


@dataclass(frozen=True)
class Marker:
    lat: float
    lon: float
    title: str
    popup: str


def _popup(location: dict[str, Any]) -> str:
    title = escape(location.get("name") or DEFAULT_TITLE)
    parts = [f"<b>{title}</b>"]
    price = location.get("price")
    if price is not None:
        parts.append(f"${float(price):.2f}")
    if location.get("description"):
        parts.append(escape(location["description"]))
    return "<br/>".join(parts)


def to_markers(locations: Iterable[dict[str, Any]]) -> list[Marker]:
    """Build markers, skipping entries without usable coordinates."""

    markers = []
    for location in locations:
        lat, lon = location.get("latitude"), location.get("longitude")
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            continue
        markers.append(
            Marker(
                lat=float(lat),
                lon=float(lon),
                title=location.get("name") or DEFAULT_TITLE,
                popup=_popup(location),
            )
        )
    return markers


def to_feature_collection(locations: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """GeoJSON ``FeatureCollection``; note GeoJSON orders coordinates lon, lat."""

    features = []
    for location in locations:
        lat, lon = location.get("latitude"), location.get("longitude")
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            continue
        properties = {
            key: location.get(key)
            for key in ("id", "name", "description", "price", "status")
        }
        owner = location.get("createdBy") or {}
        properties["ownerId"] = owner.get("id")
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [float(lon), float(lat)]},
                "properties": properties,
            }
        )
    return {"type": "FeatureCollection", "features": features}
