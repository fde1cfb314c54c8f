"""Geocoding proxy blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest, NotFound, ServiceUnavailable

from geocoding import AbstractGeocoder, GeocoderUnavailable
from utils.request_validation import coerce_float

geo_bp = Blueprint("geo", __name__)


def _geocoder() -> AbstractGeocoder:
    return current_app.extensions["geocoder"]


def _unavailable(exc: GeocoderUnavailable) -> ServiceUnavailable:
    current_app.logger.warning("Geocoding upstream failed: %s", exc)
    return ServiceUnavailable("Geocoding service is unavailable.")


@geo_bp.route("/geocode", methods=["GET"])
def geocode():
    """Resolve a free-text address to its first match."""

    query = (request.args.get("q") or "").strip()
    if not query:
        raise BadRequest("Missing q parameter.")

    try:
        result = _geocoder().search(query)
    except GeocoderUnavailable as exc:
        raise _unavailable(exc) from exc

    if result is None:
        raise NotFound("No results.")
    return jsonify({"success": True, "lat": result.lat, "lon": result.lon, "label": result.label})


@geo_bp.route("/reverse", methods=["GET"])
def reverse():
    lat = coerce_float(request.args.get("lat"))
    lon = coerce_float(request.args.get("lon"))
    if lat is None or lon is None:
        raise BadRequest("lat/lon required.")

    try:
        result = _geocoder().reverse(lat, lon)
    except GeocoderUnavailable as exc:
        raise _unavailable(exc) from exc

    return jsonify({"success": True, "lat": result.lat, "lon": result.lon, "label": result.label})


@geo_bp.route("/me", methods=["GET"])
def locate_me():
    """Coarse location of the server's public IP address."""

    try:
        result = _geocoder().locate_ip()
    except GeocoderUnavailable as exc:
        raise _unavailable(exc) from exc

    if result is None:
        raise NotFound("No IP location available.")
    return jsonify(
        {
            "success": True,
            "lat": result.lat,
            "lon": result.lon,
            "city": result.city,
            "region": result.region,
        }
    )
