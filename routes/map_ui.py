"""Support endpoints for the browser map: runtime config and a tile proxy."""

from __future__ import annotations

import json

import httpx
from flask import Blueprint, Response, current_app
from werkzeug.exceptions import BadGateway

map_ui_bp = Blueprint("map_ui", __name__)

TILE_CACHE_CONTROL = "public, max-age=86400"


@map_ui_bp.route("/config.js", methods=["GET"])
def client_config():
    """Expose API base URLs to the front-end as ``window.CONFIG``."""

    config = {
        "GEO_URL": current_app.config["MAP_GEO_URL"],
        "LOC_URL": current_app.config["MAP_LOC_URL"],
    }
    body = f"window.CONFIG = {json.dumps(config)};"
    return Response(body, mimetype="application/javascript")


@map_ui_bp.route("/tiles/<int:z>/<int:x>/<int:y>.png", methods=["GET"])
def tile(z: int, x: int, y: int):
    """Relay a map tile so the browser only ever talks to this origin."""

    url = current_app.config["TILE_URL_TEMPLATE"].format(z=z, x=x, y=y)
    client: httpx.Client = current_app.extensions["tile_client"]
    try:
        upstream = client.get(url)
    except httpx.HTTPError as exc:
        current_app.logger.warning("Tile fetch failed for %s: %s", url, exc)
        raise BadGateway("Tile server is unreachable.") from exc

    if upstream.status_code != 200:
        return Response(status=upstream.status_code)

    response = Response(upstream.content, mimetype="image/png")
    response.headers["Cache-Control"] = TILE_CACHE_CONTROL
    return response
