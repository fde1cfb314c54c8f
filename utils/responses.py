"""JSON response envelopes shared by routes and error handlers."""

from __future__ import annotations

import uuid

from flask import g, jsonify


def current_request_id() -> str:
    return g.get("request_id") or str(uuid.uuid4())


def error_payload(name: str, message: str, **extra) -> dict:
    payload = {
        "success": False,
        "error": name,
        "message": message,
        "request_id": current_request_id(),
    }
    payload.update(extra)
    return payload


def error_response(status_code: int, name: str, message: str, **extra):
    """Build a ``{success: false, ...}`` response with the request id header."""

    response = jsonify(error_payload(name, message, **extra))
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", current_request_id())
    return response
