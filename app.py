"""Application factory."""

import json
import os
import uuid

import httpx
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from geocoding import NominatimGeocoder
from models import db
from routes.auth import auth_bp
from routes.geo import geo_bp
from routes.locations import locations_bp
from routes.map_ui import map_ui_bp
from routes.user import user_bp
from utils.responses import error_payload, error_response
from utils.tokens import register_jwt_callbacks

migrate = Migrate()
jwt = JWTManager()
register_jwt_callbacks(jwt)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "120 per minute")],
        storage_uri=app.config.get("RATELIMIT_STORAGE_URI", "memory://"),
        headers_enabled=app.config.get("RATELIMIT_HEADERS_ENABLED", True),
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Outbound HTTP
    _init_http_clients(app)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(user_bp, url_prefix="/api/user")
    app.register_blueprint(locations_bp, url_prefix="/api/locations")
    app.register_blueprint(geo_bp, url_prefix="/api")
    app.register_blueprint(map_ui_bp)

    # Tiles arrive in bursts of dozens per map pan.
    limiter.exempt(app.view_functions["map_ui.tile"])

    # Health
    @app.route("/health", methods=["GET"])
    @app.route("/api/health", methods=["GET"])
    def health_check():
        return jsonify({"success": True, "status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _init_http_clients(app: Flask) -> None:
    """Create the geocoder and tile client, sharing an optional test transport."""
    transport = app.config.get("HTTP_TRANSPORT")
    user_agent = app.config["GEOCODER_USER_AGENT"]
    timeout = app.config.get("GEOCODER_TIMEOUT", 10.0)

    app.extensions["geocoder"] = NominatimGeocoder(
        base_url=app.config["GEOCODER_BASE_URL"],
        ip_geo_url=app.config["IP_GEO_URL"],
        user_agent=user_agent,
        timeout=timeout,
        transport=transport,
    )
    app.extensions["tile_client"] = httpx.Client(
        headers={"User-Agent": user_agent},
        timeout=timeout,
        transport=transport,
    )


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        extra = {}
        errors = getattr(error, "errors", None)
        if errors:
            extra["errors"] = errors
        payload = error_payload(getattr(error, "name", "Error"), error.description, **extra)
        response = error.get_response()
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", payload["request_id"])
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        db.session.rollback()
        return error_response(500, "Internal Server Error", "An unexpected error occurred.")


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
