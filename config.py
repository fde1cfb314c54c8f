"""Application configuration module."""

import os
from datetime import timedelta


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_ACCESS_TOKEN_DAYS", "7")))
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///getcampwood.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "120 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Geocoding
    GEOCODER_BASE_URL = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org")
    IP_GEO_URL = os.getenv("IP_GEO_URL", "https://ipapi.co/json/")
    GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "GetCampWood/1.0")
    GEOCODER_TIMEOUT = float(os.getenv("GEOCODER_TIMEOUT", "10"))
    HTTP_TRANSPORT = None

    # Map UI
    TILE_URL_TEMPLATE = os.getenv(
        "TILE_URL_TEMPLATE", "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    )
    MAP_GEO_URL = os.getenv("MAP_GEO_URL", "/api")
    MAP_LOC_URL = os.getenv("MAP_LOC_URL", "/api")
