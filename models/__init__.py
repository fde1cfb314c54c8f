"""Database initialization and model exports."""

from datetime import UTC, datetime

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def utcnow() -> datetime:
    """Naive UTC timestamp used for column defaults."""
    return datetime.now(UTC).replace(tzinfo=None)


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .location import Location  # noqa: E402,F401
from .token_blocklist import TokenBlocklist  # noqa: E402,F401

__all__ = [
    "db",
    "utcnow",
    "User",
    "Location",
    "TokenBlocklist",
]
