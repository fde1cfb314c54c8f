"""Firewood location model and geographic query helpers."""

import math
from decimal import Decimal

from . import db, utcnow

LOCATION_STATUSES = ("active", "pending", "rejected")

EARTH_RADIUS_KM = 6371.0
# Roughly 100 m on each axis; a square window, not a true distance.
DUPLICATE_TOLERANCE_DEG = 0.001


def bounding_box(lat: float, lng: float, radius_km: float) -> tuple[float, float, float, float]:
    """Return ``(min_lat, max_lat, min_lng, max_lng)`` around a point.

    The half-width is the radius converted to an angle on a spherical earth and
    applied equally to both axes. This ignores the narrowing of longitude
    degrees towards the poles and is only meaningful for small radii.
    """

    delta = math.degrees(radius_km / EARTH_RADIUS_KM)
    return lat - delta, lat + delta, lng - delta, lng + delta


class Location(db.Model):
    """A geotagged firewood-for-sale listing."""

    __tablename__ = "locations"
    __table_args__ = (db.Index("ix_locations_lat_lng", "latitude", "longitude"),)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    created_by_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = db.Column(
        db.Enum(*LOCATION_STATUSES, name="location_status_enum"),
        nullable=False,
        default="active",
        index=True,
    )
    verified = db.Column(db.Boolean, nullable=False, default=False)
    report_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="locations")

    def can_be_modified_by(self, user) -> bool:
        """Only the owner or an administrator may change a listing."""

        if user is None:
            return False
        return user.is_admin or user.id == self.created_by_id

    def to_dict(self) -> dict:
        """Serialize the listing with its owner's public details."""

        price = float(self.price) if isinstance(self.price, Decimal) else self.price
        owner = self.owner
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": price,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdBy": {"id": owner.id, "name": owner.name, "email": owner.email}
            if owner is not None
            else None,
            "status": self.status,
            "verified": self.verified,
            "reportCount": self.report_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def active_filter(query):
        """Restrict a query to publicly visible listings."""

        return query.filter(Location.status == "active")

    @staticmethod
    def nearby_filter(query, lat: float, lng: float, radius_km: float):
        """Restrict a query to the bounding box of ``radius_km`` around a point."""

        min_lat, max_lat, min_lng, max_lng = bounding_box(lat, lng, radius_km)
        return query.filter(
            Location.latitude.between(min_lat, max_lat),
            Location.longitude.between(min_lng, max_lng),
        )

    @classmethod
    def find_near_duplicate(cls, lat: float, lng: float):
        """Return an active listing within the duplicate tolerance, if any."""

        query = cls.active_filter(cls.query).filter(
            cls.latitude.between(lat - DUPLICATE_TOLERANCE_DEG, lat + DUPLICATE_TOLERANCE_DEG),
            cls.longitude.between(lng - DUPLICATE_TOLERANCE_DEG, lng + DUPLICATE_TOLERANCE_DEG),
        )
        return query.first()
