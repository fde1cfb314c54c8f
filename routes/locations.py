"""Locations blueprint: public browsing plus owner-guarded CRUD."""

from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, jwt_required
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.location import LOCATION_STATUSES, Location
from models.user import User
from utils.request_validation import (
    ValidationFailed,
    coerce_float,
    coerce_int,
    field_error,
    parse_bool,
    parse_json_request,
)

locations_bp = Blueprint("locations", __name__)

NAME_MAX = 100
DESCRIPTION_MAX = 500
DEFAULT_RADIUS_KM = 50.0
RADIUS_RANGE_KM = (1.0, 1000.0)
DEFAULT_LIMIT = 50
LIMIT_RANGE = (1, 100)
EDITABLE_FIELDS = ("name", "description", "price", "latitude", "longitude")


def _get_location_or_404(location_id: int, *, active_only: bool = False) -> Location:
    query = Location.query.filter(Location.id == location_id)
    if active_only:
        query = Location.active_filter(query)
    location = query.first()
    if location is None:
        raise NotFound("Location not found.")
    return location


def _ranged_float(args, key: str, low: float, high: float, message: str, errors: list):
    raw = args.get(key)
    if raw is None or raw == "":
        return None
    value = coerce_float(raw)
    if value is None or not low <= value <= high:
        errors.append(field_error(key, message))
        return None
    return value


def _parse_list_args(args) -> tuple[float | None, float | None, float, int]:
    errors: list[dict] = []
    lat = _ranged_float(args, "lat", -90, 90, "Invalid latitude", errors)
    lng = _ranged_float(args, "lng", -180, 180, "Invalid longitude", errors)
    radius = _ranged_float(
        args, "radius", *RADIUS_RANGE_KM, "Radius must be between 1 and 1000 km", errors
    )

    limit = DEFAULT_LIMIT
    raw_limit = args.get("limit")
    if raw_limit not in (None, ""):
        parsed = coerce_int(raw_limit)
        if parsed is None or not LIMIT_RANGE[0] <= parsed <= LIMIT_RANGE[1]:
            errors.append(field_error("limit", "Limit must be between 1 and 100"))
        else:
            limit = parsed

    if errors:
        raise ValidationFailed(errors)
    return lat, lng, radius or DEFAULT_RADIUS_KM, limit


def _validate_location_payload(data: dict, partial: bool = False) -> dict:
    """Return the cleaned subset of editable fields present in ``data``.

    On create every coordinate is required; on update only supplied fields are
    checked. Raises ``ValidationFailed`` listing every problem at once.
    """

    errors: list[dict] = []
    cleaned: dict = {}

    if "name" in data or not partial:
        raw = data.get("name")
        name = raw.strip() if isinstance(raw, str) else ""
        if not 1 <= len(name) <= NAME_MAX:
            errors.append(field_error("name", "Name must be between 1 and 100 characters"))
        else:
            cleaned["name"] = name

    if "description" in data:
        raw = data.get("description")
        if raw is None:
            cleaned["description"] = None
        elif not isinstance(raw, str):
            errors.append(field_error("description", "Description must be text"))
        elif len(raw.strip()) > DESCRIPTION_MAX:
            errors.append(
                field_error("description", "Description cannot exceed 500 characters")
            )
        else:
            cleaned["description"] = raw.strip() or None

    if "price" in data:
        raw = data.get("price")
        if raw in (None, ""):
            cleaned["price"] = None
        else:
            price = coerce_float(raw)
            if price is None or price < 0:
                errors.append(field_error("price", "Price must be a positive number"))
            else:
                cleaned["price"] = Decimal(str(price))

    for key, low, high, message in (
        ("latitude", -90, 90, "Latitude must be between -90 and 90"),
        ("longitude", -180, 180, "Longitude must be between -180 and 180"),
    ):
        if key not in data and partial:
            continue
        value = coerce_float(data.get(key))
        if value is None or not low <= value <= high:
            errors.append(field_error(key, message))
        else:
            cleaned[key] = value

    if errors:
        raise ValidationFailed(errors)
    return cleaned


def _require_modifiable(location: Location, action: str) -> User:
    user = get_current_user()
    if not location.can_be_modified_by(user):
        raise Forbidden(f"Not authorized to {action} this location.")
    return user


@locations_bp.route("", methods=["GET"])
def list_locations():
    """Return active locations, optionally limited to a box around a point."""

    lat, lng, radius, limit = _parse_list_args(request.args)

    query = Location.active_filter(Location.query)
    if lat is not None and lng is not None:
        query = Location.nearby_filter(query, lat, lng, radius)

    locations = (
        query.order_by(Location.created_at.desc(), Location.id.desc()).limit(limit).all()
    )
    payload = [location.to_dict() for location in locations]
    return jsonify({"success": True, "locations": payload, "count": len(payload)})


@locations_bp.route("/<int:location_id>", methods=["GET"])
def get_location(location_id: int):
    location = _get_location_or_404(location_id, active_only=True)
    return jsonify({"success": True, "location": location.to_dict()})


@locations_bp.route("", methods=["POST"])
@jwt_required()
def create_location():
    """Create a listing owned by the caller."""

    user = get_current_user()
    data = parse_json_request(request)
    cleaned = _validate_location_payload(data)

    if Location.find_near_duplicate(cleaned["latitude"], cleaned["longitude"]) is not None:
        raise BadRequest("A location already exists very close to these coordinates.")

    location = Location(created_by_id=user.id, status="active", **cleaned)
    db.session.add(location)
    db.session.commit()
    current_app.logger.info("User %s created location %s", user.id, location.id)

    return (
        jsonify(
            {
                "success": True,
                "message": "Location created successfully.",
                "location": location.to_dict(),
            }
        ),
        201,
    )


@locations_bp.route("/<int:location_id>", methods=["PUT"])
@jwt_required()
def update_location(location_id: int):
    location = _get_location_or_404(location_id)
    _require_modifiable(location, "update")

    data = parse_json_request(request)
    cleaned = _validate_location_payload(data, partial=True)
    for field in EDITABLE_FIELDS:
        if field in cleaned:
            setattr(location, field, cleaned[field])

    db.session.commit()
    return jsonify(
        {
            "success": True,
            "message": "Location updated successfully.",
            "location": location.to_dict(),
        }
    )


@locations_bp.route("/<int:location_id>", methods=["DELETE"])
@jwt_required()
def delete_location(location_id: int):
    location = _get_location_or_404(location_id)
    user = _require_modifiable(location, "delete")

    db.session.delete(location)
    db.session.commit()
    current_app.logger.info("User %s deleted location %s", user.id, location_id)
    return jsonify({"success": True, "message": "Location deleted successfully."})


@locations_bp.route("/user/mine", methods=["GET"])
@jwt_required()
def my_locations():
    """Return every listing the caller owns, whatever its status."""

    user = get_current_user()
    locations = (
        Location.query.filter_by(created_by_id=user.id)
        .order_by(Location.created_at.desc(), Location.id.desc())
        .all()
    )
    payload = [location.to_dict() for location in locations]
    return jsonify({"success": True, "locations": payload, "count": len(payload)})


@locations_bp.route("/<int:location_id>/report", methods=["POST"])
@jwt_required()
def report_location(location_id: int):
    location = _get_location_or_404(location_id, active_only=True)
    location.report_count = (location.report_count or 0) + 1
    db.session.commit()
    current_app.logger.info(
        "Location %s reported (%s total)", location.id, location.report_count
    )
    return jsonify({"success": True, "reportCount": location.report_count})


@locations_bp.route("/<int:location_id>/status", methods=["PUT"])
@jwt_required()
def moderate_location(location_id: int):
    """Change a listing's moderation status or verified flag. Admins only."""

    user = get_current_user()
    if not user.is_admin:
        raise Forbidden("Admin privileges required.")

    location = _get_location_or_404(location_id)
    data = parse_json_request(request)

    if "status" not in data and "verified" not in data:
        raise BadRequest("status or verified is required.")

    if "status" in data:
        status = data.get("status")
        if status not in LOCATION_STATUSES:
            raise BadRequest("status must be one of active, pending, rejected.")
        location.status = status

    if "verified" in data:
        verified = parse_bool(data.get("verified"))
        if verified is None:
            raise BadRequest("verified must be boolean.")
        location.verified = verified

    db.session.commit()
    return jsonify({"success": True, "location": location.to_dict()})
