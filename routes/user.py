"""Account management blueprint: profile edits, statistics, and deletion."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_current_user, get_jwt, jwt_required
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict

from models import db
from models.location import Location
from models.token_blocklist import TokenBlocklist
from models.user import User
from routes.auth import (
    MIN_PASSWORD_LENGTH,
    find_user_by_email,
    validate_email,
    validate_name,
)
from utils.request_validation import ValidationFailed, parse_json_request

user_bp = Blueprint("user", __name__)


@user_bp.route("/profile", methods=["PUT"])
@jwt_required()
def update_profile():
    """Update name and email, and optionally the password."""

    user: User = get_current_user()
    payload = parse_json_request(request)

    errors: list[dict] = []
    name = validate_name(payload.get("name"), errors)
    email = validate_email(payload.get("email"), errors)
    if errors:
        raise ValidationFailed(errors)

    if email != user.email:
        taken = find_user_by_email(email)
        if taken is not None and taken.id != user.id:
            raise Conflict("Email is already taken by another user.")

    new_password = payload.get("newPassword")
    if new_password:
        current_password = payload.get("currentPassword")
        if not current_password:
            raise BadRequest("Current password is required to change password.")
        if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
            raise BadRequest(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        if not user.check_password(str(current_password)):
            raise BadRequest("Current password is incorrect.")
        user.set_password(new_password)

    user.name = name
    user.email = email
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Another request claimed the email between the check and the commit.
        db.session.rollback()
        raise Conflict("Email is already taken by another user.") from exc

    return jsonify(
        {"success": True, "message": "Profile updated successfully.", "user": user.to_dict()}
    )


@user_bp.route("/account", methods=["DELETE"])
@jwt_required()
def delete_account():
    """Delete the caller's listings, then the caller. Irreversible."""

    user: User = get_current_user()
    user_id = user.id

    removed = Location.query.filter_by(created_by_id=user_id).delete(
        synchronize_session=False
    )
    db.session.delete(user)
    TokenBlocklist.revoke(get_jwt()["jti"], user_id)
    db.session.commit()
    current_app.logger.info("Deleted user %s and %s location(s)", user_id, removed)

    return jsonify(
        {
            "success": True,
            "message": "Account and all associated data deleted successfully.",
            "deletedLocations": removed,
        }
    )


@user_bp.route("/stats", methods=["GET"])
@jwt_required()
def stats():
    base = Location.query.filter_by(created_by_id=get_current_user().id)
    total = base.count()
    active = base.filter(Location.status == "active").count()
    return jsonify(
        {
            "success": True,
            "stats": {
                "totalLocations": total,
                "activeLocations": active,
                "pendingLocations": total - active,
            },
        }
    )
