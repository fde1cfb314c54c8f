"""Authentication blueprint providing register, login, me, and logout endpoints."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, get_jwt, jwt_required
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict, Unauthorized

from models import db
from models.token_blocklist import TokenBlocklist
from models.user import User
from utils.request_validation import (
    ValidationFailed,
    field_error,
    is_valid_email,
    normalize_email,
    parse_json_request,
)
from utils.tokens import issue_token

MIN_PASSWORD_LENGTH = 6
NAME_LENGTH = (2, 50)

auth_bp = Blueprint("auth", __name__)


def validate_name(raw_name: object, errors: list[dict]) -> str:
    """Return the trimmed name, recording an error when it is out of bounds."""

    name = raw_name.strip() if isinstance(raw_name, str) else ""
    low, high = NAME_LENGTH
    if not low <= len(name) <= high:
        errors.append(field_error("name", f"Name must be between {low} and {high} characters."))
    return name


def validate_email(raw_email: object, errors: list[dict]) -> str:
    email = normalize_email(raw_email)
    if not is_valid_email(email):
        errors.append(field_error("email", "Please enter a valid email."))
    return email


def find_user_by_email(email: str) -> User | None:
    """Case-insensitive lookup."""
    return User.query.filter(func.lower(User.email) == email).first()


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new user and return a token so they are signed in at once."""
    payload = parse_json_request(request)
    if not payload.get("name") or not payload.get("email") or not payload.get("password"):
        raise BadRequest("Name, email, and password are required.")

    errors: list[dict] = []
    name = validate_name(payload.get("name"), errors)
    email = validate_email(payload.get("email"), errors)
    password = payload.get("password")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append(
            field_error(
                "password",
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
            )
        )
    if errors:
        raise ValidationFailed(errors)

    if find_user_by_email(email) is not None:
        raise Conflict("User with this email already exists.")

    user = User(name=name, email=email, role="user")
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("User with this email already exists.") from exc
    current_app.logger.info("Registered user %s", user.id)

    return (
        jsonify(
            {
                "success": True,
                "message": "User registered successfully.",
                "user": user.to_dict(),
                "token": issue_token(user),
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a JWT access token."""
    payload = parse_json_request(request)
    email = normalize_email(payload.get("email"))
    password = payload.get("password")

    if not email or not isinstance(password, str) or not password:
        raise BadRequest("Email and password are required.")

    user = find_user_by_email(email)
    if user is None or not user.check_password(password):
        raise Unauthorized("Invalid email or password.")

    return (
        jsonify(
            {
                "success": True,
                "message": "Login successful.",
                "user": user.to_dict(),
                "token": issue_token(user),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify({"success": True, "user": current_user.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    """Revoke the presented token; the client discards its copy."""
    TokenBlocklist.revoke(get_jwt()["jti"], current_user.id)
    db.session.commit()
    return jsonify({"success": True, "message": "Logged out successfully."})
