"""Bearer token issuance and the JWT guard callbacks."""

from __future__ import annotations

from http import HTTPStatus

from flask_jwt_extended import JWTManager, create_access_token

from models import db
from models.token_blocklist import TokenBlocklist
from models.user import User
from utils.responses import error_response


def issue_token(user: User) -> str:
    """Create a signed access token carrying the user's public identity."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "name": user.name, "role": user.role},
    )


# Distinguishes a rejected token from an ordinary permission refusal.
INVALID_TOKEN_ERROR = "Invalid Token"


def _forbidden(message: str):
    return error_response(HTTPStatus.FORBIDDEN, INVALID_TOKEN_ERROR, message)


def register_jwt_callbacks(jwt: JWTManager) -> None:
    """Wire user lookup, revocation, and the 401/403 error shapes."""

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.token_in_blocklist_loader
    def _is_token_revoked(_jwt_header, jwt_payload) -> bool:
        jti = jwt_payload.get("jti")
        return jti is None or TokenBlocklist.is_revoked(jti)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return error_response(HTTPStatus.UNAUTHORIZED, "Unauthorized", "Access token required.")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _forbidden("Invalid or expired token.")

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return _forbidden("Invalid or expired token.")

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header, _jwt_payload):
        return _forbidden("Token has been revoked.")

    @jwt.user_lookup_error_loader
    def _unknown_user(_jwt_header, _jwt_payload):
        return _forbidden("User no longer exists.")
