from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request

from charity_api.utils.errors import ForbiddenError


def register_jwt_callbacks(jwt):
    """Render credential failures in the API envelope, with distinct messages."""

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return (
            jsonify({"success": False, "message": "Access denied. No token provided."}),
            401,
        )

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify({"success": False, "message": "Invalid token."}), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify({"success": False, "message": "Token has expired."}), 401


def current_claim() -> dict:
    """The verified {id, email, role} claim of the caller."""
    claims = get_jwt()
    return {
        "id": claims.get("id"),
        "email": claims.get("email"),
        "role": claims.get("role"),
    }


def require_role(role):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if current_claim()["role"] != role:
                raise ForbiddenError(
                    f"Access denied. {role.capitalize()} privileges required."
                )
            return fn(*args, **kwargs)

        return wrapper

    return deco
