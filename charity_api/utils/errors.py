"""
Error taxonomy for the API and the Flask handlers that render it.

Every error response uses the same envelope: {"success": false, "message": ...}.
"""

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None, extra=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}

    def to_dict(self):
        return {"success": False, "message": self.message, **self.extra}


class ValidationError(ApiError):
    status_code = 400


class InvalidCredentialsError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class DuplicateEmailError(ApiError):
    status_code = 409


class ConflictError(ApiError):
    status_code = 409


class PaymentNotCompletedError(ApiError):
    status_code = 400


class PaymentSetupError(ApiError):
    status_code = 502


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        message = "Route not found." if e.code == 404 else e.description
        return jsonify({"success": False, "message": message}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        current_app.logger.exception("Unhandled error: %s", e)
        return jsonify({"success": False, "message": "Internal server error."}), 500
