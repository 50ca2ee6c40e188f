from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None, code=None, details=None, extra=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code
        self.details = details
        self.extra = extra or {}

    def to_dict(self):
        body = {"error": self.message}
        if self.code:
            body["code"] = self.code
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationFailed(ApiError):
    status_code = 400

    def __init__(self, details, message="Validation failed"):
        super().__init__(message, details=details)


class Conflict(ApiError):
    status_code = 409


class ServiceUnavailable(ApiError):
    status_code = 503


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        db.session.rollback()
        current_app.logger.exception("Unhandled error: %s", err)
        return jsonify({"error": "Internal server error"}), 500
