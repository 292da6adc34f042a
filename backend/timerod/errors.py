from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException
from timerod.extensions import db


class TimeRODError(Exception):
    """Base class for business rule violations raised by the service layer."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(TimeRODError):
    """Referenced entity missing or inactive, or malformed input."""


class NotFoundError(TimeRODError):
    status_code = 404


class ForbiddenError(TimeRODError):
    status_code = 403


class ConflictError(TimeRODError):
    """
    Duplicate state transition (second clock in / clock out of the day) or a
    stale write. Carries the conflicting record so the client can reconcile
    without querying again.
    """

    def __init__(self, message, record=None):
        super().__init__(message)
        self.record = record

    def to_dict(self):
        payload = super().to_dict()
        payload["record"] = self.record.to_dict() if self.record is not None else None
        return payload


def register_error_handlers(app):
    @app.errorhandler(TimeRODError)
    def handle_business_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()

        detail = str(err) if current_app.config.get("EXPOSE_ERROR_DETAIL") else "See server logs"
        return jsonify({"error": "Unexpected server error", "detalle": detail}), 500
