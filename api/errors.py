from flask import jsonify, current_app, request
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """A store error interrupted a write; the transaction was rolled back.

    The message is safe to show to callers. The underlying database error
    is kept as ``__cause__`` and only ever logged.
    """

    def __init__(self, message: str = "The record could not be saved. Please try again later."):
        super().__init__(message)
        self.message = message


def error_response(error: str, message: str, status: int, details: dict | None = None, input_data=None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    if input_data is not None:
        payload["input"] = input_data
    return jsonify(payload), status


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        message = getattr(e, "description", "Bad request")
        return error_response("BAD_REQUEST", message, 400)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # 405 Method Not Allowed
    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("METHOD_NOT_ALLOWED", "Method not allowed", 405)

    # Marshmallow validation errors map to 422; the submitted input is echoed back
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logger.debug("Validation failed on %s %s: %s", request.method, request.path, err.messages)
        return error_response(
            "VALIDATION_ERROR",
            "Invalid input",
            422,
            details=err.messages,
            input_data=request.get_json(silent=True) or {},
        )

    # Rolled-back writes: full context was logged where the error happened
    @app.errorhandler(PersistenceError)
    def handle_persistence_error(err: PersistenceError):
        return error_response("PERSISTENCE_ERROR", err.message, 500)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logger.warning("Integrity error on %s %s: %s", request.method, request.path, message)
        details = {"db_error": message} if current_app.debug else None
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409, details=details)
        if "foreign key constraint" in lower_msg or "foreign key mismatch" in lower_msg:
            return error_response("BAD_REQUEST", "Foreign key constraint failed.", 400, details=details)
        return error_response("BAD_REQUEST", "Integrity error.", 400, details=details)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.name.upper().replace(" ", "_"), err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
