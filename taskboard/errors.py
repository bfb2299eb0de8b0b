"""Domain errors and the Flask handlers that turn them into JSON responses.

Every error body has the shape ``{"success": false, "error": <message>}``
with an optional ``details`` list of ``{param, message, location}`` entries.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class TaskboardError(Exception):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationError(TaskboardError):
    status_code = 400
    default_message = "Invalid input data"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.details = list(details or [])

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.details:
            body["details"] = self.details
        return body


class InvalidStateError(TaskboardError):
    """A write would break a record invariant (e.g. end time not after start time)."""

    status_code = 400
    default_message = "Invalid task state"


class AuthenticationError(TaskboardError):
    status_code = 401
    default_message = "Not authorized to access this route"


class NotFoundError(TaskboardError):
    status_code = 404
    default_message = "Not Found"


class ConflictError(TaskboardError):
    status_code = 409
    default_message = "Resource already exists"


class StorageError(TaskboardError):
    status_code = 500
    default_message = "A storage error occurred"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


def error_response(message: str, status_code: int, details=None):
    body = {"success": False, "error": message}
    if details:
        body["details"] = details
    return jsonify(body), status_code


def register_error_handlers(app):
    @app.errorhandler(TaskboardError)
    def handle_domain_error(exc: TaskboardError):
        body = exc.to_dict()
        if isinstance(exc, StorageError):
            app.logger.error("Storage failure: %s (%s)", exc.message, exc.detail)
            if current_app.config.get("EXPOSE_ERROR_DETAILS") and exc.detail:
                body["details"] = [{"param": "", "message": exc.detail, "location": "server"}]
        return jsonify(body), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        message = {404: "Not Found", 405: "Method Not Allowed"}.get(exc.code, exc.description)
        return error_response(message, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return error_response("Internal Server Error", 500)
