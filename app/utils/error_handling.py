"""Centralized error handling utilities."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from flask import current_app, jsonify
from flask.wrappers import Response
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest

from app.exceptions import (
    BusinessLogicException,
    ConcurrentModificationException,
    InsufficientQuantityException,
    InvalidInputException,
    InvalidOperationException,
    MissingRequiredFieldException,
    NoOpRejectedException,
    RecordNotFoundException,
    ResourceConflictException,
    StoreUnavailableException,
)
from app.utils import get_current_correlation_id

logger = logging.getLogger(__name__)


def _mark_request_failed() -> None:
    """Flag the request session so teardown rolls back instead of committing."""
    container = getattr(current_app, "container", None)
    if container is None:
        return
    try:
        db_session = container.db_session()
        db_session.info['needs_rollback'] = True
    except Exception as e:
        logger.error(f"Failed to mark session for rollback: {e}")


def _business_error(e: BusinessLogicException, message: str, status_code: int) -> tuple[Response, int]:
    return jsonify({
        "error": e.message,
        "code": e.error_code,
        "details": {"message": message}
    }), status_code


def handle_api_errors(func: Callable[..., Any]) -> Callable[..., Response | tuple[Response | str, int]]:
    """Decorator to handle common API errors consistently.

    Handles ValidationError, domain exceptions, IntegrityError, and generic
    exceptions with appropriate HTTP status codes and error messages. Any
    handled error marks the request session for rollback.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            _mark_request_failed()
            return _error_response(e)

    return wrapper


def _error_response(e: Exception) -> tuple[Response, int]:
    if isinstance(e, BadRequest):
        # JSON parsing errors from request.get_json()
        return jsonify({
            "error": "Invalid JSON",
            "details": {"message": "Request body must be valid JSON"}
        }), 400

    if isinstance(e, ValidationError):
        # Pydantic validation errors
        error_details = []
        for error in e.errors():
            field = ".".join(str(x) for x in error["loc"])
            error_details.append({
                "message": error["msg"],
                "field": field
            })

        return jsonify({
            "error": "Validation failed",
            "details": error_details
        }), 400

    if isinstance(e, (InvalidInputException, MissingRequiredFieldException)):
        return _business_error(e, "The request contains invalid or missing values", 400)

    if isinstance(e, RecordNotFoundException):
        return _business_error(e, "The requested resource could not be found", 404)

    if isinstance(e, ResourceConflictException):
        return _business_error(e, "A resource with those details already exists", 409)

    if isinstance(e, InsufficientQuantityException):
        return _business_error(e, "The requested quantity is not available", 409)

    if isinstance(e, NoOpRejectedException):
        return _business_error(e, "The requested change would not modify the part", 409)

    if isinstance(e, ConcurrentModificationException):
        return _business_error(e, "Reload the part and try again", 409)

    if isinstance(e, InvalidOperationException):
        return _business_error(e, "The requested operation cannot be performed", 409)

    if isinstance(e, StoreUnavailableException):
        return _business_error(e, "The part store could not be reached", 503)

    if isinstance(e, BusinessLogicException):
        # Generic business exception (fallback for custom exceptions)
        return _business_error(e, "A part operation failed", 400)

    if isinstance(e, IntegrityError):
        # Database constraint violations
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)

        # Map common constraint violations to user-friendly messages
        if "UNIQUE constraint failed" in error_msg or "duplicate key" in error_msg.lower():
            return jsonify({
                "error": "Resource already exists",
                "details": {"message": "A record with these values already exists"}
            }), 409
        elif "CHECK constraint failed" in error_msg or "check constraint" in error_msg.lower():
            return jsonify({
                "error": "Invalid value",
                "details": {"message": "A value violates a database constraint"}
            }), 400
        else:
            return jsonify({
                "error": "Database constraint violation",
                "details": {"message": "The operation violates a database constraint"}
            }), 400

    # Generic error handler
    logger.exception(f"Unhandled error in API handler (request id {get_current_correlation_id()})")
    return jsonify({
        "error": "Internal server error",
        "details": {"message": str(e)}
    }), 500
