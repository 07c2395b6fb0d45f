"""Flask application error handlers.

These catch errors raised outside ``handle_api_errors``, such as unknown
routes, wrong HTTP methods and failures in request hooks.
"""

import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register Flask error handlers for common exceptions."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        """Handle Pydantic validation errors."""
        error_details = []
        for err in error.errors():
            field = ".".join(str(x) for x in err["loc"])
            error_details.append({"message": err["msg"], "field": field})

        return jsonify({
            "error": "Validation failed",
            "details": error_details
        }), 400

    @app.errorhandler(OperationalError)
    def handle_operational_error(error: OperationalError):
        """Handle an unreachable part store."""
        logger.error(f"Database error outside API handler: {error}")
        return jsonify({
            "error": "Part store is unavailable",
            "code": "STORE_UNAVAILABLE",
            "details": {"message": "The part store could not be reached"}
        }), 503

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle 404 Not Found errors."""
        return jsonify({
            "error": "Resource not found",
            "details": {"message": "The requested resource could not be found"}
        }), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        """Handle 405 Method Not Allowed errors."""
        return jsonify({
            "error": "Method not allowed",
            "details": {"message": "The HTTP method is not allowed for this endpoint"}
        }), 405

    @app.errorhandler(500)
    def handle_internal_server_error(error):
        """Handle 500 Internal Server Error."""
        return jsonify({
            "error": "Internal server error",
            "details": {"message": "An unexpected error occurred"}
        }), 500
