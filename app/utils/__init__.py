"""Utility modules for the project part tracker."""

from flask import current_app, g
from flask_log_request_id import current_request_id
from flask_log_request_id.ctx_fetcher import ExecutedOutsideContext
from flask_log_request_id.request_id import flask_ctx_get_request_id


def _g_request_id_fetcher() -> str | None:
    """Fallback fetcher compatible with Flask 3.x application contexts."""
    try:
        attr_name = current_app.config.get("LOG_REQUEST_ID_G_OBJECT_ATTRIBUTE", "log_request_id")
        return getattr(g, attr_name, None)
    except RuntimeError as exc:
        raise ExecutedOutsideContext() from exc


current_request_id.register_fetcher(_g_request_id_fetcher)

try:
    current_request_id.ctx_fetchers.remove(flask_ctx_get_request_id)
except ValueError:
    pass


def get_current_correlation_id() -> str | None:
    """Get correlation ID from current request context if available."""
    try:
        return current_request_id()
    except (RuntimeError, ImportError, ExecutedOutsideContext):
        # No request context available or Flask compatibility issue
        return None
