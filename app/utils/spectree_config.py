"""
Spectree configuration with Pydantic v2 compatibility.
"""
from flask import Flask
from spectree import SpecTree

# Global Spectree instance that can be imported by API modules
# This will be initialized by configure_spectree() before any imports of the API modules
api: SpecTree = None  # type: ignore


def configure_spectree(app: Flask) -> SpecTree:
    """
    Configure Spectree for request validation and OpenAPI generation.

    Returns:
        SpecTree: Configured Spectree instance
    """
    global api

    # Create Spectree instance with Flask backend
    api = SpecTree(
        backend_name="flask",
        app=app,
        title="Project Part Tracker API",
        version="1.0.0",
        description="Check-in/check-out and status tracking for project parts",
        path="docs",  # OpenAPI docs available at /docs
        validation_error_status=400,
    )

    return api
