"""Flask application subclass carrying the service container."""

from typing import TYPE_CHECKING

from flask import Flask

if TYPE_CHECKING:
    from app.services.container import ServiceContainer


class App(Flask):
    """Flask application with a typed reference to the DI container."""

    container: "ServiceContainer"
