"""Flask extensions initialization."""

from flask_sqlalchemy import SQLAlchemy

# Initialize extensions; the per-request session factory is built in create_app
db = SQLAlchemy()
