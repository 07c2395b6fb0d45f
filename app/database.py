"""Database connection and session management."""

import re
from pathlib import Path

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.engine import Engine

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from app.extensions import db


def get_engine() -> Engine:
    """Get SQLAlchemy engine from current Flask app."""
    return db.engine


def init_db() -> None:
    """Initialize database tables.

    Only creates tables if they don't exist. Safe to call multiple times.
    """
    # Import all models to ensure they're registered with SQLAlchemy
    import app.models  # noqa: F401

    # Create all tables (only if they don't exist)
    db.create_all()


def check_db_connection() -> bool:
    """Check if database connection is working."""
    try:
        # Use Flask-SQLAlchemy's session for the health check
        result = db.session.execute(text("SELECT 1"))
        return result.scalar() == 1
    except Exception:
        return False
    finally:
        db.session.remove()


def _get_alembic_config() -> Config:
    """Get Alembic configuration bound to the current Flask engine URL."""
    # Assume alembic.ini is in the project root (parent of app/)
    alembic_cfg_path = Path(__file__).parent.parent / "alembic.ini"

    config = Config(str(alembic_cfg_path))
    config.set_main_option(
        "script_location", str(Path(__file__).parent.parent / "alembic")
    )
    config.set_main_option(
        "sqlalchemy.url", db.engine.url.render_as_string(hide_password=False).replace("%", "%%")
    )

    return config


def get_current_revision() -> str | None:
    """Get current database revision from Alembic version table."""
    try:
        inspector = inspect(db.engine)
        if "alembic_version" not in inspector.get_table_names():
            return None

        with db.engine.connect() as connection:
            result = connection.execute(text("SELECT version_num FROM alembic_version"))
            row = result.fetchone()
            return row[0] if row else None

    except Exception:
        return None


def get_pending_migrations() -> list[str]:
    """Get list of pending migration revisions in chronological order."""
    try:
        config = _get_alembic_config()
        script = ScriptDirectory.from_config(config)

        current_rev = get_current_revision()
        head_rev = script.get_current_head()

        if not head_rev or current_rev == head_rev:
            return []

        revisions = []
        for rev in script.walk_revisions(base=current_rev or "base", head=head_rev):
            if rev.revision != current_rev:  # Don't include current
                revisions.append(rev.revision)

        revisions.reverse()  # Want chronological order
        return revisions

    except Exception:
        return []


def drop_all_tables() -> None:
    """Drop all tables including Alembic version table."""
    # Use reflection to get all table names
    metadata = MetaData()
    metadata.reflect(bind=db.engine)

    # Drop all tables
    metadata.drop_all(bind=db.engine)


def _get_migration_info(script_dir: ScriptDirectory, revision: str) -> tuple[str, str]:
    """Extract migration info from revision file."""
    try:
        rev_obj = script_dir.get_revision(revision)
        if not rev_obj or not rev_obj.path:
            return revision, "Unknown migration"

        # Read the migration file to get description from docstring
        migration_file = Path(rev_obj.path)
        if not migration_file.exists():
            return revision, "Migration file not found"

        content = migration_file.read_text()

        # Extract description from docstring (first line after triple quotes)
        docstring_match = re.search(r'"""([^\n"]+)', content)
        if docstring_match:
            description = docstring_match.group(1).strip()
            return revision[:7], description  # Short revision + description

        return revision[:7], "Migration"

    except Exception:
        return revision[:7], "Migration"


def upgrade_database(recreate: bool = False) -> list[tuple[str, str]]:
    """Upgrade database with progress reporting.

    Args:
        recreate: If True, drop all tables first

    Returns:
        List of (revision, description) tuples for applied migrations
    """
    config = _get_alembic_config()
    script = ScriptDirectory.from_config(config)
    applied_migrations: list[tuple[str, str]] = []

    if recreate:
        print("🗑️  Dropping all tables...")
        drop_all_tables()
        print("✅ All tables dropped")

    # Get list of migrations to apply
    pending = get_pending_migrations()

    # Apply migrations one by one with progress reporting
    for revision in pending:
        rev_short, description = _get_migration_info(script, revision)
        print(f"⚡ Applying schema {rev_short} - {description}")

        try:
            with db.engine.begin() as connection:
                config.attributes["connection"] = connection
                command.upgrade(config, revision)
            applied_migrations.append((rev_short, description))

        except Exception as e:
            print(f"❌ Failed to apply migration {rev_short}: {e}", flush=True)
            raise

    return applied_migrations
