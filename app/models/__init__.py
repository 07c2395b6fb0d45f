"""SQLAlchemy models for the project part tracker."""

# Import all models here for Alembic auto-generation
from app.models.part import Part, PartStatus
from app.models.part_history import HistoryType, PartHistory

__all__: list[str] = [
    "HistoryType",
    "Part",
    "PartHistory",
    "PartStatus",
]
