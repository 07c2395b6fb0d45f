"""Part history model: the append-only audit trail of part mutations."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db
from app.models.part import PartStatus

if TYPE_CHECKING:
    from app.models.part import Part


class HistoryType(str, Enum):
    """Kind of mutation recorded by a history entry."""

    INITIAL_ADD = "initial-add"
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    STATUS_UPDATE = "status-update"


def _status_enum(name: str) -> SQLEnum:
    return SQLEnum(
        PartStatus,
        name=name,
        values_callable=lambda enum_cls: [item.value for item in enum_cls],
        native_enum=False,
        length=20,
    )


class PartHistory(db.Model):  # type: ignore[name-defined]
    """Model representing one immutable audit record of a part mutation."""

    __tablename__ = "part_history"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    part_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("parts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[HistoryType] = mapped_column(
        SQLEnum(
            HistoryType,
            name="history_type",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
            native_enum=False,
            length=20,
        ),
        nullable=False,
    )
    change: Mapped[int | None] = mapped_column(nullable=True)
    old_status: Mapped[PartStatus | None] = mapped_column(
        _status_enum("history_old_status"), nullable=True
    )
    new_status: Mapped[PartStatus | None] = mapped_column(
        _status_enum("history_new_status"), nullable=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    user: Mapped[str] = mapped_column(String(255), nullable=False, default="Anonymous")

    part: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", back_populates="history"
    )

    def __repr__(self) -> str:
        if self.type == HistoryType.STATUS_UPDATE:
            detail = f"{self.old_status} -> {self.new_status}"
        else:
            detail = f"{self.change:+d}" if self.change is not None else ""
        return f"<PartHistory {self.part_id}: {self.type.value} {detail} @ {self.timestamp}>"
