"""Part model for the project part tracker."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db

if TYPE_CHECKING:
    from app.models.part_history import PartHistory


class PartStatus(str, Enum):
    """Workflow status of a tracked part."""

    RECEIVED = "Received"
    IN_WORK = "In Work"
    COMPLETED = "Completed"
    SENT_OUT = "Sent Out"


class Part(db.Model):  # type: ignore[name-defined]
    """Model representing one trackable inventory item.

    The ``id`` is chosen by the user at creation time and never changes.
    ``version`` is bumped on every write and guards lifecycle updates against
    lost updates.
    """

    __tablename__ = "parts"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    serial_number: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    project_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project_number: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[PartStatus] = mapped_column(
        SQLEnum(
            PartStatus,
            name="part_status",
            values_callable=lambda enum_cls: [item.value for item in enum_cls],
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=PartStatus.RECEIVED,
        server_default=PartStatus.RECEIVED.value,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_parts_quantity_non_negative"),
    )

    history: Mapped[list["PartHistory"]] = relationship(
        "PartHistory",
        back_populates="part",
        cascade="all, delete-orphan",
        order_by="PartHistory.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Part {self.id}: {self.name} qty={self.quantity} status={self.status.value if self.status else None}>"
