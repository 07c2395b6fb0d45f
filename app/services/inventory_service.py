"""Inventory service for part check-in, check-out and status updates."""

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from app.exceptions import ConcurrentModificationException
from app.models.part import Part, PartStatus
from app.services.base import BaseService
from app.services.metrics_service import MetricsServiceProtocol
from app.services.part_lifecycle import (
    PartFields,
    PartSnapshot,
    QuantityChangeType,
    apply_quantity_change,
    apply_status_change,
    create_part,
)
from app.services.part_service import PartService

logger = logging.getLogger(__name__)


class InventoryService(BaseService):
    """Service class running lifecycle operations against the part store.

    Each operation reads the current part, hands it to the lifecycle engine
    and writes the result back with a version check. When another request
    wrote the part in between, the row is re-read and the operation is
    re-applied, up to ``max_attempts`` times.
    """

    def __init__(
        self,
        db: Session,
        part_service: PartService,
        metrics_service: MetricsServiceProtocol,
        max_attempts: int = 3,
    ):
        """Initialize service with database session and dependencies.

        Args:
            db: SQLAlchemy database session
            part_service: Instance of PartService
            metrics_service: Instance of MetricsService for recording metrics
            max_attempts: Attempts before a version conflict is reported
        """
        super().__init__(db)
        self.part_service = part_service
        self.metrics_service = metrics_service
        self.max_attempts = max_attempts

    def add_part(
        self,
        fields: PartFields,
        initial_quantity: object,
        acting_user: str | None = None,
    ) -> Part:
        """Create a part seeded with its initial-add history entry."""
        snapshot = create_part(fields, initial_quantity, acting_user)
        part = self.part_service.create_part(snapshot)

        self.metrics_service.record_part_created()
        if snapshot.quantity:
            self.metrics_service.record_quantity_change("initial-add", snapshot.quantity)
        return part

    def check_in_out(
        self,
        part_id: str,
        change_type: QuantityChangeType | str,
        change: object,
        acting_user: str | None = None,
        expected_quantity: int | None = None,
    ) -> Part:
        """Check stock in or out of a part.

        ``expected_quantity`` is the quantity the caller believes the part
        will have afterwards. When given and not matching, nothing is written.
        """

        def mutate(snapshot: PartSnapshot) -> PartSnapshot:
            updated = apply_quantity_change(snapshot, change_type, change, acting_user)
            if expected_quantity is not None and updated.quantity != expected_quantity:
                raise ConcurrentModificationException(
                    part_id,
                    f"the resulting quantity would be {updated.quantity}, not {expected_quantity}",
                )
            return updated

        part, before, after = self._apply(part_id, "check-in-out", mutate)

        entry = after.history[-1]
        self.metrics_service.record_quantity_change(entry.type.value, entry.change or 0)
        logger.info(
            "%s of %d on part %s by %s (quantity %d -> %d)",
            entry.type.value, entry.change, part_id, entry.user, before.quantity, after.quantity,
        )
        return part

    def update_status(
        self,
        part_id: str,
        new_status: PartStatus | str | None,
        acting_user: str | None = None,
    ) -> Part:
        """Move a part to a different status."""
        part, before, after = self._apply(
            part_id,
            "status-update",
            lambda snapshot: apply_status_change(snapshot, new_status, acting_user),
        )

        self.metrics_service.record_status_change(before.status.value, after.status.value)
        logger.info(
            "Status of part %s changed from %s to %s by %s",
            part_id, before.status.value, after.status.value, after.history[-1].user,
        )
        return part

    def _apply(
        self,
        part_id: str,
        operation: str,
        mutate: Callable[[PartSnapshot], PartSnapshot],
    ) -> tuple[Part, PartSnapshot, PartSnapshot]:
        """Read, transform and compare-and-swap a part, retrying on conflict."""
        for attempt in range(1, self.max_attempts + 1):
            part = self.part_service.get_part(part_id)
            before = self.part_service.to_snapshot(part)
            after = mutate(before)

            if self.part_service.save_snapshot(part, before, after):
                return part, before, after

            self.metrics_service.record_version_conflict(operation)
            logger.warning(
                "Part %s changed during %s (attempt %d of %d)",
                part_id, operation, attempt, self.max_attempts,
            )
            self.part_service.refresh(part)

        raise ConcurrentModificationException(
            part_id, f"it kept changing during {self.max_attempts} attempts"
        )
