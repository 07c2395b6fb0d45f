"""Part service: the record store for parts and their history."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace

from sqlalchemy import String, cast, func, or_, select, update
from sqlalchemy.exc import OperationalError

from app.exceptions import (
    ConcurrentModificationException,
    InvalidOperationException,
    MissingRequiredFieldException,
    RecordNotFoundException,
    ResourceConflictException,
    StoreUnavailableException,
)
from app.models.part import Part, PartStatus
from app.models.part_history import PartHistory
from app.services.base import BaseService
from app.services.part_lifecycle import (
    HistoryEntry,
    PartFields,
    PartSnapshot,
    apply_status_change,
)

logger = logging.getLogger(__name__)


class PartService(BaseService):
    """Service class for part storage operations."""

    @contextmanager
    def store_access(self, action: str) -> Iterator[None]:
        """Translate connectivity failures into StoreUnavailableException."""
        try:
            yield
        except OperationalError as e:
            logger.error("Part store failure while %s: %s", action, e)
            cause = str(e.orig) if e.orig is not None else str(e)
            raise StoreUnavailableException(cause) from e

    def list_parts(self, search: str | None = None) -> list[Part]:
        """List all parts ordered by ID, optionally filtered by a search term.

        The search term is matched case-insensitively against the name,
        serial number, project name, project number and status.
        """
        stmt = select(Part).order_by(Part.id)

        term = search.strip() if search else ""
        if term:
            stmt = stmt.where(
                or_(
                    Part.name.icontains(term, autoescape=True),
                    Part.serial_number.icontains(term, autoescape=True),
                    Part.project_name.icontains(term, autoescape=True),
                    Part.project_number.icontains(term, autoescape=True),
                    cast(Part.status, String).icontains(term, autoescape=True),
                )
            )

        with self.store_access("listing parts"):
            return list(self.db.execute(stmt).scalars().all())

    def find_part(self, part_id: str) -> Part | None:
        with self.store_access(f"reading part {part_id}"):
            return self.db.get(Part, part_id)

    def get_part(self, part_id: str) -> Part:
        """Get part by ID."""
        part = self.find_part(part_id)
        if not part:
            raise RecordNotFoundException("Part", part_id)
        return part

    def get_history(self, part_id: str) -> list[PartHistory]:
        """Get the audit trail of a part in chronological order."""
        part = self.get_part(part_id)
        return list(part.history)

    def get_inventory_stats(self) -> dict:
        """Aggregate part counts and quantities for the metrics endpoint."""
        with self.store_access("aggregating inventory stats"):
            total_parts, total_quantity = self.db.execute(
                select(func.count(Part.id), func.coalesce(func.sum(Part.quantity), 0))
            ).one()
            by_status = dict(
                self.db.execute(
                    select(Part.status, func.count(Part.id)).group_by(Part.status)
                ).all()
            )

        return {
            "total_parts": total_parts,
            "total_quantity": total_quantity,
            "parts_by_status": {
                status.value: by_status.get(status, 0) for status in PartStatus
            },
        }

    def create_part(self, snapshot: PartSnapshot) -> Part:
        """Persist a freshly created part snapshot."""
        if self.find_part(snapshot.id) is not None:
            raise ResourceConflictException("Part", snapshot.id)

        part = Part(
            id=snapshot.id,
            name=snapshot.name,
            location=snapshot.location,
            serial_number=snapshot.serial_number,
            project_name=snapshot.project_name,
            project_number=snapshot.project_number,
            description=snapshot.description,
            quantity=snapshot.quantity,
            status=snapshot.status,
            version=1,
        )
        part.history = [self._history_row(snapshot.id, entry) for entry in snapshot.history]

        with self.store_access(f"creating part {snapshot.id}"):
            self.db.add(part)
            self.db.flush()

        logger.info("Created part %s with quantity %d", part.id, part.quantity)
        return part

    def replace_part(
        self,
        part_id: str,
        fields: PartFields,
        quantity: int | None = None,
        expected_version: int | None = None,
        acting_user: str | None = None,
    ) -> Part:
        """Replace the descriptive attributes of a part.

        Quantity may only be echoed back unchanged; stock moves go through
        check-in and check-out. A changed status is applied through the
        lifecycle engine so it is audited like any other status update.
        """
        part = self.get_part(part_id)

        if expected_version is not None and expected_version != part.version:
            raise ConcurrentModificationException(
                part_id, f"version {expected_version} is stale (current version is {part.version})"
            )
        if quantity is not None and quantity != part.quantity:
            raise InvalidOperationException(
                f"change the quantity of part {part_id} with an update",
                "quantity changes must be recorded through check-in or check-out",
            )

        name = fields.name.strip() if fields.name else ""
        if not name:
            raise MissingRequiredFieldException(["name"])

        before = self.to_snapshot(part)
        after = replace(
            before,
            name=name,
            location=fields.location,
            serial_number=fields.serial_number,
            project_name=fields.project_name,
            project_number=fields.project_number,
            description=fields.description,
        )
        if fields.status and fields.status != before.status:
            after = apply_status_change(after, fields.status, acting_user)

        if not self.save_snapshot(part, before, after):
            raise ConcurrentModificationException(part_id)
        return part

    def delete_part(self, part_id: str) -> None:
        """Delete a part together with its history."""
        part = self.get_part(part_id)
        with self.store_access(f"deleting part {part_id}"):
            self.db.delete(part)
            self.db.flush()
        logger.info("Deleted part %s", part_id)

    def save_snapshot(self, part: Part, before: PartSnapshot, after: PartSnapshot) -> bool:
        """Write ``after`` over ``part`` if the stored row still matches ``before``.

        The row update and the new history entries are written in the same
        transaction. Returns False without writing anything when another
        request bumped the version since ``before`` was read.
        """
        if after.history[:len(before.history)] != before.history:
            raise InvalidOperationException(f"save part {part.id}", "history entries cannot be altered")

        stmt = (
            update(Part)
            .where(Part.id == before.id, Part.version == before.version)
            .values(
                name=after.name,
                location=after.location,
                serial_number=after.serial_number,
                project_name=after.project_name,
                project_number=after.project_number,
                description=after.description,
                quantity=after.quantity,
                status=after.status,
                version=Part.version + 1,
            )
            .execution_options(synchronize_session=False)
        )

        with self.store_access(f"saving part {part.id}"):
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                logger.warning("Version conflict saving part %s at version %d", part.id, before.version)
                return False

            for entry in after.history[len(before.history):]:
                self.db.add(self._history_row(part.id, entry))
            self.db.flush()

        self.db.expire(part)
        return True

    def refresh(self, part: Part) -> None:
        """Drop cached state so the next access re-reads the row."""
        self.db.expire(part)

    @staticmethod
    def to_snapshot(part: Part) -> PartSnapshot:
        """Convert a stored part into an engine snapshot."""
        return PartSnapshot(
            id=part.id,
            name=part.name,
            quantity=part.quantity,
            status=PartStatus(part.status),
            history=tuple(
                HistoryEntry(
                    type=row.type,
                    timestamp=row.timestamp,
                    user=row.user,
                    change=row.change,
                    old_status=row.old_status,
                    new_status=row.new_status,
                )
                for row in part.history
            ),
            location=part.location,
            serial_number=part.serial_number,
            project_name=part.project_name,
            project_number=part.project_number,
            description=part.description,
            version=part.version,
        )

    @staticmethod
    def _history_row(part_id: str, entry: HistoryEntry) -> PartHistory:
        return PartHistory(
            part_id=part_id,
            type=entry.type,
            change=entry.change,
            old_status=entry.old_status,
            new_status=entry.new_status,
            timestamp=entry.timestamp,
            user=entry.user,
        )
