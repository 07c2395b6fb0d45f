"""Part lifecycle engine.

Pure transformation rules for parts: creating a part, checking quantity in
and out, and moving it between statuses. Every function takes the current
snapshot and returns a new one; the input is never modified and nothing is
returned when validation fails, so a rejected request leaves no partial
state behind. Persistence is the caller's job.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from app.exceptions import (
    InsufficientQuantityException,
    InvalidInputException,
    MissingRequiredFieldException,
    NoOpRejectedException,
)
from app.models.part import PartStatus
from app.models.part_history import HistoryType

ANONYMOUS_USER = "Anonymous"

Clock = Callable[[], datetime]

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Largest value the 32-bit quantity and change columns can hold
MAX_QUANTITY = 2**31 - 1


class QuantityChangeType(str, Enum):
    """Quantity-affecting operations."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable audit record of a single mutation."""

    type: HistoryType
    timestamp: datetime
    user: str = ANONYMOUS_USER
    change: int | None = None
    old_status: PartStatus | None = None
    new_status: PartStatus | None = None


@dataclass(frozen=True)
class PartFields:
    """Descriptive attributes supplied when a part is created."""

    id: str | None
    name: str | None
    location: str | None = None
    serial_number: str | None = None
    project_name: str | None = None
    project_number: str | None = None
    description: str | None = None
    status: PartStatus | str | None = None


@dataclass(frozen=True)
class PartSnapshot:
    """Point-in-time view of a part as seen by the engine."""

    id: str
    name: str
    quantity: int
    status: PartStatus
    history: tuple[HistoryEntry, ...] = field(default_factory=tuple)
    location: str | None = None
    serial_number: str | None = None
    project_name: str | None = None
    project_number: str | None = None
    description: str | None = None
    version: int = 1


def parse_quantity(value: Any, allow_zero: bool = False) -> int:
    """Parse a quantity into an int.

    Accepts ints, integral floats and base-10 digit strings. Booleans are
    rejected even though they are ints.
    """
    amount: int | None = None
    if isinstance(value, bool):
        amount = None
    elif isinstance(value, int):
        amount = value
    elif isinstance(value, float) and value.is_integer():
        amount = int(value)
    elif isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        amount = int(value.strip())

    if amount is None or amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidInputException("Please enter a valid positive number for quantity.")
    if amount > MAX_QUANTITY:
        raise InvalidInputException(f"Quantity cannot exceed {MAX_QUANTITY}.")
    return amount


def parse_status(value: PartStatus | str) -> PartStatus:
    """Resolve a status value, rejecting anything outside the four known states."""
    if isinstance(value, PartStatus):
        return value
    try:
        return PartStatus(value)
    except ValueError as e:
        allowed = ", ".join(status.value for status in PartStatus)
        raise InvalidInputException(f"Unknown status '{value}'. Allowed values: {allowed}") from e


def _acting_user(acting_user: str | None) -> str:
    return acting_user or ANONYMOUS_USER


def create_part(
    fields: PartFields,
    initial_quantity: Any,
    acting_user: str | None = None,
    now: Clock = utc_now,
) -> PartSnapshot:
    """Build a new part seeded with a single ``initial-add`` history entry."""
    part_id = fields.id.strip() if fields.id else ""
    name = fields.name.strip() if fields.name else ""

    missing = []
    if not part_id:
        missing.append("id")
    if not name:
        missing.append("name")
    if initial_quantity is None or initial_quantity == "":
        missing.append("quantity")
    if missing:
        raise MissingRequiredFieldException(missing, "ID, Name, and Quantity are required.")

    quantity = parse_quantity(initial_quantity, allow_zero=True)
    status = parse_status(fields.status) if fields.status else PartStatus.RECEIVED

    entry = HistoryEntry(
        type=HistoryType.INITIAL_ADD,
        change=quantity,
        timestamp=now(),
        user=_acting_user(acting_user),
    )
    return PartSnapshot(
        id=part_id,
        name=name,
        quantity=quantity,
        status=status,
        history=(entry,),
        location=fields.location,
        serial_number=fields.serial_number,
        project_name=fields.project_name,
        project_number=fields.project_number,
        description=fields.description,
    )


def apply_quantity_change(
    part: PartSnapshot,
    change_type: QuantityChangeType | str,
    change_amount: Any,
    acting_user: str | None = None,
    now: Clock = utc_now,
) -> PartSnapshot:
    """Check quantity in or out and record the change."""
    try:
        change_type = QuantityChangeType(change_type)
    except ValueError as e:
        raise InvalidInputException(
            f"Unknown change type '{change_type}'. Use 'check-in' or 'check-out'."
        ) from e

    amount = parse_quantity(change_amount)

    if change_type == QuantityChangeType.CHECK_IN:
        new_quantity = part.quantity + amount
        if new_quantity > MAX_QUANTITY:
            raise InvalidInputException(
                f"Checking in {amount} would raise the quantity above {MAX_QUANTITY}."
            )
    else:
        if amount > part.quantity:
            raise InsufficientQuantityException(amount, part.quantity)
        new_quantity = part.quantity - amount

    entry = HistoryEntry(
        type=HistoryType(change_type.value),
        change=amount,
        timestamp=now(),
        user=_acting_user(acting_user),
    )
    return replace(part, quantity=new_quantity, history=part.history + (entry,))


def apply_status_change(
    part: PartSnapshot,
    new_status: PartStatus | str | None,
    acting_user: str | None = None,
    now: Clock = utc_now,
) -> PartSnapshot:
    """Move a part to another status. Staying in the same status is rejected."""
    if not new_status:
        raise NoOpRejectedException()

    status = parse_status(new_status)
    if status == part.status:
        raise NoOpRejectedException()

    entry = HistoryEntry(
        type=HistoryType.STATUS_UPDATE,
        old_status=part.status,
        new_status=status,
        timestamp=now(),
        user=_acting_user(acting_user),
    )
    return replace(part, status=status, history=part.history + (entry,))
