"""Tests for the part lifecycle rules."""

from dataclasses import replace

import pytest

from app.exceptions import (
    InsufficientQuantityException,
    InvalidInputException,
    MissingRequiredFieldException,
    NoOpRejectedException,
)
from app.models.part import PartStatus
from app.models.part_history import HistoryType
from app.services.part_lifecycle import (
    ANONYMOUS_USER,
    MAX_QUANTITY,
    PartFields,
    PartSnapshot,
    QuantityChangeType,
    apply_quantity_change,
    apply_status_change,
    create_part,
    parse_quantity,
)


def _part(quantity: int = 10, status: PartStatus = PartStatus.RECEIVED) -> PartSnapshot:
    return PartSnapshot(id="P1", name="Pump housing", quantity=quantity, status=status)


class TestParseQuantity:
    """Test cases for quantity parsing."""

    @pytest.mark.parametrize("value,expected", [(3, 3), ("7", 7), (" 12 ", 12), (4.0, 4)])
    def test_accepts_positive_integers(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "-5", "abc", "2.5", 2.5, None, True, ""])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(InvalidInputException, match="Please enter a valid positive number for quantity."):
            parse_quantity(value)

    def test_zero_allowed_when_requested(self):
        assert parse_quantity(0, allow_zero=True) == 0
        assert parse_quantity("0", allow_zero=True) == 0

    @pytest.mark.parametrize("value", [MAX_QUANTITY + 1, str(10**20), 10**20])
    def test_rejects_values_above_column_limit(self, value):
        with pytest.raises(InvalidInputException, match=f"Quantity cannot exceed {MAX_QUANTITY}."):
            parse_quantity(value)

    def test_accepts_column_limit(self):
        assert parse_quantity(MAX_QUANTITY) == MAX_QUANTITY


class TestCreatePart:
    """Test cases for creating parts."""

    def test_create_part_seeds_initial_add(self, clock):
        """Creating a part with quantity 5 records exactly one initial-add entry."""
        part = create_part(PartFields(id="P1", name="Pump housing"), 5, "alice", now=clock)

        assert part.quantity == 5
        assert part.status == PartStatus.RECEIVED
        assert len(part.history) == 1
        entry = part.history[0]
        assert entry.type == HistoryType.INITIAL_ADD
        assert entry.change == 5
        assert entry.user == "alice"
        assert entry.timestamp.year == 2024

    def test_create_part_with_zero_quantity(self):
        part = create_part(PartFields(id="P1", name="Gasket"), 0)

        assert part.quantity == 0
        assert part.history[0].change == 0
        assert part.history[0].user == ANONYMOUS_USER

    def test_create_part_keeps_descriptive_fields(self):
        fields = PartFields(
            id=" P-7 ",
            name=" Valve ",
            location="Shelf A",
            serial_number="SN-1",
            project_name="Refit",
            project_number="PRJ-9",
            description="Brass",
            status="In Work",
        )
        part = create_part(fields, "3")

        assert part.id == "P-7"
        assert part.name == "Valve"
        assert part.location == "Shelf A"
        assert part.serial_number == "SN-1"
        assert part.project_name == "Refit"
        assert part.project_number == "PRJ-9"
        assert part.description == "Brass"
        assert part.status == PartStatus.IN_WORK
        assert part.quantity == 3

    @pytest.mark.parametrize("fields,quantity", [
        (PartFields(id=None, name="Valve"), 1),
        (PartFields(id="P1", name=""), 1),
        (PartFields(id="P1", name="Valve"), None),
        (PartFields(id="  ", name="Valve"), 1),
    ])
    def test_create_part_requires_id_name_quantity(self, fields, quantity):
        with pytest.raises(MissingRequiredFieldException, match="ID, Name, and Quantity are required."):
            create_part(fields, quantity)

    def test_create_part_rejects_negative_quantity(self):
        with pytest.raises(InvalidInputException):
            create_part(PartFields(id="P1", name="Valve"), -2)

    def test_create_part_rejects_unknown_status(self):
        with pytest.raises(InvalidInputException, match="Unknown status 'Lost'"):
            create_part(PartFields(id="P1", name="Valve", status="Lost"), 1)


class TestApplyQuantityChange:
    """Test cases for check-in and check-out."""

    @pytest.mark.parametrize("quantity,amount", [(10, 1), (10, 10), (3, 2)])
    def test_check_out_within_stock(self, quantity, amount, clock):
        part = _part(quantity)

        updated = apply_quantity_change(part, "check-out", amount, "bob", now=clock)

        assert updated.quantity == quantity - amount
        assert len(updated.history) == len(part.history) + 1
        entry = updated.history[-1]
        assert entry.type == HistoryType.CHECK_OUT
        assert entry.change == amount
        assert entry.user == "bob"

    @pytest.mark.parametrize("quantity,amount", [(0, 1), (5, 6), (10, 100)])
    def test_check_out_more_than_available(self, quantity, amount):
        part = _part(quantity)

        with pytest.raises(InsufficientQuantityException, match="Cannot check out more parts than available"):
            apply_quantity_change(part, QuantityChangeType.CHECK_OUT, amount)

        assert part.quantity == quantity
        assert part.history == ()

    @pytest.mark.parametrize("quantity,amount", [(0, 1), (10, 5), (7, 1000)])
    def test_check_in_adds_stock(self, quantity, amount):
        part = _part(quantity)

        updated = apply_quantity_change(part, QuantityChangeType.CHECK_IN, amount)

        assert updated.quantity == quantity + amount
        assert len(updated.history) == 1
        assert updated.history[0].type == HistoryType.CHECK_IN
        assert updated.history[0].change == amount
        assert updated.history[0].user == ANONYMOUS_USER

    @pytest.mark.parametrize("change_type", ["check-in", "check-out"])
    @pytest.mark.parametrize("amount", [0, -1, -10, "abc"])
    def test_non_positive_amount_is_rejected(self, change_type, amount):
        part = _part(10)

        with pytest.raises(InvalidInputException):
            apply_quantity_change(part, change_type, amount)

        assert part.quantity == 10
        assert part.history == ()

    def test_unknown_change_type_is_rejected(self):
        with pytest.raises(InvalidInputException, match="Unknown change type 'borrow'"):
            apply_quantity_change(_part(), "borrow", 1)

    def test_status_is_untouched(self):
        part = _part(4, PartStatus.IN_WORK)

        updated = apply_quantity_change(part, "check-in", 1)

        assert updated.status == PartStatus.IN_WORK
        assert updated.name == part.name

    def test_check_in_beyond_column_limit_is_rejected(self):
        part = _part(MAX_QUANTITY - 2)

        with pytest.raises(InvalidInputException, match="would raise the quantity above"):
            apply_quantity_change(part, QuantityChangeType.CHECK_IN, 3)

        assert part.quantity == MAX_QUANTITY - 2
        assert part.history == ()


class TestApplyStatusChange:
    """Test cases for status transitions."""

    @pytest.mark.parametrize("status", list(PartStatus))
    def test_same_status_is_rejected(self, status):
        part = _part(status=status)

        with pytest.raises(NoOpRejectedException, match="Please select a new status to update."):
            apply_status_change(part, status)

        assert part.status == status
        assert part.history == ()

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_status_is_rejected(self, value):
        with pytest.raises(NoOpRejectedException):
            apply_status_change(_part(), value)

    def test_in_work_to_completed(self, clock):
        part = _part(status=PartStatus.IN_WORK)

        updated = apply_status_change(part, "Completed", "carol", now=clock)

        assert updated.status == PartStatus.COMPLETED
        assert updated.quantity == part.quantity
        assert len(updated.history) == 1
        entry = updated.history[0]
        assert entry.type == HistoryType.STATUS_UPDATE
        assert entry.old_status == PartStatus.IN_WORK
        assert entry.new_status == PartStatus.COMPLETED
        assert entry.change is None
        assert entry.user == "carol"

    def test_any_status_can_move_to_any_other(self):
        for old in PartStatus:
            for new in PartStatus:
                if old == new:
                    continue
                updated = apply_status_change(_part(status=old), new)
                assert updated.status == new

    def test_unknown_status_is_rejected(self):
        with pytest.raises(InvalidInputException):
            apply_status_change(_part(), "Lost")


class TestLifecycleScenario:
    """End-to-end walk through check-out, check-in and status update."""

    def test_check_out_check_in_then_send_out(self, clock):
        part = _part(10)

        part = apply_quantity_change(part, "check-out", 3, now=clock)
        assert part.quantity == 7
        assert [(e.type, e.change) for e in part.history] == [(HistoryType.CHECK_OUT, 3)]

        part = apply_quantity_change(part, "check-in", 2, now=clock)
        assert part.quantity == 9
        assert part.history[-1].type == HistoryType.CHECK_IN
        assert part.history[-1].change == 2

        part = apply_status_change(part, "Sent Out", now=clock)
        assert part.status == PartStatus.SENT_OUT
        assert part.quantity == 9
        assert len(part.history) == 3
        last = part.history[-1]
        assert last.type == HistoryType.STATUS_UPDATE
        assert last.old_status == PartStatus.RECEIVED
        assert last.new_status == PartStatus.SENT_OUT

        timestamps = [entry.timestamp for entry in part.history]
        assert timestamps == sorted(timestamps)

    def test_input_snapshot_is_never_modified(self):
        original = _part(10)
        copy = replace(original)

        apply_quantity_change(original, "check-out", 4)
        apply_status_change(original, "In Work")

        assert original == copy
