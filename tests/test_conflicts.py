"""Tests for post-hoc conflict detection."""

from datetime import date

import pytest

from shiftmatch.domain.models import ConflictType, ShiftAssignment
from shiftmatch.validation.conflicts import ConflictValidator

WEEK = date(2024, 1, 7)


def create_assignment(employee_id: str, day: str, start: str, end: str) -> ShiftAssignment:
    return ShiftAssignment(employee_id, "C1", "D1", WEEK, day, start, end, 0.0)


@pytest.fixture
def validator():
    return ConflictValidator()


class TestValidate:
    """Tests for batch validation."""

    def test_back_to_back_shifts_are_not_conflicts(self, validator):
        assignments = [
            create_assignment("A", "tuesday", "08:00", "12:00"),
            create_assignment("A", "tuesday", "12:00", "16:00"),
        ]

        assert validator.validate(assignments) == []

    def test_overlap(self, validator):
        assignments = [
            create_assignment("A", "tuesday", "11:00", "15:00"),
            create_assignment("A", "tuesday", "08:00", "12:00"),
        ]

        conflicts = validator.validate(assignments)

        assert len(conflicts) == 1
        conflict = conflicts[0]
        assert conflict.conflict_type == ConflictType.OVERLAP
        assert conflict.employee_id == "A"
        assert conflict.day == "tuesday"
        assert conflict.slot1 == "08:00-12:00"
        assert conflict.slot2 == "11:00-15:00"

    def test_duplicate(self, validator):
        assignments = [
            create_assignment("A", "monday", "09:00", "17:00"),
            create_assignment("A", "monday", "09:00", "17:00"),
        ]

        conflicts = validator.validate(assignments)

        assert [c.conflict_type for c in conflicts] == [ConflictType.DUPLICATE]

    def test_different_employees_do_not_conflict(self, validator):
        assignments = [
            create_assignment("A", "monday", "09:00", "17:00"),
            create_assignment("B", "monday", "09:00", "17:00"),
        ]

        assert validator.validate(assignments) == []

    def test_different_days_do_not_conflict(self, validator):
        assignments = [
            create_assignment("A", "monday", "09:00", "17:00"),
            create_assignment("A", "tuesday", "09:00", "17:00"),
        ]

        assert validator.validate(assignments) == []

    def test_overnight_overlap(self, validator):
        assignments = [
            create_assignment("A", "monday", "22:00", "02:00"),
            create_assignment("A", "monday", "23:00", "01:00"),
        ]

        conflicts = validator.validate(assignments)

        assert [c.conflict_type for c in conflicts] == [ConflictType.OVERLAP]

    def test_evening_then_overnight_touching(self, validator):
        assignments = [
            create_assignment("A", "monday", "22:00", "02:00"),
            create_assignment("A", "monday", "18:00", "22:00"),
        ]

        assert validator.validate(assignments) == []

    def test_conflict_dict(self, validator):
        assignments = [
            create_assignment("A", "monday", "09:00", "13:00"),
            create_assignment("A", "monday", "12:00", "17:00"),
        ]

        data = validator.validate(assignments)[0].to_dict()

        assert data["type"] == "overlap"
        assert data["employee"] == "A"
        assert data["day"] == "monday"
        assert data["slot1"] == "09:00-13:00"
        assert data["slot2"] == "12:00-17:00"


class TestCheckNewAssignment:
    """Tests for checking a manually added shift."""

    @pytest.fixture
    def existing(self):
        return [
            create_assignment("A", "monday", "09:00", "13:00"),
            create_assignment("A", "tuesday", "09:00", "13:00"),
            create_assignment("B", "monday", "12:00", "16:00"),
        ]

    def test_overlap_with_existing(self, validator, existing):
        new = create_assignment("A", "monday", "12:00", "16:00")

        conflicts = validator.check_new_assignment(existing, new)

        assert len(conflicts) == 1
        assert conflicts[0].conflict_type == ConflictType.OVERLAP
        assert conflicts[0].slot2 == "12:00-16:00"

    def test_duplicate_of_existing(self, validator, existing):
        new = create_assignment("A", "tuesday", "09:00", "13:00")

        conflicts = validator.check_new_assignment(existing, new)

        assert [c.conflict_type for c in conflicts] == [ConflictType.DUPLICATE]

    def test_touching_is_allowed(self, validator, existing):
        new = create_assignment("A", "monday", "13:00", "17:00")

        assert validator.check_new_assignment(existing, new) == []

    def test_other_employee_is_ignored(self, validator, existing):
        new = create_assignment("C", "monday", "09:00", "13:00")

        assert validator.check_new_assignment(existing, new) == []
