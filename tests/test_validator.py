"""Tests for registration-boundary input validation."""

from datetime import date

import pytest

from shiftmatch.domain.errors import (
    AvailabilityValidationError,
    RequirementValidationError,
    SchedulingInputError,
)
from shiftmatch.domain.models import (
    DayAvailability,
    RequirementSlot,
    ShiftRequirement,
    TimeSlot,
    WeeklyAvailability,
)
from shiftmatch.validation.validator import (
    InputValidator,
    ValidationErrorType,
    ValidationResult,
    raise_for_result,
    validate_availability_or_raise,
    validate_requirement_or_raise,
)

WEEK = date(2024, 1, 7)  # Sunday


def create_availability(days: dict, employee_id: str = "A", week_start: date = WEEK) -> WeeklyAvailability:
    """Helper: ``days`` maps day name to a list of (start, end) or TimeSlot."""
    parsed = {}
    for day, windows in days.items():
        slots = [
            w if isinstance(w, TimeSlot) else TimeSlot(w[0], w[1], day, day)
            for w in windows
        ]
        parsed[day] = DayAvailability(available=True, slots=slots)
    return WeeklyAvailability(
        employee_id=employee_id,
        company_id="C1",
        week_start=week_start,
        days=parsed,
    )


def create_requirement(days: dict) -> ShiftRequirement:
    """Helper: ``days`` maps day name to a list of (start, end, min_employees)."""
    return ShiftRequirement(
        company_id="C1",
        department_id="D1",
        days={
            day: [RequirementSlot(s, e, day, day, min_employees=n) for s, e, n in slots]
            for day, slots in days.items()
        },
    )


def error_types(result: ValidationResult) -> set:
    return {e.error_type for e in result.errors}


@pytest.fixture
def validator():
    return InputValidator()


class TestValidateAvailability:
    """Tests for availability registration checks."""

    def test_valid_availability(self, validator):
        availability = create_availability({
            "monday": [("09:00", "17:00")],
            "tuesday": [("08:00", "12:00"), ("13:00", "17:30")],
        })

        result = validator.validate_availability(availability)

        assert result.is_valid
        assert result.errors == []

    def test_week_must_start_on_sunday(self, validator):
        availability = create_availability({"monday": [("09:00", "17:00")]}, week_start=date(2024, 1, 8))

        result = validator.validate_availability(availability)

        assert ValidationErrorType.WEEK_START_NOT_SUNDAY in error_types(result)

    def test_available_day_needs_slots(self, validator):
        availability = create_availability({"monday": []})

        result = validator.validate_availability(availability)

        assert ValidationErrorType.AVAILABLE_WITHOUT_SLOTS in error_types(result)

    def test_unavailable_day_without_slots_is_fine(self, validator):
        availability = create_availability({"monday": [("09:00", "17:00")]})
        availability.days["tuesday"] = DayAvailability(available=False)

        assert validator.validate_availability(availability).is_valid

    def test_malformed_time(self, validator):
        availability = create_availability({"monday": [("9:00", "17:00")]})

        result = validator.validate_availability(availability)

        assert error_types(result) == {ValidationErrorType.INVALID_TIME_FORMAT}
        assert result.errors[0].employee_id == "A"
        assert result.errors[0].day == "monday"

    def test_time_off_grid(self, validator):
        availability = create_availability({"monday": [("09:15", "17:00")]})

        result = validator.validate_availability(availability)

        assert error_types(result) == {ValidationErrorType.TIME_OFF_GRID}

    def test_invalid_slot_day(self, validator):
        slot = TimeSlot("09:00", "17:00", "mondy", "monday")
        availability = create_availability({"monday": [slot]})

        result = validator.validate_availability(availability)

        assert ValidationErrorType.INVALID_DAY in error_types(result)

    def test_invalid_day_key(self, validator):
        availability = create_availability({"monday": [("09:00", "17:00")]})
        availability.days["someday"] = DayAvailability(available=False)

        result = validator.validate_availability(availability)

        assert ValidationErrorType.INVALID_DAY in error_types(result)

    def test_zero_duration(self, validator):
        availability = create_availability({"monday": [("09:00", "09:00")]})

        result = validator.validate_availability(availability)

        assert error_types(result) == {ValidationErrorType.ZERO_DURATION}

    def test_overlapping_slots(self, validator):
        availability = create_availability({"monday": [("09:00", "13:00"), ("12:00", "16:00")]})

        result = validator.validate_availability(availability)

        assert error_types(result) == {ValidationErrorType.OVERLAPPING_AVAILABILITY}

    def test_touching_slots(self, validator):
        availability = create_availability({"monday": [("09:00", "13:00"), ("13:00", "17:00")]})

        assert validator.validate_availability(availability).is_valid

    def test_too_many_hours_in_a_day(self, validator):
        availability = create_availability({"monday": [("06:00", "12:00"), ("12:00", "19:00")]})

        result = validator.validate_availability(availability)

        assert error_types(result) == {ValidationErrorType.MAX_DAILY_HOURS_EXCEEDED}
        assert result.errors[0].details["hours"] == pytest.approx(13.0)

    def test_overnight_slot(self, validator):
        availability = create_availability({
            "monday": [("22:00", "06:00")],
            "tuesday": [("22:00", "06:00")],
        })

        assert validator.validate_availability(availability).is_valid

    def test_low_weekly_hours_is_a_warning(self, validator):
        availability = create_availability({"monday": [("09:00", "13:00")]})

        result = validator.validate_availability(availability)

        assert result.is_valid
        assert len(result.warnings) == 1

    def test_or_raise(self):
        availability = create_availability({"monday": [("09:00", "09:00")]})

        with pytest.raises(AvailabilityValidationError) as exc_info:
            validate_availability_or_raise(availability)

        assert isinstance(exc_info.value, SchedulingInputError)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.errors[0].error_type == ValidationErrorType.ZERO_DURATION


class TestValidateRequirement:
    """Tests for requirement registration checks."""

    def test_valid_requirement(self, validator):
        requirement = create_requirement({
            "monday": [("09:00", "13:00", 2), ("13:00", "17:00", 1)],
            "friday": [("22:00", "06:00", 1)],
        })

        assert validator.validate_requirement(requirement).is_valid

    def test_min_employees_must_be_positive(self, validator):
        requirement = create_requirement({"monday": [("09:00", "17:00", 0)]})

        result = validator.validate_requirement(requirement)

        assert error_types(result) == {ValidationErrorType.INVALID_MIN_EMPLOYEES}

    def test_overlapping_slots(self, validator):
        requirement = create_requirement({"monday": [("09:00", "13:00", 1), ("12:30", "17:00", 1)]})

        result = validator.validate_requirement(requirement)

        assert error_types(result) == {ValidationErrorType.OVERLAPPING_REQUIREMENTS}

    def test_overnight_slot_overlaps_late_slot(self, validator):
        requirement = create_requirement({"monday": [("22:00", "02:00", 1), ("23:00", "23:30", 1)]})

        result = validator.validate_requirement(requirement)

        assert error_types(result) == {ValidationErrorType.OVERLAPPING_REQUIREMENTS}

    def test_shape_errors(self, validator):
        requirement = create_requirement({"monday": [("09:10", "17:00", 1), ("18:00", "18:00", 1)]})

        result = validator.validate_requirement(requirement)

        assert error_types(result) == {
            ValidationErrorType.TIME_OFF_GRID,
            ValidationErrorType.ZERO_DURATION,
        }

    def test_or_raise(self):
        requirement = create_requirement({"monday": [("09:00", "13:00", 1), ("10:00", "11:00", 1)]})

        with pytest.raises(RequirementValidationError):
            validate_requirement_or_raise(requirement)


class TestCheckRunInputs:
    """Tests for the pre-run snapshot check."""

    def test_valid_snapshot(self, validator):
        requirement = create_requirement({"monday": [("09:00", "17:00", 1)]})
        availability = create_availability({"monday": [("09:00", "17:00")]})

        assert validator.check_run_inputs([requirement], [availability], WEEK).is_valid

    def test_wrong_week(self, validator):
        availability = create_availability({"monday": [("09:00", "17:00")]}, week_start=date(2024, 1, 14))

        result = validator.check_run_inputs([], [availability], WEEK)

        assert error_types(result) == {ValidationErrorType.WRONG_WEEK}

    def test_duplicate_employee_record(self, validator):
        first = create_availability({"monday": [("09:00", "17:00")]})
        second = create_availability({"tuesday": [("09:00", "17:00")]})

        result = validator.check_run_inputs([], [first, second], WEEK)

        assert error_types(result) == {ValidationErrorType.DUPLICATE_AVAILABILITY}

    def test_run_week_must_be_sunday(self, validator):
        result = validator.check_run_inputs([], [], date(2024, 1, 9))

        assert error_types(result) == {ValidationErrorType.WEEK_START_NOT_SUNDAY}

    def test_shape_only(self, validator):
        # Overlap and daily-cap rules belong to registration, not to runs
        requirement = create_requirement({"monday": [("09:00", "13:00", 1), ("12:00", "17:00", 1)]})
        availability = create_availability({"monday": [("06:00", "12:00"), ("12:00", "19:00")]})

        assert validator.check_run_inputs([requirement], [availability], WEEK).is_valid

    def test_malformed_slot(self, validator):
        availability = create_availability({"monday": [("09:00", "25:00")]})

        result = validator.check_run_inputs([], [availability], WEEK)

        assert error_types(result) == {ValidationErrorType.INVALID_TIME_FORMAT}


class TestRaiseForResult:
    """Tests for converting results into exceptions."""

    def test_valid_result_does_not_raise(self):
        raise_for_result(ValidationResult())

    def test_default_exception(self):
        result = InputValidator().check_run_inputs([], [], date(2024, 1, 9))

        with pytest.raises(SchedulingInputError, match="Sunday"):
            raise_for_result(result)
