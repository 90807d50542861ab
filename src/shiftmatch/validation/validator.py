"""Input validation at the registration boundary.

Availability and requirement records are checked here before they are
accepted, and again (shape only) before a scheduling run. The engine
itself assumes its input already passed these checks.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from shiftmatch.domain.errors import (
    AvailabilityValidationError,
    RequirementValidationError,
    SchedulingInputError,
)
from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    RequirementSlot,
    ShiftRequirement,
    TimeSlot,
    WeeklyAvailability,
    day_key,
)
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.time_intervals import (
    NormalizedInterval,
    day_index,
    is_on_grid,
    is_zero_duration,
    normalize_slot,
    parse_time,
)

logger = logging.getLogger(__name__)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_TIME_FORMAT = "invalid_time_format"
    TIME_OFF_GRID = "time_off_grid"
    INVALID_DAY = "invalid_day"
    ZERO_DURATION = "zero_duration"
    WEEK_START_NOT_SUNDAY = "week_start_not_sunday"
    AVAILABLE_WITHOUT_SLOTS = "available_without_slots"
    OVERLAPPING_AVAILABILITY = "overlapping_availability"
    MAX_DAILY_HOURS_EXCEEDED = "max_daily_hours_exceeded"
    INVALID_MIN_EMPLOYEES = "invalid_min_employees"
    OVERLAPPING_REQUIREMENTS = "overlapping_requirements"
    WRONG_WEEK = "wrong_week"
    DUPLICATE_AVAILABILITY = "duplicate_availability"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    employee_id: Optional[str] = None
    day: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.employee_id:
            parts.append(f"Employee {self.employee_id}:")
        parts.append(self.message)
        if self.day is not None:
            parts.append(f"({self.day})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating input records."""

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)


def raise_for_result(
    result: ValidationResult,
    exc_class: type = SchedulingInputError,
) -> None:
    """Raise ``exc_class`` carrying the result's errors if it is invalid."""
    if result.is_valid:
        return
    message = "; ".join(str(e) for e in result.errors[:5])
    if len(result.errors) > 5:
        message += f" (and {len(result.errors) - 5} more)"
    raise exc_class(message, errors=list(result.errors))


class InputValidator:
    """Validates availability and requirement records.

    Example:
        >>> validator = InputValidator()
        >>> result = validator.validate_availability(availability)
        >>> raise_for_result(result, AvailabilityValidationError)
    """

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    # Shape checks

    def check_slot_shape(
        self,
        slot: TimeSlot,
        day: str,
        result: ValidationResult,
        employee_id: Optional[str] = None,
    ) -> bool:
        """Check one slot's times and day names.

        Returns:
            True if the slot is well formed and can be normalized.
        """
        ok = True
        for value in (slot.start_time, slot.end_time):
            try:
                parse_time(value)
            except SchedulingInputError:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.INVALID_TIME_FORMAT,
                        message=f"Invalid time {value!r}, expected HH:MM",
                        employee_id=employee_id,
                        day=day,
                    )
                )
                ok = False
                continue
            if not is_on_grid(value, self.policy.slot_granularity_minutes):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TIME_OFF_GRID,
                        message=(
                            f"Time {value} is not on the "
                            f"{self.policy.slot_granularity_minutes}-minute grid"
                        ),
                        employee_id=employee_id,
                        day=day,
                    )
                )
                ok = False

        for value in (slot.start_day, slot.end_day):
            try:
                day_index(value)
            except SchedulingInputError:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.INVALID_DAY,
                        message=f"Invalid day name {value!r}",
                        employee_id=employee_id,
                        day=day,
                    )
                )
                ok = False

        if ok and is_zero_duration(slot):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.ZERO_DURATION,
                    message=(
                        f"Start and end time cannot both be {slot.start_time} "
                        "on the same day"
                    ),
                    employee_id=employee_id,
                    day=day,
                )
            )
            ok = False
        return ok

    def _check_day_keys(
        self,
        days: dict,
        result: ValidationResult,
        employee_id: Optional[str] = None,
    ) -> None:
        for day in days:
            if day_key(day) not in DAYS_OF_WEEK:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.INVALID_DAY,
                        message=f"Invalid day name {day!r}",
                        employee_id=employee_id,
                        day=day,
                    )
                )

    def _check_requirement_shape(self, requirement: ShiftRequirement, result: ValidationResult) -> dict:
        """Shape checks for a requirement document.

        Returns:
            Mapping of day to the normalized intervals of its valid slots.
        """
        self._check_day_keys(requirement.days, result)
        intervals: dict[str, list[tuple[RequirementSlot, NormalizedInterval]]] = {}
        for day in DAYS_OF_WEEK:
            for slot in requirement.get_slots(day):
                if slot.min_employees < 1:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.INVALID_MIN_EMPLOYEES,
                            message=f"Minimum employees must be at least 1, got {slot.min_employees}",
                            day=day,
                        )
                    )
                if self.check_slot_shape(slot, day, result):
                    intervals.setdefault(day, []).append((slot, normalize_slot(slot, day)))
        return intervals

    # Availability

    def validate_availability(self, availability: WeeklyAvailability) -> ValidationResult:
        """Validate one employee's weekly availability.

        Checks the week anchor, that available days declare slots, slot
        shapes, that a day's slots do not overlap, and the daily cap on
        declared hours.

        Args:
            availability: The record to validate.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult()
        employee_id = availability.employee_id

        if availability.week_start.weekday() != 6:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.WEEK_START_NOT_SUNDAY,
                    message=f"Week start {availability.week_start.isoformat()} must be a Sunday",
                    employee_id=employee_id,
                )
            )

        self._check_day_keys(availability.days, result, employee_id)

        total_hours = 0.0
        for day in DAYS_OF_WEEK:
            day_availability = availability.get_day(day)
            if day_availability.available and not day_availability.slots:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.AVAILABLE_WITHOUT_SLOTS,
                        message="At least one time slot is required for an available day",
                        employee_id=employee_id,
                        day=day,
                    )
                )

            intervals = [
                normalize_slot(slot, day)
                for slot in day_availability.slots
                if self.check_slot_shape(slot, day, result, employee_id)
            ]

            if self._has_overlap(intervals):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.OVERLAPPING_AVAILABILITY,
                        message="Time slots overlap",
                        employee_id=employee_id,
                        day=day,
                    )
                )

            day_hours = sum(i.duration_hours for i in intervals)
            if day_hours > self.policy.max_daily_availability_hours:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.MAX_DAILY_HOURS_EXCEEDED,
                        message=(
                            f"{day_hours:.1f}h declared, maximum is "
                            f"{self.policy.max_daily_availability_hours:.1f}h"
                        ),
                        employee_id=employee_id,
                        day=day,
                        details={"hours": day_hours},
                    )
                )
            if day_availability.available:
                total_hours += day_hours

        if total_hours < self.policy.low_availability_hours:
            result.add_warning(
                f"Employee {employee_id} declares only {total_hours:.1f}h "
                f"for the week of {availability.week_start.isoformat()}"
            )

        return result

    # Requirements

    def validate_requirement(self, requirement: ShiftRequirement) -> ValidationResult:
        """Validate a requirement document before it is registered.

        On top of the shape checks, no two slots listed under the same day
        may overlap on the weekly minute axis.
        """
        result = ValidationResult()
        intervals = self._check_requirement_shape(requirement, result)

        for day, entries in intervals.items():
            for i, (slot, interval) in enumerate(entries):
                for other_slot, other in entries[i + 1:]:
                    if interval.overlaps(other):
                        result.add_error(
                            ValidationError(
                                error_type=ValidationErrorType.OVERLAPPING_REQUIREMENTS,
                                message=f"Requirement slots {slot!r} and {other_slot!r} overlap",
                                day=day,
                            )
                        )
        return result

    # Run inputs

    def check_run_inputs(
        self,
        requirements: list[ShiftRequirement],
        availabilities: list[WeeklyAvailability],
        week_start: date,
    ) -> ValidationResult:
        """Shape-only checks on the snapshot handed to a scheduling run.

        Also rejects availability records for a different week and more
        than one record per employee.
        """
        result = ValidationResult()
        if week_start.weekday() != 6:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.WEEK_START_NOT_SUNDAY,
                    message=f"Week start {week_start.isoformat()} must be a Sunday",
                )
            )
        for requirement in requirements:
            self._check_requirement_shape(requirement, result)

        seen = set()
        for availability in availabilities:
            employee_id = availability.employee_id
            if availability.week_start != week_start:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.WRONG_WEEK,
                        message=(
                            f"Availability is for week {availability.week_start.isoformat()}, "
                            f"run is for {week_start.isoformat()}"
                        ),
                        employee_id=employee_id,
                    )
                )
            if employee_id in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_AVAILABILITY,
                        message="More than one availability record for the week",
                        employee_id=employee_id,
                    )
                )
            seen.add(employee_id)

            self._check_day_keys(availability.days, result, employee_id)
            for day in DAYS_OF_WEEK:
                for slot in availability.get_day(day).slots:
                    self.check_slot_shape(slot, day, result, employee_id)

        logger.debug(
            "Run inputs for week %s: %d requirement documents, %d availability records, %d errors",
            week_start,
            len(requirements),
            len(availabilities),
            len(result.errors),
        )
        return result

    @staticmethod
    def _has_overlap(intervals: list[NormalizedInterval]) -> bool:
        ordered = sorted(intervals, key=lambda i: (i.start_minutes, i.end_minutes))
        return any(a.end_minutes > b.start_minutes for a, b in zip(ordered, ordered[1:]))


def validate_availability_or_raise(
    availability: WeeklyAvailability,
    policy: Optional[MatchingPolicy] = None,
) -> ValidationResult:
    """Validate an availability record, raising AvailabilityValidationError."""
    result = InputValidator(policy).validate_availability(availability)
    raise_for_result(result, AvailabilityValidationError)
    return result


def validate_requirement_or_raise(
    requirement: ShiftRequirement,
    policy: Optional[MatchingPolicy] = None,
) -> ValidationResult:
    """Validate a requirement document, raising RequirementValidationError."""
    result = InputValidator(policy).validate_requirement(requirement)
    raise_for_result(result, RequirementValidationError)
    return result
