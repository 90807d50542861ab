"""Domain models and business rules for shift matching."""

from shiftmatch.domain.errors import (
    AvailabilityValidationError,
    RequirementValidationError,
    SchedulingError,
    SchedulingInputError,
)
from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    MINUTES_PER_DAY,
    MINUTES_PER_WEEK,
    Conflict,
    ConflictType,
    DailyRequirement,
    DayAvailability,
    RequirementSlot,
    ShiftAssignment,
    ShiftRequirement,
    ShiftType,
    TimeSlot,
    UnfulfilledRequirement,
    WeeklyAvailability,
)
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.shift_types import ShiftTypeClassifier, ShiftTypeDecision
from shiftmatch.domain.time_intervals import NormalizedInterval, normalize, normalize_slot

__all__ = [
    # Models
    "DAYS_OF_WEEK",
    "MINUTES_PER_DAY",
    "MINUTES_PER_WEEK",
    "Conflict",
    "ConflictType",
    "DailyRequirement",
    "DayAvailability",
    "RequirementSlot",
    "ShiftAssignment",
    "ShiftRequirement",
    "ShiftType",
    "TimeSlot",
    "UnfulfilledRequirement",
    "WeeklyAvailability",
    # Time
    "NormalizedInterval",
    "normalize",
    "normalize_slot",
    "ShiftTypeClassifier",
    "ShiftTypeDecision",
    # Policy
    "MatchingPolicy",
    # Errors
    "AvailabilityValidationError",
    "RequirementValidationError",
    "SchedulingError",
    "SchedulingInputError",
]
