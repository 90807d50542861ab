"""Input validation and conflict detection."""

from shiftmatch.validation.conflicts import ConflictValidator
from shiftmatch.validation.validator import (
    InputValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    raise_for_result,
    validate_availability_or_raise,
    validate_requirement_or_raise,
)

__all__ = [
    "ConflictValidator",
    "InputValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "raise_for_result",
    "validate_availability_or_raise",
    "validate_requirement_or_raise",
]
