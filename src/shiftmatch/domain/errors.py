"""Exceptions raised by the scheduling engine.

Coverage shortfalls and double bookings are reported as data, never
raised. Only input that cannot be scheduled at all ends up here.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for engine errors."""


class SchedulingInputError(SchedulingError, ValueError):
    """Malformed input that must reject the whole run.

    Attributes:
        errors: Individual validation errors, when collected by a validator.
    """

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class RequirementValidationError(SchedulingInputError):
    """A shift requirement document failed registration checks."""


class AvailabilityValidationError(SchedulingInputError):
    """A weekly availability record failed registration checks."""
