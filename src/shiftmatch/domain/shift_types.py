"""Day/night classification of slots.

Declared shift types are treated as untrusted: the type is always
inferred from the slot's start hour, and a disagreeing declaration is
reported back to the caller as an override instead of being silently
dropped.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shiftmatch.domain.models import ShiftType, TimeSlot
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.time_intervals import parse_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftTypeDecision:
    """Outcome of classifying one slot.

    Attributes:
        shift_type: The type the engine will use.
        declared: The raw declared tag, if any.
        overridden: True when a declared tag was present and disagreed.
    """

    shift_type: ShiftType
    declared: Optional[str] = None
    overridden: bool = False


class ShiftTypeClassifier:
    """Infers Day/Night from start time and reconciles declared tags.

    Example:
        >>> classifier = ShiftTypeClassifier()
        >>> classifier.classify("Day", "22:00").shift_type
        <ShiftType.NIGHT: 'night'>
    """

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    def infer(self, start_time: str) -> ShiftType:
        """Infer the shift type from a start time of day."""
        hour = parse_time(start_time) // 60
        return ShiftType.NIGHT if self.policy.is_night_hour(hour) else ShiftType.DAY

    def classify(self, declared: Optional[str], start_time: str) -> ShiftTypeDecision:
        """Classify a slot; the inferred type always wins.

        Args:
            declared: Declared tag (e.g. "Day", "night") or None.
            start_time: Slot start time "HH:MM".

        Returns:
            ShiftTypeDecision describing the chosen type and whether the
            declaration was overridden.
        """
        inferred = self.infer(start_time)
        if not declared:
            return ShiftTypeDecision(shift_type=inferred)

        overridden = declared.strip().lower() != inferred.value
        if overridden:
            logger.warning(
                "Declared shift type %r disagrees with start time %s; using %r",
                declared,
                start_time,
                inferred.value,
            )
        return ShiftTypeDecision(shift_type=inferred, declared=declared, overridden=overridden)

    def classify_slot(self, slot: TimeSlot) -> ShiftTypeDecision:
        return self.classify(slot.shift_type, slot.start_time)

    def is_compatible(self, required: TimeSlot, available: TimeSlot) -> bool:
        """Check that a requirement and an availability slot share a type."""
        return self.classify_slot(required).shift_type == self.classify_slot(available).shift_type
