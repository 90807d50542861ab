"""Candidate discovery for requirement slots.

This module matches one requirement slot against every employee's
declared availability for the same day and produces Candidates that
record the actual overlap window, not the full availability window.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shiftmatch.domain.models import DailyRequirement, TimeSlot, WeeklyAvailability
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.shift_types import ShiftTypeClassifier
from shiftmatch.domain.time_intervals import NormalizedInterval, minutes_to_time, normalize_slot
from shiftmatch.scheduling.constraints import ConstraintTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """An employee who can cover (part of) a requirement slot.

    Attributes:
        employee_id: ID of the employee.
        actual_start_minutes: Overlap start on the weekly axis.
        actual_end_minutes: Overlap end on the weekly axis.
        overlap_minutes: Length of the overlap.
        coverage_percentage: Overlap as a percentage of the requirement.
        current_hours: Hours already assigned to the employee this run.
        preference: Preference weight of the matching availability slot.
        exact_match: True when coverage meets the exact-match threshold.
    """

    employee_id: str
    actual_start_minutes: int
    actual_end_minutes: int
    overlap_minutes: int
    coverage_percentage: float
    current_hours: float = 0.0
    preference: int = 0
    exact_match: bool = False

    @property
    def overlap_hours(self) -> float:
        return self.overlap_minutes / 60.0

    @property
    def actual_start_time(self) -> str:
        return minutes_to_time(self.actual_start_minutes)

    @property
    def actual_end_time(self) -> str:
        return minutes_to_time(self.actual_end_minutes)

    @property
    def interval(self) -> NormalizedInterval:
        return NormalizedInterval(self.actual_start_minutes, self.actual_end_minutes)

    def __repr__(self) -> str:
        return (
            f"Candidate({self.employee_id}: {self.actual_start_time}-{self.actual_end_time}, "
            f"{self.coverage_percentage:.1f}%{', exact' if self.exact_match else ''}, "
            f"hours={self.current_hours:.1f})"
        )


class CandidateFinder:
    """Finds employees whose availability overlaps a requirement slot.

    For each availability record the finder:
    - skips employees the constraint tracker marks as unavailable
    - skips days the employee is not available
    - skips slots whose shift type does not match the requirement
    - keeps overlaps of at least the meaningful-overlap threshold
    """

    def __init__(
        self,
        policy: Optional[MatchingPolicy] = None,
        classifier: Optional[ShiftTypeClassifier] = None,
    ):
        self.policy = policy or MatchingPolicy()
        self.classifier = classifier or ShiftTypeClassifier(self.policy)

    def find_candidates(
        self,
        requirement: DailyRequirement,
        availabilities: list[WeeklyAvailability],
        constraints: Optional[ConstraintTracker] = None,
    ) -> list[Candidate]:
        """Generate all candidates for a requirement slot.

        Args:
            requirement: The requirement slot and the day it is listed under.
            availabilities: Weekly availability records for the run's week.
            constraints: Running constraint state; None means no employee
                is excluded and everyone starts at zero hours.

        Returns:
            Unranked list of candidates, one per matching availability slot.
        """
        required = normalize_slot(requirement.slot, requirement.day)
        candidates = []

        for availability in availabilities:
            employee_id = availability.employee_id
            if constraints is not None and not constraints.is_available(employee_id):
                logger.debug("Skipping %s: not eligible on %s", employee_id, requirement.day)
                continue

            day_availability = availability.get_day(requirement.day)
            if not day_availability.available:
                continue

            current_hours = constraints.current_hours(employee_id) if constraints is not None else 0.0

            for slot in day_availability.slots:
                candidate = self._match_slot(
                    employee_id, requirement, required, slot, current_hours
                )
                if candidate is not None:
                    candidates.append(candidate)

        logger.debug(
            "Found %d candidates for %r (%d min)",
            len(candidates),
            requirement,
            required.duration_minutes,
        )
        return candidates

    def _match_slot(
        self,
        employee_id: str,
        requirement: DailyRequirement,
        required: NormalizedInterval,
        slot: TimeSlot,
        current_hours: float,
    ) -> Optional[Candidate]:
        """Build a candidate from one availability slot, if it qualifies."""
        if not self.classifier.is_compatible(requirement.slot, slot):
            logger.debug("  %s %r: shift type incompatible", employee_id, slot)
            return None

        available = normalize_slot(slot, requirement.day)
        overlap = required.intersection(available)
        if overlap is None or not self.policy.is_meaningful_overlap(overlap.duration_minutes):
            logger.debug("  %s %r: no meaningful overlap", employee_id, slot)
            return None

        coverage = overlap.duration_minutes / required.duration_minutes * 100.0
        return Candidate(
            employee_id=employee_id,
            actual_start_minutes=overlap.start_minutes,
            actual_end_minutes=overlap.end_minutes,
            overlap_minutes=overlap.duration_minutes,
            coverage_percentage=coverage,
            current_hours=current_hours,
            preference=slot.preference,
            exact_match=self.policy.is_exact_match(coverage),
        )
