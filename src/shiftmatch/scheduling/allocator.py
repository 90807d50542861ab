"""Coverage allocation for a single requirement slot.

Two selection policies are used:
- Exact: when any candidate covers the slot (nearly) fully, take the best
  ``min_employees`` of those directly.
- Greedy: otherwise build a per-minute coverage map of the slot and keep
  picking the candidate that covers the most still-uncovered minutes,
  until ``min_employees`` are picked or nobody adds coverage.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from shiftmatch.domain.models import DailyRequirement, ShiftAssignment
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.time_intervals import NormalizedInterval, normalize_slot
from shiftmatch.scheduling.candidate_finder import Candidate

logger = logging.getLogger(__name__)


@dataclass
class SlotCoverage:
    """Minute-level coverage of one requirement slot by its assignments.

    Attributes:
        total_minutes: Length of the requirement window.
        covered_minutes: Minutes covered by at least one employee.
        uncovered_minutes: Minutes nobody covers.
        over_covered_minutes: Minutes covered by more than one employee.
        coverage_percentage: Covered share of the window (0-100).
        employee_count: Number of employees assigned.
        required_count: Employees the slot asks for.
        meets_requirement: Enough employees and enough minutes covered.
    """

    total_minutes: int
    covered_minutes: int
    uncovered_minutes: int
    over_covered_minutes: int
    coverage_percentage: float
    employee_count: int
    required_count: int
    meets_requirement: bool

    def to_dict(self) -> dict:
        return {
            "totalDurationMinutes": self.total_minutes,
            "coveredMinutes": self.covered_minutes,
            "uncoveredMinutes": self.uncovered_minutes,
            "overCoveredMinutes": self.over_covered_minutes,
            "coveragePercentage": round(self.coverage_percentage, 2),
            "employeeCount": self.employee_count,
            "requiredEmployees": self.required_count,
            "meetsRequirement": self.meets_requirement,
        }


def _coverage_map(window: NormalizedInterval, candidates: list[Candidate]) -> list[int]:
    """Per-minute count of selected candidates over the window."""
    counts = [0] * window.duration_minutes
    for candidate in candidates:
        _mark(counts, window, candidate)
    return counts


def _offsets(window: NormalizedInterval, candidate: Candidate) -> range:
    start = max(0, candidate.actual_start_minutes - window.start_minutes)
    end = min(window.duration_minutes, candidate.actual_end_minutes - window.start_minutes)
    return range(start, max(start, end))


def _mark(counts: list[int], window: NormalizedInterval, candidate: Candidate) -> None:
    for i in _offsets(window, candidate):
        counts[i] += 1


class CoverageAllocator:
    """Chooses which ranked candidates fill a requirement slot."""

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    def select(self, requirement: DailyRequirement, ranked: list[Candidate]) -> list[Candidate]:
        """Pick candidates for a slot.

        Args:
            requirement: The slot being filled.
            ranked: Candidates in ranked order (best first).

        Returns:
            Selected candidates, at most ``min_employees`` and never the
            same employee twice.
        """
        exact = [c for c in ranked if c.exact_match]
        if exact:
            selected = self._select_exact(requirement, exact)
            logger.debug(
                "%r: exact policy selected %d of %d exact matches",
                requirement,
                len(selected),
                len(exact),
            )
            return selected

        selected = self._select_greedy(requirement, ranked)
        logger.debug(
            "%r: greedy policy selected %d of %d partial candidates",
            requirement,
            len(selected),
            len(ranked),
        )
        return selected

    def allocate(
        self,
        requirement: DailyRequirement,
        ranked: list[Candidate],
        week_start: date,
    ) -> list[ShiftAssignment]:
        """Select candidates and turn them into assignments."""
        return [
            self.to_assignment(requirement, candidate, week_start)
            for candidate in self.select(requirement, ranked)
        ]

    def _select_exact(self, requirement: DailyRequirement, exact: list[Candidate]) -> list[Candidate]:
        selected = []
        used = set()
        for candidate in exact:
            if len(selected) >= requirement.min_employees:
                break
            if candidate.employee_id in used:
                continue
            selected.append(candidate)
            used.add(candidate.employee_id)
        return selected

    def _select_greedy(self, requirement: DailyRequirement, ranked: list[Candidate]) -> list[Candidate]:
        window = normalize_slot(requirement.slot, requirement.day)
        counts = [0] * window.duration_minutes
        selected: list[Candidate] = []
        used: set[str] = set()

        while len(selected) < requirement.min_employees:
            best: Optional[Candidate] = None
            best_gain = 0
            for candidate in ranked:
                if candidate.employee_id in used:
                    continue
                gain = sum(1 for i in _offsets(window, candidate) if counts[i] == 0)
                if gain > best_gain or (
                    best is not None
                    and gain == best_gain
                    and candidate.coverage_percentage > best.coverage_percentage
                ):
                    best = candidate
                    best_gain = gain

            if best is None:
                break

            selected.append(best)
            used.add(best.employee_id)
            _mark(counts, window, best)

        return selected

    def to_assignment(
        self,
        requirement: DailyRequirement,
        candidate: Candidate,
        week_start: date,
    ) -> ShiftAssignment:
        """Build the assignment for a selected candidate's actual overlap."""
        return ShiftAssignment(
            employee_id=candidate.employee_id,
            company_id=requirement.company_id,
            department_id=requirement.department_id,
            week_start=week_start,
            day=requirement.day,
            start_time=candidate.actual_start_time,
            end_time=candidate.actual_end_time,
            duration_hours=round(candidate.overlap_hours, 2),
        )

    def coverage_stats(self, requirement: DailyRequirement, selected: list[Candidate]) -> SlotCoverage:
        """Minute-level coverage statistics for the selected candidates."""
        window = normalize_slot(requirement.slot, requirement.day)
        counts = _coverage_map(window, selected)
        covered = sum(1 for c in counts if c > 0)
        coverage = covered / window.duration_minutes * 100.0
        return SlotCoverage(
            total_minutes=window.duration_minutes,
            covered_minutes=covered,
            uncovered_minutes=window.duration_minutes - covered,
            over_covered_minutes=sum(1 for c in counts if c > 1),
            coverage_percentage=coverage,
            employee_count=len(selected),
            required_count=requirement.min_employees,
            meets_requirement=(
                len(selected) >= requirement.min_employees
                and coverage >= self.policy.coverage_requirement_percentage
            ),
        )
