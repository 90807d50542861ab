"""Capacity and gap analysis.

Everything in this module is advisory: it estimates whether declared
availability can meet the requirements and suggests ways to close the
gaps a run left behind, but never changes a schedule.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    MINUTES_PER_DAY,
    DailyRequirement,
    ShiftAssignment,
    ShiftRequirement,
    UnfulfilledRequirement,
    WeeklyAvailability,
)
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.time_intervals import day_index, minutes_to_time, normalize_slot
from shiftmatch.scheduling.candidate_finder import Candidate, CandidateFinder
from shiftmatch.scheduling.ranker import CandidateRanker

logger = logging.getLogger(__name__)

# Hours counted for a day marked available without any slots.
ALL_DAY_HOURS = 24.0


class CoverageStatus(Enum):
    """How well a day's declared availability matches its requirements."""

    SUFFICIENT = "sufficient"
    PARTIAL = "partial"
    NONE = "none"


@dataclass
class Recommendation:
    """A textual recommendation for the scheduler."""

    type: str
    priority: str
    message: str
    day: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"type": self.type, "priority": self.priority, "message": self.message}
        if self.day is not None:
            data["day"] = self.day
        return data


@dataclass
class DayCapacity:
    """Declared capacity versus requirements for a single day."""

    day: str
    available_employees: int = 0
    available_hours: float = 0.0
    required_employees: int = 0
    required_hours: float = 0.0
    slot_count: int = 0
    status: CoverageStatus = CoverageStatus.SUFFICIENT
    issues: list[str] = field(default_factory=list)

    @property
    def employee_shortfall(self) -> int:
        return max(0, self.required_employees - self.available_employees)

    @property
    def hours_shortfall(self) -> float:
        return max(0.0, self.required_hours - self.available_hours)

    def to_dict(self) -> dict:
        return {
            "availableEmployees": self.available_employees,
            "totalAvailableHours": round(self.available_hours, 2),
            "requiredEmployees": self.required_employees,
            "totalRequiredHours": round(self.required_hours, 2),
            "slots": self.slot_count,
            "coverage": self.status.value,
            "issues": list(self.issues),
        }


@dataclass
class CapacityAnalysis:
    """Week-level capacity estimate.

    Attributes:
        employee_count: Number of availability records analyzed.
        total_available_hours: Declared person-hours across the week.
        total_required_hours: Required person-hours (duration x headcount).
        days: Per-day breakdown keyed by day name.
        recommendations: Suggestions derived from the breakdown.
    """

    employee_count: int = 0
    total_available_hours: float = 0.0
    total_required_hours: float = 0.0
    days: dict[str, DayCapacity] = field(default_factory=dict)
    recommendations: list[Recommendation] = field(default_factory=list)

    @property
    def has_capacity(self) -> bool:
        return self.total_available_hours >= self.total_required_hours

    def to_dict(self) -> dict:
        return {
            "employeeCount": self.employee_count,
            "totalAvailableHours": round(self.total_available_hours, 2),
            "totalRequiredHours": round(self.total_required_hours, 2),
            "dayBreakdown": {day: d.to_dict() for day, d in self.days.items()},
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class ShiftAlternative:
    """A shorter or shifted window that enough employees could cover."""

    start_time: str
    end_time: str
    duration_hours: float
    available_employees: int
    score: float

    def to_dict(self) -> dict:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration_hours,
            "availableEmployees": self.available_employees,
            "score": round(self.score, 3),
        }


@dataclass
class GapFill:
    """Best candidate found for an unfulfilled slot, not applied."""

    gap: UnfulfilledRequirement
    candidate: Candidate
    confidence: float

    def to_dict(self) -> dict:
        return {
            "gap": self.gap.to_dict(),
            "employeeId": self.candidate.employee_id,
            "startTime": self.candidate.actual_start_time,
            "endTime": self.candidate.actual_end_time,
            "confidence": round(self.confidence, 2),
        }


@dataclass
class ResolutionStrategy:
    type: str
    description: str
    suggestion: str = ""
    alternatives: list[ShiftAlternative] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"type": self.type, "description": self.description}
        if self.suggestion:
            data["suggestion"] = self.suggestion
        if self.alternatives:
            data["alternatives"] = [a.to_dict() for a in self.alternatives]
        return data


@dataclass
class Resolution:
    gap: UnfulfilledRequirement
    strategies: list[ResolutionStrategy] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "gap": self.gap.to_dict(),
            "strategies": [s.to_dict() for s in self.strategies],
        }


class GapAnalyzer:
    """Estimates capacity and proposes remediation for coverage gaps.

    Example:
        >>> analyzer = GapAnalyzer()
        >>> analysis = analyzer.analyze(requirements, availabilities)
        >>> analysis.days["monday"].status
        <CoverageStatus.SUFFICIENT: 'sufficient'>
    """

    def __init__(
        self,
        policy: Optional[MatchingPolicy] = None,
        finder: Optional[CandidateFinder] = None,
        ranker: Optional[CandidateRanker] = None,
    ):
        self.policy = policy or MatchingPolicy()
        self.finder = finder or CandidateFinder(self.policy)
        self.ranker = ranker or CandidateRanker(self.policy)

    # Capacity

    def analyze(
        self,
        requirements: list[ShiftRequirement],
        availabilities: list[WeeklyAvailability],
    ) -> CapacityAnalysis:
        """Compare declared availability against requirements for the week."""
        analysis = CapacityAnalysis(employee_count=len(availabilities))

        for day in DAYS_OF_WEEK:
            capacity = self.analyze_day(day, requirements, availabilities)
            analysis.days[day] = capacity
            analysis.total_available_hours += capacity.available_hours
            analysis.total_required_hours += capacity.required_hours

        analysis.recommendations = self.recommend(analysis)
        logger.info(
            "Capacity: %.1fh available vs %.1fh required across %d employees",
            analysis.total_available_hours,
            analysis.total_required_hours,
            analysis.employee_count,
        )
        return analysis

    def analyze_day(
        self,
        day: str,
        requirements: list[ShiftRequirement],
        availabilities: list[WeeklyAvailability],
    ) -> DayCapacity:
        capacity = DayCapacity(day=day)

        for availability in availabilities:
            day_availability = availability.get_day(day)
            if not day_availability.available:
                continue
            capacity.available_employees += 1
            if day_availability.slots:
                capacity.available_hours += sum(
                    normalize_slot(slot, day).duration_hours for slot in day_availability.slots
                )
            else:
                capacity.available_hours += ALL_DAY_HOURS

        for requirement in requirements:
            for slot in requirement.get_slots(day):
                capacity.slot_count += 1
                capacity.required_employees += slot.min_employees
                capacity.required_hours += normalize_slot(slot, day).duration_hours * slot.min_employees

        if (
            capacity.available_employees >= capacity.required_employees
            and capacity.available_hours >= capacity.required_hours
        ):
            capacity.status = CoverageStatus.SUFFICIENT
        elif capacity.available_employees > 0:
            capacity.status = CoverageStatus.PARTIAL
            if capacity.employee_shortfall:
                capacity.issues.append(f"need {capacity.employee_shortfall} more employees")
            if capacity.hours_shortfall:
                capacity.issues.append(f"need {capacity.hours_shortfall:.1f} more hours")
        else:
            capacity.status = CoverageStatus.NONE
            capacity.issues.append("no employees available")

        return capacity

    def recommend(self, analysis: CapacityAnalysis) -> list[Recommendation]:
        recommendations = []

        if analysis.total_required_hours > analysis.total_available_hours:
            recommendations.append(
                Recommendation(
                    type="capacity",
                    priority="high",
                    message=(
                        f"Total required hours ({analysis.total_required_hours:.1f}) exceed "
                        f"available hours ({analysis.total_available_hours:.1f}). Consider "
                        "reducing shift requirements or requesting more availability."
                    ),
                )
            )

        for day, capacity in analysis.days.items():
            if capacity.status is CoverageStatus.NONE:
                recommendations.append(
                    Recommendation(
                        type="no_coverage",
                        priority="high",
                        day=day,
                        message=(
                            f"No employees available on {day.capitalize()}. "
                            "Shift requirements cannot be fulfilled."
                        ),
                    )
                )
            elif capacity.status is CoverageStatus.PARTIAL:
                recommendations.append(
                    Recommendation(
                        type="partial_coverage",
                        priority="medium",
                        day=day,
                        message=(
                            f"{day.capitalize()} has partial coverage: "
                            + ", ".join(f"{issue} on {day.capitalize()}" for issue in capacity.issues)
                        ),
                    )
                )

        if analysis.employee_count:
            average = analysis.total_available_hours / analysis.employee_count
            if average < self.policy.low_availability_hours:
                recommendations.append(
                    Recommendation(
                        type="low_availability",
                        priority="medium",
                        message=(
                            f"Low average availability per employee ({average:.1f} hours). "
                            "Encourage employees to provide more availability."
                        ),
                    )
                )

        return recommendations

    # Remediation

    def suggest_shift_alternatives(
        self,
        requirement: DailyRequirement,
        availabilities: list[WeeklyAvailability],
    ) -> list[ShiftAlternative]:
        """Propose windows at least ``min_employees`` could cover together.

        Declared availability for the requirement's day is laid on a
        two-day minute timeline (so overnight slots count). Windows from
        the original length down to the shorter of four hours and half the
        original are tried at every grid start of the day.

        Returns:
            Up to ``max_alternatives`` windows, best score first.
        """
        step = self.policy.slot_granularity_minutes
        horizon = 2 * MINUTES_PER_DAY
        offset = day_index(requirement.day) * MINUTES_PER_DAY
        timeline = [0] * horizon

        for availability in availabilities:
            day_availability = availability.get_day(requirement.day)
            if not day_availability.available:
                continue
            for slot in day_availability.slots:
                interval = normalize_slot(slot, requirement.day)
                start = max(0, interval.start_minutes - offset)
                end = min(horizon, interval.end_minutes - offset)
                for minute in range(start, end):
                    timeline[minute] += 1

        original = normalize_slot(requirement.slot, requirement.day).duration_minutes
        shortest = min(self.policy.min_alternative_minutes, original / 2)
        alternatives = []

        duration = original
        while duration >= shortest and duration > 0:
            for start in range(0, MINUTES_PER_DAY, step):
                if start + duration > horizon:
                    break
                headcount = min(timeline[start:start + duration])
                if headcount >= requirement.min_employees:
                    alternatives.append(
                        ShiftAlternative(
                            start_time=minutes_to_time(start),
                            end_time=minutes_to_time(start + duration),
                            duration_hours=duration / 60.0,
                            available_employees=headcount,
                            score=headcount * (duration / original),
                        )
                    )
            duration -= step

        alternatives.sort(key=lambda a: a.score, reverse=True)
        return alternatives[: self.policy.max_alternatives]

    def suggest_gap_fills(
        self,
        unfulfilled: list[UnfulfilledRequirement],
        availabilities: list[WeeklyAvailability],
        assignments: list[ShiftAssignment],
    ) -> list[GapFill]:
        """Best candidate per gap among employees not working that day.

        Run constraints (weekly cap, ranking fairness history) are ignored;
        confidence is the candidate's coverage percentage.
        """
        assigned_by_day: dict[str, set[str]] = defaultdict(set)
        for assignment in assignments:
            assigned_by_day[assignment.day].add(assignment.employee_id)

        fills = []
        for gap in unfulfilled:
            pool = [a for a in availabilities if a.employee_id not in assigned_by_day[gap.day]]
            ranked = self.ranker.rank(self.finder.find_candidates(gap.as_daily_requirement(), pool))
            if not ranked:
                logger.debug("No gap fill for %s %s-%s", gap.day, gap.start_time, gap.end_time)
                continue
            best = ranked[0]
            fills.append(GapFill(gap=gap, candidate=best, confidence=best.coverage_percentage))
        return fills

    def resolution_strategies(
        self,
        unfulfilled: list[UnfulfilledRequirement],
        availabilities: list[WeeklyAvailability],
    ) -> list[Resolution]:
        """Ways an administrator could close each gap."""
        resolutions = []
        for gap in unfulfilled:
            requirement = gap.as_daily_requirement()
            pool = [
                a for a in availabilities
                if a.department_id is None or a.department_id == gap.department_id
            ]
            resolution = Resolution(gap=gap)

            alternatives = self.suggest_shift_alternatives(requirement, pool)
            if alternatives:
                resolution.strategies.append(
                    ResolutionStrategy(
                        type="time_adjustment",
                        description="Adjust shift times to match available employee schedules",
                        alternatives=alternatives[:3],
                    )
                )

            if gap.required > gap.assigned > 0:
                resolution.strategies.append(
                    ResolutionStrategy(
                        type="split_shift",
                        description=(
                            "Split the shift into smaller segments that can be covered "
                            "by available employees"
                        ),
                        suggestion=(
                            f"Consider splitting the {gap.start_time}-{gap.end_time} shift "
                            "into 2-3 shorter shifts"
                        ),
                    )
                )

            candidates = {c.employee_id for c in self.finder.find_candidates(requirement, pool)}
            if gap.required > len(candidates):
                resolution.strategies.append(
                    ResolutionStrategy(
                        type="reduce_requirements",
                        description="Reduce minimum employee requirements for this shift",
                        suggestion=(
                            f"Consider reducing from {gap.required} to "
                            f"{max(1, len(candidates))} employees"
                        ),
                    )
                )

            resolution.strategies.append(
                ResolutionStrategy(
                    type="request_availability",
                    description="Request additional availability from employees",
                    suggestion=(
                        f"Contact employees to submit availability for "
                        f"{gap.day} {gap.start_time}-{gap.end_time}"
                    ),
                )
            )
            resolutions.append(resolution)
        return resolutions
