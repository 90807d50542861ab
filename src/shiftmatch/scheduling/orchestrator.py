"""Week-level scheduling run.

This module provides the ScheduleOrchestrator that drives one run for a
(company, department, week) snapshot:
- Validates the snapshot's shape
- Estimates capacity up front (informational only)
- Schedules each day Sunday to Saturday, earliest slots first
- Checks the result for conflicts and builds the report

Assignments are only returned once the whole run succeeded; nothing is
persisted here.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from shiftmatch.analysis.gap_analyzer import CapacityAnalysis, GapAnalyzer, GapFill
from shiftmatch.analysis.report import ReportBuilder, ScheduleReport
from shiftmatch.domain.errors import SchedulingInputError
from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    Conflict,
    DailyRequirement,
    ShiftAssignment,
    ShiftRequirement,
    UnfulfilledRequirement,
    WeeklyAvailability,
)
from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.domain.time_intervals import normalize_slot, start_of_day_minutes
from shiftmatch.scheduling.allocator import CoverageAllocator, SlotCoverage
from shiftmatch.scheduling.candidate_finder import CandidateFinder
from shiftmatch.scheduling.constraints import ConstraintTracker
from shiftmatch.scheduling.ranker import CandidateRanker
from shiftmatch.validation.conflicts import ConflictValidator
from shiftmatch.validation.validator import InputValidator, raise_for_result

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Lifecycle of a scheduling run."""

    IDLE = "idle"
    ANALYZING_CONSTRAINTS = "analyzing_constraints"
    PER_DAY = "per_day"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ScheduleRunResult:
    """Everything a finished run produced.

    Attributes:
        week_start: Sunday the run was for.
        assignments: Assignments to be stored by the caller, in the order
            they were made.
        conflicts: Double bookings found among the assignments.
        unfulfilled: Slots that got fewer employees than required.
        report: Advisory report.
        analysis: Up-front capacity estimate.
        slot_coverage: Minute coverage of every processed slot.
        gap_fills: Suggested (not applied) fills for unfulfilled slots.
        state: State the run ended in.
    """

    week_start: date
    assignments: list[ShiftAssignment] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    unfulfilled: list[UnfulfilledRequirement] = field(default_factory=list)
    report: Optional[ScheduleReport] = None
    analysis: Optional[CapacityAnalysis] = None
    slot_coverage: list[tuple[DailyRequirement, SlotCoverage]] = field(default_factory=list)
    gap_fills: list[GapFill] = field(default_factory=list)
    state: RunState = RunState.DONE

    def assignments_by_employee(self) -> dict[str, list[ShiftAssignment]]:
        """Each employee's assignments for the week, in assignment order."""
        grouped: dict[str, list[ShiftAssignment]] = {}
        for assignment in self.assignments:
            grouped.setdefault(assignment.employee_id, []).append(assignment)
        return grouped

    def to_dict(self) -> dict:
        return {
            "weekStartDate": self.week_start.isoformat(),
            "state": self.state.value,
            "assignments": [a.to_dict() for a in self.assignments],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "unfulfilledRequirements": [u.to_dict() for u in self.unfulfilled],
            "report": self.report.to_dict() if self.report else None,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "slotCoverage": [
                {
                    "day": requirement.day,
                    "startTime": requirement.start_time,
                    "endTime": requirement.end_time,
                    **coverage.to_dict(),
                }
                for requirement, coverage in self.slot_coverage
            ],
            "gapFills": [g.to_dict() for g in self.gap_fills],
        }


class ScheduleOrchestrator:
    """Runs a full week of scheduling.

    An instance handles one run at a time: ``state`` follows the run in
    progress. Concurrent runs need their own instances. Everything else a
    run touches (constraint tracker, result) is created per call, and
    ``ScheduleRunResult.state`` keeps the state each run ended in.

    Example:
        >>> orchestrator = ScheduleOrchestrator()
        >>> result = orchestrator.run(requirements, availabilities, date(2024, 1, 7))
        >>> len(result.unfulfilled)
        0
    """

    def __init__(
        self,
        policy: Optional[MatchingPolicy] = None,
        finder: Optional[CandidateFinder] = None,
        ranker: Optional[CandidateRanker] = None,
        allocator: Optional[CoverageAllocator] = None,
        conflict_validator: Optional[ConflictValidator] = None,
        gap_analyzer: Optional[GapAnalyzer] = None,
        report_builder: Optional[ReportBuilder] = None,
        input_validator: Optional[InputValidator] = None,
    ):
        self.policy = policy or MatchingPolicy()
        self.finder = finder or CandidateFinder(self.policy)
        self.ranker = ranker or CandidateRanker(self.policy)
        self.allocator = allocator or CoverageAllocator(self.policy)
        self.conflict_validator = conflict_validator or ConflictValidator()
        self.gap_analyzer = gap_analyzer or GapAnalyzer(self.policy, self.finder, self.ranker)
        self.report_builder = report_builder or ReportBuilder()
        self.input_validator = input_validator or InputValidator(self.policy)
        self.state = RunState.IDLE

    def run(
        self,
        requirements: list[ShiftRequirement],
        availabilities: list[WeeklyAvailability],
        week_start: date,
        company_id: Optional[str] = None,
        department_id: Optional[str] = None,
    ) -> ScheduleRunResult:
        """Schedule one week.

        Args:
            requirements: Requirement documents for the department(s).
            availabilities: Availability records for ``week_start``.
            week_start: Sunday anchoring the week.
            company_id: If given, only records for this company are used.
            department_id: If given, only requirements and employees of
                this department are used.

        Returns:
            ScheduleRunResult in the DONE state.

        Raises:
            SchedulingInputError: If the snapshot is malformed. The run
                moves to FAILED and no assignments are returned.
        """
        self.state = RunState.IDLE
        try:
            return self._run(requirements, availabilities, week_start, company_id, department_id)
        except SchedulingInputError as e:
            self.state = RunState.FAILED
            logger.error("Scheduling run for week %s failed: %s", week_start, e)
            raise
        except Exception:
            self.state = RunState.FAILED
            logger.exception("Scheduling run for week %s failed unexpectedly", week_start)
            raise

    def _run(
        self,
        requirements: list[ShiftRequirement],
        availabilities: list[WeeklyAvailability],
        week_start: date,
        company_id: Optional[str],
        department_id: Optional[str],
    ) -> ScheduleRunResult:
        raise_for_result(self.input_validator.check_run_inputs(requirements, availabilities, week_start))

        requirements = [
            r for r in requirements
            if (company_id is None or r.company_id == company_id)
            and (department_id is None or r.department_id == department_id)
        ]
        pool = [
            a for a in availabilities
            if (company_id is None or a.company_id == company_id)
            and (department_id is None or a.department_id == department_id)
        ]
        logger.info(
            "Scheduling week %s: %d requirement documents, %d employees",
            week_start,
            len(requirements),
            len(pool),
        )

        self.state = RunState.ANALYZING_CONSTRAINTS
        analysis = self.gap_analyzer.analyze(requirements, pool)

        self.state = RunState.PER_DAY
        result = ScheduleRunResult(week_start=week_start, analysis=analysis)
        tracker = ConstraintTracker(
            [a.employee_id for a in pool],
            max_weekly_hours=self.policy.max_weekly_hours,
        )
        total_slots = 0
        for day in DAYS_OF_WEEK:
            total_slots += self._schedule_day(day, requirements, pool, tracker, result)

        self.state = RunState.REPORTING
        result.conflicts = self.conflict_validator.validate(result.assignments)
        result.gap_fills = self.gap_analyzer.suggest_gap_fills(
            result.unfulfilled, pool, result.assignments
        )
        result.report = self.report_builder.build(
            result.assignments,
            result.conflicts,
            result.unfulfilled,
            total_slots,
            analysis,
        )

        self.state = RunState.DONE
        result.state = self.state
        logger.info(
            "Week %s done: %d assignments to %d of %d employees, "
            "%d unfulfilled slots, %d conflicts",
            week_start,
            len(result.assignments),
            len(tracker.employees_used()),
            len(pool),
            len(result.unfulfilled),
            len(result.conflicts),
        )
        return result

    def _schedule_day(
        self,
        day: str,
        requirements: list[ShiftRequirement],
        pool: list[WeeklyAvailability],
        tracker: ConstraintTracker,
        result: ScheduleRunResult,
    ) -> int:
        """Fill every slot of one day. Returns the number of slots processed."""
        tracker.start_day(day)
        daily = self.daily_requirements(day, requirements)
        made = 0

        for requirement in daily:
            candidates = self.finder.find_candidates(requirement, pool, tracker)
            if not candidates:
                logger.warning("No candidates for %r", requirement)

            selected = self.allocator.select(requirement, self.ranker.rank(candidates))
            for candidate in selected:
                assignment = self.allocator.to_assignment(requirement, candidate, result.week_start)
                tracker.record(assignment)
                result.assignments.append(assignment)
                made += 1

            coverage = self.allocator.coverage_stats(requirement, selected)
            result.slot_coverage.append((requirement, coverage))
            logger.debug("%r coverage: %s", requirement, coverage)

            if len(selected) < requirement.min_employees:
                logger.warning(
                    "Unfulfilled %r: %d of %d assigned",
                    requirement,
                    len(selected),
                    requirement.min_employees,
                )
                result.unfulfilled.append(
                    UnfulfilledRequirement(
                        day=day,
                        department_id=requirement.department_id,
                        start_time=requirement.start_time,
                        end_time=requirement.end_time,
                        required=requirement.min_employees,
                        assigned=len(selected),
                        coverage_percentage=coverage.coverage_percentage,
                        slot=requirement.slot,
                    )
                )

        if daily:
            logger.info("%s: %d slots, %d assignments", day.capitalize(), len(daily), made)
        return len(daily)

    @staticmethod
    def daily_requirements(day: str, requirements: list[ShiftRequirement]) -> list[DailyRequirement]:
        """Collect a day's slots across documents in processing order.

        Earlier start of day goes first, then earlier end, then the order
        the slots were listed in.
        """
        daily = []
        order = 0
        for requirement in requirements:
            for slot in requirement.get_slots(day):
                daily.append(
                    DailyRequirement(
                        day=day,
                        company_id=requirement.company_id,
                        department_id=requirement.department_id,
                        slot=slot,
                        order=order,
                    )
                )
                order += 1

        daily.sort(
            key=lambda r: (
                start_of_day_minutes(r.slot),
                normalize_slot(r.slot, day).end_minutes,
                r.order,
            )
        )
        return daily
