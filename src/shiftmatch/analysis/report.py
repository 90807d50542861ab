"""Run report building.

The report summarizes a finished run for a presentation layer: totals
and success rate, a per-day breakdown, per-employee utilization, a
fairness score and the capacity recommendations.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from shiftmatch.analysis.gap_analyzer import CapacityAnalysis, Recommendation
from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    Conflict,
    ShiftAssignment,
    UnfulfilledRequirement,
)


@dataclass
class FairnessMetrics:
    """Metrics for evaluating how evenly hours were spread.

    Attributes:
        hours_per_employee: Dict mapping employee ID to assigned hours.
        days_per_employee: Dict mapping employee ID to days worked.
        avg_hours: Average hours across assigned employees.
        hours_std_dev: Standard deviation of hours.
        hours_variance: Variance in hours between employees.
        min_hours: Minimum hours assigned to any employee.
        max_hours: Maximum hours assigned to any employee.
        fairness_score: Overall fairness score (0-100, higher is fairer).
    """

    hours_per_employee: dict[str, float] = field(default_factory=dict)
    days_per_employee: dict[str, int] = field(default_factory=dict)
    avg_hours: float = 0.0
    hours_std_dev: float = 0.0
    hours_variance: float = 0.0
    min_hours: float = 0.0
    max_hours: float = 0.0
    fairness_score: float = 100.0

    @classmethod
    def calculate(
        cls,
        weekly_hours: dict[str, float],
        weekly_days: dict[str, int],
    ) -> "FairnessMetrics":
        """Calculate fairness metrics from per-employee weekly totals."""
        if not weekly_hours:
            return cls()

        values = list(weekly_hours.values())
        avg = sum(values) / len(values)
        variance = sum((h - avg) ** 2 for h in values) / len(values)
        std_dev = variance ** 0.5

        # 100 = no spread; 4h std dev or more scores 0
        max_acceptable_std_dev = 4.0
        score = max(0.0, 100.0 - (std_dev / max_acceptable_std_dev) * 100.0)

        return cls(
            hours_per_employee=dict(weekly_hours),
            days_per_employee=dict(weekly_days),
            avg_hours=avg,
            hours_std_dev=std_dev,
            hours_variance=variance,
            min_hours=min(values),
            max_hours=max(values),
            fairness_score=score,
        )

    def to_dict(self) -> dict:
        return {
            "averageHours": round(self.avg_hours, 2),
            "minHours": round(self.min_hours, 2),
            "maxHours": round(self.max_hours, 2),
            "hoursStdDev": round(self.hours_std_dev, 2),
            "fairnessScore": round(self.fairness_score, 1),
        }


@dataclass
class ReportSummary:
    total_shifts: int = 0
    total_conflicts: int = 0
    total_unfulfilled: int = 0
    fulfilled_slots: int = 0
    total_hours: float = 0.0
    average_shift_length: float = 0.0
    success_rate: float = 100.0

    def to_dict(self) -> dict:
        return {
            "totalShifts": self.total_shifts,
            "totalConflicts": self.total_conflicts,
            "totalUnfulfilled": self.total_unfulfilled,
            "fulfilledSlots": self.fulfilled_slots,
            "totalHours": round(self.total_hours, 1),
            "averageShiftLength": round(self.average_shift_length, 1),
            "successRate": round(self.success_rate, 1),
        }


@dataclass
class DayBreakdown:
    shifts: int = 0
    conflicts: int = 0
    unfulfilled: int = 0
    hours: float = 0.0
    employees: int = 0

    def to_dict(self) -> dict:
        return {
            "shifts": self.shifts,
            "conflicts": self.conflicts,
            "unfulfilled": self.unfulfilled,
            "hours": round(self.hours, 1),
            "employees": self.employees,
        }


@dataclass
class EmployeeUtilization:
    employee_id: str
    total_hours: float = 0.0
    shift_count: int = 0
    days_worked: list[str] = field(default_factory=list)

    @property
    def average_shift_length(self) -> float:
        if not self.shift_count:
            return 0.0
        return self.total_hours / self.shift_count

    def to_dict(self) -> dict:
        return {
            "totalHours": round(self.total_hours, 1),
            "shiftsCount": self.shift_count,
            "averageShiftLength": round(self.average_shift_length, 1),
            "daysWorked": list(self.days_worked),
        }


@dataclass
class ScheduleReport:
    """Advisory report for one run. It never alters the schedule."""

    summary: ReportSummary
    daily_breakdown: dict[str, DayBreakdown] = field(default_factory=dict)
    employee_utilization: dict[str, EmployeeUtilization] = field(default_factory=dict)
    fairness: FairnessMetrics = field(default_factory=FairnessMetrics)
    recommendations: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "dailyBreakdown": {day: b.to_dict() for day, b in self.daily_breakdown.items()},
            "employeeUtilization": {
                eid: u.to_dict() for eid, u in self.employee_utilization.items()
            },
            "fairness": self.fairness.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


class ReportBuilder:
    """Builds a ScheduleReport from the outputs of a run."""

    def build(
        self,
        assignments: list[ShiftAssignment],
        conflicts: list[Conflict],
        unfulfilled: list[UnfulfilledRequirement],
        total_slots: int,
        analysis: Optional[CapacityAnalysis] = None,
    ) -> ScheduleReport:
        """Build the report.

        Args:
            assignments: All assignments produced by the run.
            conflicts: Conflicts found among them.
            unfulfilled: Slots that got fewer employees than required.
            total_slots: Number of requirement slots processed.
            analysis: Capacity analysis whose recommendations are carried over.

        Returns:
            ScheduleReport. Success rate is fulfilled slots over all slots,
            100 when the run had no slots.
        """
        total_hours = sum(a.duration_hours for a in assignments)
        fulfilled = max(0, total_slots - len(unfulfilled))
        graded = fulfilled + len(unfulfilled)

        summary = ReportSummary(
            total_shifts=len(assignments),
            total_conflicts=len(conflicts),
            total_unfulfilled=len(unfulfilled),
            fulfilled_slots=fulfilled,
            total_hours=total_hours,
            average_shift_length=total_hours / len(assignments) if assignments else 0.0,
            success_rate=fulfilled / graded * 100.0 if graded else 100.0,
        )

        utilization = self._utilization(assignments)
        fairness = FairnessMetrics.calculate(
            {eid: u.total_hours for eid, u in utilization.items()},
            {eid: len(u.days_worked) for eid, u in utilization.items()},
        )

        return ScheduleReport(
            summary=summary,
            daily_breakdown=self._daily_breakdown(assignments, conflicts, unfulfilled),
            employee_utilization=utilization,
            fairness=fairness,
            recommendations=list(analysis.recommendations) if analysis else [],
        )

    @staticmethod
    def _daily_breakdown(
        assignments: list[ShiftAssignment],
        conflicts: list[Conflict],
        unfulfilled: list[UnfulfilledRequirement],
    ) -> dict[str, DayBreakdown]:
        breakdown = {day: DayBreakdown() for day in DAYS_OF_WEEK}
        employees: dict[str, set[str]] = defaultdict(set)

        for assignment in assignments:
            day = breakdown[assignment.day]
            day.shifts += 1
            day.hours += assignment.duration_hours
            employees[assignment.day].add(assignment.employee_id)
        for conflict in conflicts:
            breakdown[conflict.day].conflicts += 1
        for gap in unfulfilled:
            breakdown[gap.day].unfulfilled += 1

        for day_name, ids in employees.items():
            breakdown[day_name].employees = len(ids)
        return breakdown

    @staticmethod
    def _utilization(assignments: list[ShiftAssignment]) -> dict[str, EmployeeUtilization]:
        utilization: dict[str, EmployeeUtilization] = {}
        for assignment in assignments:
            entry = utilization.setdefault(
                assignment.employee_id,
                EmployeeUtilization(employee_id=assignment.employee_id),
            )
            entry.total_hours += assignment.duration_hours
            entry.shift_count += 1
            if assignment.day not in entry.days_worked:
                entry.days_worked.append(assignment.day)
        return utilization
