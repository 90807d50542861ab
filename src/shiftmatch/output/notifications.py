"""Per-employee schedule summaries.

The engine does not deliver notifications. It hands each employee's
final assignments for the week to a notification collaborator in the
shape built here, with calendar dates resolved from the week start.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from shiftmatch.domain.models import DAYS_OF_WEEK, ShiftAssignment
from shiftmatch.domain.time_intervals import day_index, parse_time


@dataclass
class EmployeeScheduleSummary:
    """One employee's assignments for a week.

    Attributes:
        employee_id: ID of the employee.
        week_start: Sunday of the week.
        shifts: Assignments sorted by day and start time.
        employee_name: Optional display name.
    """

    employee_id: str
    week_start: date
    shifts: list[ShiftAssignment] = field(default_factory=list)
    employee_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.employee_name or self.employee_id

    @property
    def total_hours(self) -> float:
        return sum(s.duration_hours for s in self.shifts)

    @property
    def subject(self) -> str:
        return f"Your Shift Schedule for the Week of {self.week_start.isoformat()}"

    def date_for(self, day: str) -> date:
        """Calendar date of a day name within this week."""
        return self.week_start + timedelta(days=day_index(day))

    def shifts_by_day(self) -> dict[str, list[ShiftAssignment]]:
        """Shifts grouped by day name, days without shifts omitted."""
        grouped: dict[str, list[ShiftAssignment]] = {}
        for shift in self.shifts:
            grouped.setdefault(shift.day, []).append(shift)
        return {day: grouped[day] for day in DAYS_OF_WEEK if day in grouped}

    def day_lines(self) -> list[str]:
        """One line per working day, e.g. "Monday (2024-01-08): 09:00-17:00"."""
        lines = []
        for day, shifts in self.shifts_by_day().items():
            times = ", ".join(f"{s.start_time}-{s.end_time}" for s in shifts)
            lines.append(f"{day.capitalize()} ({self.date_for(day).isoformat()}): {times}")
        return lines

    def render_text(self) -> str:
        """Plain-text message body for the notification collaborator."""
        lines = [
            f"Hello {self.display_name},",
            "",
            f"Your shift schedule for the week starting {self.week_start.isoformat()} "
            "has been generated:",
            "",
        ]
        lines.extend(self.day_lines() or ["No shifts assigned for this week."])
        lines.extend(["", "If you have any questions, please contact your manager."])
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "weekStartDate": self.week_start.isoformat(),
            "totalHours": round(self.total_hours, 2),
            "shifts": [s.to_dict() for s in self.shifts],
        }


def build_employee_summaries(
    assignments: Iterable[ShiftAssignment],
    week_start: date,
    employee_names: Optional[dict[str, str]] = None,
) -> dict[str, EmployeeScheduleSummary]:
    """Group assignments into one summary per employee.

    Args:
        assignments: Final assignments of a run.
        week_start: Sunday of the week.
        employee_names: Optional mapping of employee ID to display name.

    Returns:
        Dict mapping employee ID to summary, sorted by employee ID.
    """
    names = employee_names or {}
    summaries: dict[str, EmployeeScheduleSummary] = {}
    for assignment in assignments:
        summary = summaries.get(assignment.employee_id)
        if summary is None:
            summary = EmployeeScheduleSummary(
                employee_id=assignment.employee_id,
                week_start=week_start,
                employee_name=names.get(assignment.employee_id),
            )
            summaries[assignment.employee_id] = summary
        summary.shifts.append(assignment)

    for summary in summaries.values():
        summary.shifts.sort(key=lambda s: (day_index(s.day), parse_time(s.start_time)))

    return {eid: summaries[eid] for eid in sorted(summaries)}
