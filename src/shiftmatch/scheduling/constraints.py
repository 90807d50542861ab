"""Per-run employee constraint tracking.

The tracker is the only mutable state of a scheduling run. The
orchestrator owns it, resets the daily flags once per day and records
each assignment through ``record``; matching code only reads from it.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from shiftmatch.domain.models import ShiftAssignment


@dataclass
class EmployeeConstraintState:
    """Tracks an employee's state throughout the run.

    Attributes:
        employee_id: ID of the employee.
        current_hours: Hours assigned so far this week.
        assigned_days: Day names the employee already works.
        assigned_today: True once the employee got a shift on the day
            currently being scheduled.
        max_weekly_hours: Optional weekly cap.
    """

    employee_id: str
    current_hours: float = 0.0
    assigned_days: list[str] = field(default_factory=list)
    assigned_today: bool = False
    max_weekly_hours: Optional[float] = None

    @property
    def is_available(self) -> bool:
        """Whether the employee may receive another shift today."""
        if self.assigned_today:
            return False
        if self.max_weekly_hours is not None and self.current_hours >= self.max_weekly_hours:
            return False
        return True

    def add_shift(self, day: str, hours: float) -> None:
        """Record a shift being added."""
        self.current_hours += hours
        self.assigned_today = True
        if day not in self.assigned_days:
            self.assigned_days.append(day)


class ConstraintTracker:
    """Running per-employee totals for one scheduling run.

    Example:
        >>> tracker = ConstraintTracker(["E1", "E2"])
        >>> tracker.start_day("monday")
        >>> tracker.record(assignment)
        >>> tracker.is_available("E1")
        False
    """

    def __init__(
        self,
        employee_ids: Iterable[str] = (),
        max_weekly_hours: Optional[float] = None,
    ):
        self.max_weekly_hours = max_weekly_hours
        self.current_day: Optional[str] = None
        self._states: dict[str, EmployeeConstraintState] = {}
        for employee_id in employee_ids:
            self.get(employee_id)

    def get(self, employee_id: str) -> EmployeeConstraintState:
        """Get (creating if needed) the state for an employee."""
        state = self._states.get(employee_id)
        if state is None:
            state = EmployeeConstraintState(
                employee_id=employee_id,
                max_weekly_hours=self.max_weekly_hours,
            )
            self._states[employee_id] = state
        return state

    def start_day(self, day: str) -> None:
        """Reset every employee's "assigned today" flag for a new day."""
        self.current_day = day
        for state in self._states.values():
            state.assigned_today = False

    def is_available(self, employee_id: str) -> bool:
        return self.get(employee_id).is_available

    def current_hours(self, employee_id: str) -> float:
        return self.get(employee_id).current_hours

    def record(self, assignment: ShiftAssignment) -> None:
        """Apply an assignment to the employee's running totals."""
        self.get(assignment.employee_id).add_shift(assignment.day, assignment.duration_hours)

    def employees_used(self) -> list[str]:
        """IDs of employees with at least one assignment, in first-seen order."""
        return [eid for eid, state in self._states.items() if state.current_hours > 0]
