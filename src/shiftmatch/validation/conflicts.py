"""Post-hoc double-booking detection.

Conflicts are reported, never corrected. Touching shifts (one ends at
the minute the next starts) are not a conflict.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from shiftmatch.domain.models import Conflict, ConflictType, ShiftAssignment
from shiftmatch.domain.time_intervals import NormalizedInterval, normalize

logger = logging.getLogger(__name__)


def _label(assignment: ShiftAssignment) -> str:
    return f"{assignment.start_time}-{assignment.end_time}"


def _interval(assignment: ShiftAssignment) -> NormalizedInterval:
    return normalize(assignment.start_time, assignment.day, assignment.end_time, assignment.day)


def _is_duplicate(a: ShiftAssignment, b: ShiftAssignment) -> bool:
    return (
        a.employee_id == b.employee_id
        and a.day == b.day
        and a.start_time == b.start_time
        and a.end_time == b.end_time
    )


class ConflictValidator:
    """Finds overlapping or duplicate assignments per employee and day.

    Example:
        >>> conflicts = ConflictValidator().validate(assignments)
        >>> [c.conflict_type for c in conflicts]
        [<ConflictType.OVERLAP: 'overlap'>]
    """

    def validate(self, assignments: Iterable[ShiftAssignment]) -> list[Conflict]:
        """Check a batch of assignments.

        Assignments are grouped by (employee, day) and sorted by start;
        each adjacent pair is a duplicate when identical and an overlap
        when the first ends after the second starts.
        """
        groups: dict[tuple[str, str], list[ShiftAssignment]] = defaultdict(list)
        for assignment in assignments:
            groups[(assignment.employee_id, assignment.day)].append(assignment)

        conflicts = []
        for _, shifts in sorted(groups.items()):
            ordered = sorted(
                shifts,
                key=lambda a: (_interval(a).start_minutes, _interval(a).end_minutes),
            )
            for current, following in zip(ordered, ordered[1:]):
                conflict = self._compare(current, following)
                if conflict is not None:
                    conflicts.append(conflict)

        if conflicts:
            logger.warning("Found %d scheduling conflicts", len(conflicts))
        return conflicts

    def check_new_assignment(
        self,
        existing: Iterable[ShiftAssignment],
        new: ShiftAssignment,
    ) -> list[Conflict]:
        """Conflicts a manually added shift would create.

        Args:
            existing: Assignments already on record.
            new: The shift about to be added.

        Returns:
            One conflict per existing same-day shift of the employee that
            the new shift duplicates or overlaps.
        """
        new_interval = _interval(new)
        conflicts = []
        for assignment in existing:
            if assignment.employee_id != new.employee_id or assignment.day != new.day:
                continue
            if _is_duplicate(assignment, new):
                conflicts.append(self._conflict(ConflictType.DUPLICATE, assignment, new))
            elif _interval(assignment).overlaps(new_interval):
                conflicts.append(self._conflict(ConflictType.OVERLAP, assignment, new))
        return conflicts

    def _compare(self, current: ShiftAssignment, following: ShiftAssignment) -> Optional[Conflict]:
        if _is_duplicate(current, following):
            return self._conflict(ConflictType.DUPLICATE, current, following)
        if _interval(current).end_minutes > _interval(following).start_minutes:
            return self._conflict(ConflictType.OVERLAP, current, following)
        return None

    @staticmethod
    def _conflict(kind: ConflictType, first: ShiftAssignment, second: ShiftAssignment) -> Conflict:
        if kind is ConflictType.DUPLICATE:
            message = f"Duplicate shift {_label(first)} on {first.day}"
        else:
            message = f"Shift {_label(first)} overlaps {_label(second)} on {first.day}"
        return Conflict(
            conflict_type=kind,
            employee_id=first.employee_id,
            day=first.day,
            slot1=_label(first),
            slot2=_label(second),
            message=message,
        )
