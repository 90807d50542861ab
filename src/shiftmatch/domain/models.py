"""Domain models for the shift scheduling engine.

This module contains the plain data structures the engine consumes
(weekly availability, shift requirements) and produces (shift assignments,
conflicts, unfulfilled requirements). Nothing here performs I/O; the
``from_dict`` constructors accept the document shape used by the
persistence layer so records can be handed to the engine as-is.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

DAYS_OF_WEEK = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

MINUTES_PER_DAY = 24 * 60
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY


def day_key(day: str) -> str:
    """Normalize a day name used as a mapping key ("Monday " -> "monday").

    Unknown names are kept (lowercased) so validation can report them.
    """
    return day.strip().lower()


class ShiftType(Enum):
    """Day/night label attached to slots."""

    DAY = "day"
    NIGHT = "night"


class ConflictType(Enum):
    """Kinds of post-hoc assignment conflicts."""

    OVERLAP = "overlap"
    DUPLICATE = "duplicate"


@dataclass
class TimeSlot:
    """A declared window of availability.

    Attributes:
        start_time: Start time of day as "HH:MM".
        end_time: End time of day as "HH:MM".
        start_day: Day name the slot starts on.
        end_day: Day name the slot ends on (differs for multi-day spans).
        shift_type: Declared Day/Night tag, may be absent or stale.
        preference: Employee preference weight, higher is preferred.
    """

    start_time: str
    end_time: str
    start_day: str
    end_day: str
    shift_type: Optional[str] = None
    preference: int = 0

    @classmethod
    def from_dict(cls, data: dict, day: Optional[str] = None) -> "TimeSlot":
        """Create a slot from a stored document.

        Missing start/end days default to ``day`` (the day the slot is
        listed under).
        """
        return cls(
            start_time=data["startTime"],
            end_time=data["endTime"],
            start_day=data.get("startDay") or day,
            end_day=data.get("endDay") or data.get("startDay") or day,
            shift_type=data.get("shiftType"),
            preference=int(data.get("preference") or 0),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.start_day} {self.start_time}-"
            f"{self.end_day} {self.end_time})"
        )


@dataclass
class RequirementSlot(TimeSlot):
    """A required staffing window.

    Attributes:
        min_employees: Minimum number of employees to assign (>= 1).
    """

    min_employees: int = 1

    @classmethod
    def from_dict(cls, data: dict, day: Optional[str] = None) -> "RequirementSlot":
        return cls(
            start_time=data["startTime"],
            end_time=data["endTime"],
            start_day=data.get("startDay") or day,
            end_day=data.get("endDay") or data.get("startDay") or day,
            shift_type=data.get("shiftType"),
            preference=int(data.get("preference") or 0),
            min_employees=int(data.get("minEmployees", 1)),
        )


@dataclass
class DayAvailability:
    """Availability for a single day of the week."""

    available: bool = False
    slots: list[TimeSlot] = field(default_factory=list)
    note: str = ""

    @classmethod
    def unavailable(cls) -> "DayAvailability":
        """Create a day with no availability."""
        return cls(available=False)

    @classmethod
    def from_dict(cls, data: Optional[dict], day: str) -> "DayAvailability":
        if not data:
            return cls.unavailable()
        return cls(
            available=bool(data.get("available", False)),
            slots=[TimeSlot.from_dict(s, day) for s in data.get("slots") or []],
            note=data.get("note") or "",
        )

    def merge(self, other: "DayAvailability") -> "DayAvailability":
        """Combine two declarations for the same day."""
        return DayAvailability(
            available=self.available or other.available,
            slots=self.slots + other.slots,
            note=self.note or other.note,
        )


@dataclass
class WeeklyAvailability:
    """One employee's declared availability for one week.

    Attributes:
        employee_id: Employee reference.
        company_id: Company reference.
        week_start: First day (Sunday) of the 7-day cycle.
        days: Mapping from day name to DayAvailability.
        employee_name: Optional display name.
        department_id: Department the employee belongs to, if known.
    """

    employee_id: str
    company_id: str
    week_start: date
    days: dict[str, DayAvailability] = field(default_factory=dict)
    employee_name: Optional[str] = None
    department_id: Optional[str] = None

    def __post_init__(self):
        days: dict[str, DayAvailability] = {}
        for key, value in self.days.items():
            name = day_key(key)
            days[name] = days[name].merge(value) if name in days else value
        self.days = days

    def get_day(self, day: str) -> DayAvailability:
        """Get availability for a day name (unavailable if not declared)."""
        return self.days.get(day_key(day), DayAvailability.unavailable())

    @property
    def display_name(self) -> str:
        return self.employee_name or self.employee_id

    @classmethod
    def from_dict(cls, data: dict) -> "WeeklyAvailability":
        """Create from a stored availability document."""
        employee = data["employeeId"]
        if isinstance(employee, dict):
            employee_id = str(employee.get("_id") or employee.get("id"))
            employee_name = employee.get("name")
            department_id = employee.get("departmentId")
        else:
            employee_id = str(employee)
            employee_name = data.get("employeeName")
            department_id = data.get("departmentId")

        week_start = data["weekStartDate"]
        if isinstance(week_start, str):
            week_start = date.fromisoformat(week_start[:10])

        days = {day: DayAvailability.unavailable() for day in DAYS_OF_WEEK}
        for key, value in (data.get("days") or {}).items():
            name = day_key(key)
            parsed = DayAvailability.from_dict(value, name)
            days[name] = days[name].merge(parsed) if name in days else parsed

        return cls(
            employee_id=employee_id,
            company_id=str(data["companyId"]),
            week_start=week_start,
            days=days,
            employee_name=employee_name,
            department_id=str(department_id) if department_id is not None else None,
        )


@dataclass
class ShiftRequirement:
    """Per-day staffing requirements for one department."""

    company_id: str
    department_id: str
    days: dict[str, list[RequirementSlot]] = field(default_factory=dict)

    def __post_init__(self):
        days: dict[str, list[RequirementSlot]] = {}
        for key, slots in self.days.items():
            days.setdefault(day_key(key), []).extend(slots)
        self.days = days

    def get_slots(self, day: str) -> list[RequirementSlot]:
        return self.days.get(day_key(day), [])

    @property
    def slot_count(self) -> int:
        return sum(len(slots) for slots in self.days.values())

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftRequirement":
        """Create from a stored requirement document (one list per day name).

        Day keys are matched case-insensitively. Any other list-valued
        field is kept under its own name so validation rejects it as an
        invalid day instead of dropping its slots.
        """
        days: dict[str, list[RequirementSlot]] = {day: [] for day in DAYS_OF_WEEK}
        for key, value in data.items():
            name = day_key(key)
            if name in DAYS_OF_WEEK or isinstance(value, list):
                days.setdefault(name, []).extend(
                    RequirementSlot.from_dict(s, name) for s in value or []
                )
        return cls(
            company_id=str(data["companyId"]),
            department_id=str(data["departmentId"]),
            days=days,
        )


@dataclass(frozen=True)
class DailyRequirement:
    """A requirement slot bound to the day it is listed under.

    Attributes:
        day: Day being scheduled.
        company_id: Company the requirement belongs to.
        department_id: Department the requirement belongs to.
        slot: The required window and headcount.
        order: Position of the slot in the source documents, used as the
            final tie-break when slots start at the same minute.
    """

    day: str
    company_id: str
    department_id: str
    slot: RequirementSlot
    order: int = 0

    @property
    def start_time(self) -> str:
        return self.slot.start_time

    @property
    def end_time(self) -> str:
        return self.slot.end_time

    @property
    def min_employees(self) -> int:
        return self.slot.min_employees

    def __repr__(self) -> str:
        return (
            f"DailyRequirement({self.day} {self.slot.start_time}-{self.slot.end_time}, "
            f"min={self.slot.min_employees}, dept={self.department_id})"
        )


@dataclass(frozen=True)
class ShiftAssignment:
    """An employee assigned to (part of) a requirement slot.

    Start and end are the actual overlap with the employee's availability,
    which may be narrower than the requirement window.
    """

    employee_id: str
    company_id: str
    department_id: str
    week_start: date
    day: str
    start_time: str
    end_time: str
    duration_hours: float

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "companyId": self.company_id,
            "departmentId": self.department_id,
            "weekStartDate": self.week_start.isoformat(),
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationHours": self.duration_hours,
        }

    def __repr__(self) -> str:
        return (
            f"ShiftAssignment({self.employee_id}: {self.day} "
            f"{self.start_time}-{self.end_time}, {self.duration_hours:.2f}h)"
        )


@dataclass(frozen=True)
class Conflict:
    """A double booking found among assignments."""

    conflict_type: ConflictType
    employee_id: str
    day: str
    slot1: str
    slot2: str
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "type": self.conflict_type.value,
            "employee": self.employee_id,
            "day": self.day,
            "slot1": self.slot1,
            "slot2": self.slot2,
            "message": self.message,
        }


@dataclass(frozen=True)
class UnfulfilledRequirement:
    """A requirement slot that received fewer employees than required.

    ``slot`` keeps the original requirement window (days, declared type)
    so follow-up suggestions can match against it exactly.
    """

    day: str
    department_id: str
    start_time: str
    end_time: str
    required: int
    assigned: int
    coverage_percentage: float = 0.0
    slot: Optional[RequirementSlot] = field(default=None, compare=False, repr=False)

    @property
    def shortfall(self) -> int:
        return self.required - self.assigned

    def as_daily_requirement(self, company_id: str = "") -> DailyRequirement:
        """Rebuild the requirement slot this record was produced for."""
        slot = self.slot or RequirementSlot(
            start_time=self.start_time,
            end_time=self.end_time,
            start_day=self.day,
            end_day=self.day,
            min_employees=self.required,
        )
        return DailyRequirement(
            day=self.day,
            company_id=company_id,
            department_id=self.department_id,
            slot=slot,
        )

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "departmentId": self.department_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "required": self.required,
            "assigned": self.assigned,
            "shortfall": self.shortfall,
            "coveragePercentage": self.coverage_percentage,
        }
