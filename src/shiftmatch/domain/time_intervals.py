"""Time interval normalization on the weekly minute axis.

Every slot is placed on a 7 x 1440 minute axis where minute 0 is Sunday
00:00. Overnight and multi-day spans are unrolled forward so the end is
always after the start. All day-of-week arithmetic in the engine goes
through this module.
"""

import re
from dataclasses import dataclass
from typing import Optional

from shiftmatch.domain.errors import SchedulingInputError
from shiftmatch.domain.models import (
    DAYS_OF_WEEK,
    MINUTES_PER_DAY,
    MINUTES_PER_WEEK,
    TimeSlot,
)

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


@dataclass(frozen=True)
class NormalizedInterval:
    """A half-open interval [start_minutes, end_minutes) on the weekly axis."""

    start_minutes: int
    end_minutes: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60.0

    def overlap_minutes(self, other: "NormalizedInterval") -> int:
        """Minutes shared with another interval (0 when disjoint)."""
        start = max(self.start_minutes, other.start_minutes)
        end = min(self.end_minutes, other.end_minutes)
        return max(0, end - start)

    def intersection(self, other: "NormalizedInterval") -> Optional["NormalizedInterval"]:
        """The shared interval, or None if the intervals do not intersect."""
        start = max(self.start_minutes, other.start_minutes)
        end = min(self.end_minutes, other.end_minutes)
        if start < end:
            return NormalizedInterval(start, end)
        return None

    def overlaps(self, other: "NormalizedInterval") -> bool:
        return self.start_minutes < other.end_minutes and other.start_minutes < self.end_minutes

    def __repr__(self) -> str:
        return (
            f"NormalizedInterval({minutes_to_time(self.start_minutes)}-"
            f"{minutes_to_time(self.end_minutes)}, {self.duration_minutes}min)"
        )


def parse_time(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight.

    Raises:
        SchedulingInputError: If the string is not a valid 24-hour time.
    """
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise SchedulingInputError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise SchedulingInputError(f"Invalid time {value!r}, out of range")
    return hours * 60 + minutes


def day_index(day: str) -> int:
    """Index of a day name in the week (Sunday is 0), case-insensitive."""
    try:
        return DAYS_OF_WEEK.index((day or "").strip().lower())
    except ValueError:
        raise SchedulingInputError(f"Invalid day name {day!r}") from None


def minutes_to_time(minutes: int) -> str:
    """Format an axis position as a clock time "HH:MM" (day is dropped)."""
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def normalize(start_time: str, start_day: str, end_time: str, end_day: str) -> NormalizedInterval:
    """Place a slot on the weekly minute axis.

    Both ends are offset by their day index. When the end does not land
    after the start it wraps forward: by one day when both ends are on the
    same day (overnight), by a whole week when the end day comes earlier in
    the week than the start day. Identical same-day times therefore
    normalize to a 24 hour span; callers reject those as zero-duration.

    Args:
        start_time: Start time "HH:MM".
        start_day: Start day name.
        end_time: End time "HH:MM".
        end_day: End day name.

    Returns:
        NormalizedInterval with end_minutes > start_minutes.
    """
    start_idx = day_index(start_day)
    end_idx = day_index(end_day)
    start = start_idx * MINUTES_PER_DAY + parse_time(start_time)
    end = end_idx * MINUTES_PER_DAY + parse_time(end_time)

    if end <= start:
        end += MINUTES_PER_DAY if start_idx == end_idx else MINUTES_PER_WEEK

    return NormalizedInterval(start, end)


def normalize_slot(slot: TimeSlot, default_day: Optional[str] = None) -> NormalizedInterval:
    """Normalize a TimeSlot, falling back to ``default_day`` for missing days."""
    return normalize(
        slot.start_time,
        slot.start_day or default_day,
        slot.end_time,
        slot.end_day or slot.start_day or default_day,
    )


def is_zero_duration(slot: TimeSlot) -> bool:
    """True when start and end are the same time on the same day."""
    return (
        slot.start_time == slot.end_time
        and (slot.start_day or "").lower() == (slot.end_day or slot.start_day or "").lower()
    )


def is_on_grid(value: str, granularity_minutes: int = 30) -> bool:
    """Check that a time sits on the given minute grid."""
    return parse_time(value) % granularity_minutes == 0


def start_of_day_minutes(slot: TimeSlot) -> int:
    """Minutes since midnight at which the slot starts."""
    return parse_time(slot.start_time)
