"""Tunable matching policy.

Thresholds used by matching, ranking, allocation and reporting live here
rather than in the engine, so they can be adjusted and tested
independently of the scheduling code.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class MatchingPolicy:
    """Thresholds and limits for one scheduling run.

    Attributes:
        exact_match_threshold: Coverage percentage at or above which a
            candidate counts as an exact match.
        min_overlap_minutes: Shortest overlap that produces a candidate.
        coverage_tie_points: Coverage differences up to this many points
            are ties when ranking.
        hours_tie: Accumulated-hours differences up to this many hours are
            ties when ranking.
        max_weekly_hours: Optional cap on hours assigned to one employee in
            a run. None disables the cap.
        night_start_hour: First hour of the night band.
        night_end_hour: First hour after the night band (next morning).
        slot_granularity_minutes: Grid every slot time must sit on.
        max_daily_availability_hours: Most hours an employee may declare
            for one day.
        coverage_requirement_percentage: Minute coverage a slot needs to be
            reported as meeting its requirement.
        low_availability_hours: Average declared hours per employee below
            which a recommendation is raised.
        min_alternative_minutes: Shortest alternative window to suggest.
        max_alternatives: Number of alternative windows to suggest.
    """

    exact_match_threshold: float = 95.0
    min_overlap_minutes: int = 30
    coverage_tie_points: float = 5.0
    hours_tie: float = 1.0
    max_weekly_hours: Optional[float] = None
    night_start_hour: int = 18
    night_end_hour: int = 6
    slot_granularity_minutes: int = 30
    max_daily_availability_hours: float = 12.0
    coverage_requirement_percentage: float = 80.0
    low_availability_hours: float = 10.0
    min_alternative_minutes: int = 240
    max_alternatives: int = 5

    def __post_init__(self):
        if not 0 < self.exact_match_threshold <= 100:
            raise ValueError("exact_match_threshold must be in (0, 100]")
        if self.min_overlap_minutes < 1:
            raise ValueError("min_overlap_minutes must be positive")
        if self.coverage_tie_points < 0 or self.hours_tie < 0:
            raise ValueError("tie tolerances cannot be negative")
        if self.max_weekly_hours is not None and self.max_weekly_hours <= 0:
            raise ValueError("max_weekly_hours must be positive or None")
        if not (0 <= self.night_end_hour <= self.night_start_hour <= 24):
            raise ValueError("night band must satisfy 0 <= end <= start <= 24")
        if self.slot_granularity_minutes < 1 or 60 % self.slot_granularity_minutes:
            raise ValueError("slot_granularity_minutes must divide an hour")

    def is_meaningful_overlap(self, overlap_minutes: int) -> bool:
        """Check if an overlap is long enough to be worth assigning."""
        return overlap_minutes >= self.min_overlap_minutes

    def is_exact_match(self, coverage_percentage: float) -> bool:
        """Check if a coverage percentage counts as an exact match."""
        return coverage_percentage >= self.exact_match_threshold

    def is_night_hour(self, hour: int) -> bool:
        """Check if a start hour falls in the night band."""
        return hour >= self.night_start_hour or hour < self.night_end_hour
