"""Tests for coverage allocation."""

from datetime import date

import pytest

from shiftmatch.domain.models import DailyRequirement, RequirementSlot
from shiftmatch.scheduling.allocator import CoverageAllocator
from shiftmatch.scheduling.candidate_finder import Candidate

WEEK = date(2024, 1, 7)  # Sunday
MONDAY = 1440


def at(clock: str) -> int:
    """Monday clock time to weekly-axis minutes."""
    hours, minutes = clock.split(":")
    return MONDAY + int(hours) * 60 + int(minutes)


def create_requirement(start: str = "09:00", end: str = "17:00", min_employees: int = 1) -> DailyRequirement:
    return DailyRequirement(
        day="monday",
        company_id="C1",
        department_id="D1",
        slot=RequirementSlot(start, end, "monday", "monday", min_employees=min_employees),
    )


def create_candidate(employee_id: str, start: str, end: str, total_minutes: int = 480) -> Candidate:
    overlap = at(end) - at(start)
    coverage = overlap / total_minutes * 100.0
    return Candidate(
        employee_id=employee_id,
        actual_start_minutes=at(start),
        actual_end_minutes=at(end),
        overlap_minutes=overlap,
        coverage_percentage=coverage,
        exact_match=coverage >= 95.0,
    )


@pytest.fixture
def allocator():
    return CoverageAllocator()


def ids(candidates):
    return [c.employee_id for c in candidates]


class TestExactPolicy:
    """Tests for selection when exact matches exist."""

    def test_takes_top_exact_matches(self, allocator):
        requirement = create_requirement(min_employees=2)
        ranked = [
            create_candidate("A", "09:00", "17:00"),
            create_candidate("B", "09:00", "17:00"),
            create_candidate("C", "09:00", "17:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["A", "B"]

    def test_never_exceeds_min_employees(self, allocator):
        requirement = create_requirement(min_employees=1)
        ranked = [create_candidate(e, "09:00", "17:00") for e in "ABCD"]

        assert len(allocator.select(requirement, ranked)) == 1

    def test_does_not_top_up_with_partials(self, allocator):
        requirement = create_requirement(min_employees=3)
        ranked = [
            create_candidate("A", "09:00", "17:00"),
            create_candidate("B", "09:00", "13:00"),
            create_candidate("C", "13:00", "17:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["A"]

    def test_same_employee_is_selected_once(self, allocator):
        requirement = create_requirement(min_employees=2)
        ranked = [
            create_candidate("A", "09:00", "17:00"),
            create_candidate("A", "09:00", "17:00"),
            create_candidate("B", "09:00", "17:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["A", "B"]


class TestGreedyPolicy:
    """Tests for greedy coverage when no exact match exists."""

    def test_picks_most_uncovered_minutes(self, allocator):
        requirement = create_requirement(min_employees=2)
        ranked = [
            create_candidate("A", "09:00", "13:00"),
            create_candidate("C", "13:00", "17:00"),
            create_candidate("B", "09:00", "12:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["A", "C"]

    def test_stops_when_nothing_new_is_covered(self, allocator):
        requirement = create_requirement(min_employees=3)
        ranked = [
            create_candidate("A", "09:00", "13:00"),
            create_candidate("B", "09:00", "12:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["A"]

    def test_equal_gain_prefers_higher_coverage(self, allocator):
        requirement = create_requirement(min_employees=2)
        ranked = [
            create_candidate("A", "09:00", "13:00"),
            create_candidate("C", "13:00", "15:00"),
            create_candidate("B", "12:00", "15:00"),
        ]

        # After A, both C and B add two new hours; B covers more overall
        assert ids(allocator.select(requirement, ranked)) == ["A", "B"]

    def test_equal_gain_and_coverage_keeps_rank_order(self, allocator):
        requirement = create_requirement(min_employees=1)
        ranked = [
            create_candidate("B", "13:00", "17:00"),
            create_candidate("A", "09:00", "13:00"),
        ]

        assert ids(allocator.select(requirement, ranked)) == ["B"]

    def test_no_candidates(self, allocator):
        assert allocator.select(create_requirement(), []) == []


class TestAllocate:
    """Tests for turning selections into assignments."""

    def test_assignment_uses_actual_overlap(self, allocator):
        requirement = create_requirement(min_employees=2)
        ranked = [
            create_candidate("A", "09:00", "13:00"),
            create_candidate("B", "13:00", "17:00"),
        ]

        assignments = allocator.allocate(requirement, ranked, WEEK)

        assert [(a.employee_id, a.start_time, a.end_time) for a in assignments] == [
            ("A", "09:00", "13:00"),
            ("B", "13:00", "17:00"),
        ]
        assert all(a.duration_hours == pytest.approx(4.0) for a in assignments)
        assert all(a.day == "monday" and a.week_start == WEEK for a in assignments)
        assert all(a.department_id == "D1" and a.company_id == "C1" for a in assignments)

    def test_overnight_assignment(self, allocator):
        requirement = create_requirement("22:00", "02:00")
        candidate = create_candidate("A", "22:00", "23:00", total_minutes=240)

        assignment = allocator.allocate(requirement, [candidate], WEEK)[0]

        assert assignment.start_time == "22:00"
        assert assignment.end_time == "23:00"
        assert assignment.duration_hours == pytest.approx(1.0)


class TestCoverageStats:
    """Tests for minute-level coverage statistics."""

    def test_partial_coverage(self, allocator):
        requirement = create_requirement(min_employees=2)
        selected = [
            create_candidate("A", "09:00", "13:00"),
            create_candidate("B", "12:00", "15:00"),
        ]

        stats = allocator.coverage_stats(requirement, selected)

        assert stats.total_minutes == 480
        assert stats.covered_minutes == 360
        assert stats.uncovered_minutes == 120
        assert stats.over_covered_minutes == 60
        assert stats.coverage_percentage == pytest.approx(75.0)
        assert stats.employee_count == 2
        assert stats.required_count == 2
        assert not stats.meets_requirement

    def test_meets_requirement(self, allocator):
        requirement = create_requirement(min_employees=1)
        selected = [create_candidate("A", "09:00", "17:00")]

        stats = allocator.coverage_stats(requirement, selected)

        assert stats.coverage_percentage == pytest.approx(100.0)
        assert stats.meets_requirement
        assert stats.to_dict()["meetsRequirement"] is True

    def test_too_few_employees(self, allocator):
        requirement = create_requirement(min_employees=2)
        selected = [create_candidate("A", "09:00", "17:00")]

        assert not allocator.coverage_stats(requirement, selected).meets_requirement
