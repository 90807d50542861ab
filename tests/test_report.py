"""Tests for run report building."""

from datetime import date

import pytest

from shiftmatch.analysis.gap_analyzer import CapacityAnalysis, Recommendation
from shiftmatch.analysis.report import FairnessMetrics, ReportBuilder
from shiftmatch.domain.models import (
    Conflict,
    ConflictType,
    ShiftAssignment,
    UnfulfilledRequirement,
)

WEEK = date(2024, 1, 7)


def create_assignment(employee_id: str, day: str, start: str, end: str, hours: float) -> ShiftAssignment:
    return ShiftAssignment(employee_id, "C1", "D1", WEEK, day, start, end, hours)


def create_gap(day: str, required: int = 2, assigned: int = 1) -> UnfulfilledRequirement:
    return UnfulfilledRequirement(
        day=day,
        department_id="D1",
        start_time="09:00",
        end_time="17:00",
        required=required,
        assigned=assigned,
    )


class TestFairnessMetrics:
    """Tests for FairnessMetrics."""

    def test_equal_hours_are_perfectly_fair(self):
        metrics = FairnessMetrics.calculate({"A": 16.0, "B": 16.0}, {"A": 2, "B": 2})

        assert metrics.fairness_score == pytest.approx(100.0)
        assert metrics.hours_std_dev == pytest.approx(0.0)
        assert metrics.avg_hours == pytest.approx(16.0)

    def test_wide_spread_scores_zero(self):
        metrics = FairnessMetrics.calculate({"A": 8.0, "B": 0.0}, {"A": 1, "B": 0})

        assert metrics.hours_std_dev == pytest.approx(4.0)
        assert metrics.fairness_score == pytest.approx(0.0)
        assert metrics.min_hours == 0.0
        assert metrics.max_hours == 8.0

    def test_partial_spread(self):
        metrics = FairnessMetrics.calculate({"A": 10.0, "B": 6.0}, {"A": 2, "B": 1})

        # std dev 2.0 against a 4.0 ceiling
        assert metrics.fairness_score == pytest.approx(50.0)

    def test_empty(self):
        assert FairnessMetrics.calculate({}, {}).fairness_score == 100.0


class TestReportBuilder:
    """Tests for ReportBuilder."""

    @pytest.fixture
    def builder(self):
        return ReportBuilder()

    @pytest.fixture
    def assignments(self):
        return [
            create_assignment("A", "monday", "09:00", "17:00", 8.0),
            create_assignment("B", "monday", "09:00", "13:00", 4.0),
            create_assignment("A", "tuesday", "09:00", "17:00", 8.0),
        ]

    def test_summary(self, builder, assignments):
        report = builder.build(assignments, [], [create_gap("wednesday")], total_slots=4)

        summary = report.summary
        assert summary.total_shifts == 3
        assert summary.total_unfulfilled == 1
        assert summary.fulfilled_slots == 3
        assert summary.total_hours == pytest.approx(20.0)
        assert summary.average_shift_length == pytest.approx(20.0 / 3)
        assert summary.success_rate == pytest.approx(75.0)

    def test_no_slots_is_full_success(self, builder):
        report = builder.build([], [], [], total_slots=0)

        assert report.summary.success_rate == 100.0
        assert report.summary.total_hours == 0.0
        assert report.employee_utilization == {}

    def test_all_slots_unfulfilled(self, builder):
        gaps = [create_gap("monday", assigned=0), create_gap("tuesday", assigned=0)]

        report = builder.build([], [], gaps, total_slots=2)

        assert report.summary.success_rate == 0.0

    def test_employee_utilization(self, builder, assignments):
        report = builder.build(assignments, [], [], total_slots=3)

        a = report.employee_utilization["A"]
        assert a.total_hours == pytest.approx(16.0)
        assert a.shift_count == 2
        assert a.average_shift_length == pytest.approx(8.0)
        assert a.days_worked == ["monday", "tuesday"]
        assert report.employee_utilization["B"].days_worked == ["monday"]

    def test_daily_breakdown(self, builder, assignments):
        conflict = Conflict(ConflictType.OVERLAP, "A", "monday", "09:00-17:00", "09:00-13:00")

        report = builder.build(assignments, [conflict], [create_gap("monday")], total_slots=3)

        monday = report.daily_breakdown["monday"]
        assert monday.shifts == 2
        assert monday.hours == pytest.approx(12.0)
        assert monday.employees == 2
        assert monday.conflicts == 1
        assert monday.unfulfilled == 1
        assert report.daily_breakdown["sunday"].shifts == 0
        assert list(report.daily_breakdown) == [
            "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
        ]

    def test_fairness_from_assignments(self, builder, assignments):
        report = builder.build(assignments, [], [], total_slots=3)

        # A has 16h, B has 4h: std dev 6.0
        assert report.fairness.hours_std_dev == pytest.approx(6.0)
        assert report.fairness.fairness_score == 0.0

    def test_recommendations_carried_over(self, builder):
        recommendation = Recommendation("capacity", "high", "Add more staff")
        analysis = CapacityAnalysis(recommendations=[recommendation])

        report = builder.build([], [], [], total_slots=0, analysis=analysis)

        assert report.recommendations == [recommendation]

    def test_to_dict(self, builder, assignments):
        data = builder.build(assignments, [], [create_gap("wednesday")], total_slots=4).to_dict()

        assert data["summary"]["successRate"] == 75.0
        assert data["summary"]["totalHours"] == 20.0
        assert data["employeeUtilization"]["A"]["shiftsCount"] == 2
        assert data["dailyBreakdown"]["wednesday"]["unfulfilled"] == 1
        assert data["recommendations"] == []
