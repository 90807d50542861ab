"""Tests for PDF output of a scheduling run."""

from datetime import date

import pytest

from shiftmatch.domain.models import (
    DayAvailability,
    RequirementSlot,
    ShiftAssignment,
    ShiftRequirement,
    TimeSlot,
    WeeklyAvailability,
)
from shiftmatch.output.pdf_generator import SchedulePDFGenerator
from shiftmatch.scheduling.orchestrator import ScheduleOrchestrator, ScheduleRunResult

pytest.importorskip("reportlab")

WEEK = date(2024, 1, 7)


@pytest.fixture
def result():
    availabilities = [
        WeeklyAvailability(
            employee_id=employee_id,
            company_id="C1",
            week_start=WEEK,
            days={"monday": DayAvailability(True, [TimeSlot("09:00", "17:00", "monday", "monday")])},
        )
        for employee_id in ("A", "B")
    ]
    requirements = [
        ShiftRequirement(
            company_id="C1",
            department_id="D1",
            days={
                "monday": [RequirementSlot("09:00", "17:00", "monday", "monday", min_employees=1)],
                "tuesday": [RequirementSlot("09:00", "17:00", "tuesday", "tuesday", min_employees=2)],
            },
        )
    ]
    return ScheduleOrchestrator().run(requirements, availabilities, WEEK)


class TestSchedulePDFGenerator:
    """Tests for SchedulePDFGenerator."""

    def test_generate_to_buffer(self, result):
        buffer = SchedulePDFGenerator().generate_to_buffer(result, {"A": "Alice"})

        assert buffer.getvalue().startswith(b"%PDF")

    def test_generate_to_file(self, result, tmp_path):
        output = tmp_path / "week.pdf"

        SchedulePDFGenerator().generate(result, output)

        assert output.exists()
        assert output.read_bytes().startswith(b"%PDF")

    def test_empty_result(self):
        buffer = SchedulePDFGenerator().generate_to_buffer(ScheduleRunResult(week_start=WEEK))

        assert buffer.getvalue().startswith(b"%PDF")

    def test_many_employees_paginate(self, result):
        result.assignments = [
            ShiftAssignment(f"E{i:03d}", "C1", "D1", WEEK, "monday", "09:00", "17:00", 8.0)
            for i in range(60)
        ]

        buffer = SchedulePDFGenerator().generate_to_buffer(result)

        assert buffer.getvalue().startswith(b"%PDF")
