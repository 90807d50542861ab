"""Output generation for runs (notification summaries, PDF)."""

from shiftmatch.output.notifications import EmployeeScheduleSummary, build_employee_summaries
from shiftmatch.output.pdf_generator import SchedulePDFGenerator

__all__ = [
    "EmployeeScheduleSummary",
    "SchedulePDFGenerator",
    "build_employee_summaries",
]
