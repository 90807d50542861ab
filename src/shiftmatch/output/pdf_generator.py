"""PDF generation for scheduling run output.

This module creates a printable PDF of a run showing:
- Run summary, fairness and per-day breakdown
- An employee x day grid of assigned shifts
- Unfulfilled slots, conflicts and recommendations
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from shiftmatch.domain.models import DAYS_OF_WEEK
from shiftmatch.scheduling.orchestrator import ScheduleRunResult

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "header": (0.85, 0.88, 0.93),  # Light blue
    "shift": (0.4, 0.7, 0.4),  # Green
    "unfulfilled": (0.9, 0.7, 0.7),  # Light red
    "conflict": (0.8, 0.6, 0.2),  # Orange
    "grid": (0.7, 0.7, 0.7),  # Gray
}


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class SchedulePDFGenerator:
    """Generates printable PDFs of a scheduling run.

    Example:
        >>> generator = SchedulePDFGenerator()
        >>> generator.generate(result, "week.pdf", employee_names)
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        result: ScheduleRunResult,
        output_path: Union[str, Path],
        employee_names: Optional[dict[str, str]] = None,
    ) -> None:
        """Generate the PDF and save it to a file.

        Args:
            result: The finished run.
            output_path: Path to save the PDF.
            employee_names: Optional mapping of employee ID to display name.
        """
        canvas, pagesize = _require_reportlab()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, result, employee_names or {})
        c.save()

    def generate_to_buffer(
        self,
        result: ScheduleRunResult,
        employee_names: Optional[dict[str, str]] = None,
    ) -> BytesIO:
        """Generate the PDF and return it as a bytes buffer."""
        canvas, pagesize = _require_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, result, employee_names or {})
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, result: ScheduleRunResult, names: dict[str, str]) -> None:
        self._draw_summary_page(c, result)
        self._draw_grid_pages(c, result, names)
        self._draw_issues_page(c, result, names)

    def _draw_title(self, c, title: str, result: ScheduleRunResult) -> float:
        """Draw the page title and return the y position below it."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"{title} - Week of {result.week_start.strftime('%B %d, %Y')}",
        )
        return self.page_height - self.margin - 50

    def _draw_summary_page(self, c, result: ScheduleRunResult) -> None:
        """Draw run totals, fairness and the per-day breakdown."""
        y = self._draw_title(c, "Schedule Summary", result)
        report = result.report

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        stats = [f"Assignments: {len(result.assignments)}"]
        if report is not None:
            summary = report.summary
            stats.extend([
                f"Total Hours: {summary.total_hours:.1f}",
                f"Average Shift Length: {summary.average_shift_length:.1f}h",
                f"Success Rate: {summary.success_rate:.1f}%",
                f"Unfulfilled Slots: {summary.total_unfulfilled}",
                f"Conflicts: {summary.total_conflicts}",
                f"Fairness Score: {report.fairness.fairness_score:.0f} "
                f"(avg {report.fairness.avg_hours:.1f}h, "
                f"std dev {report.fairness.hours_std_dev:.1f}h)",
            ])
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        if report is None:
            c.showPage()
            return

        y -= 20
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Daily Breakdown")
        y -= 20

        columns = ["Day", "Shifts", "Hours", "Employees", "Unfulfilled", "Conflicts"]
        col_width = 90
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y - 4, col_width * len(columns), 16, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        for i, label in enumerate(columns):
            c.drawString(self.margin + 5 + i * col_width, y, label)
        y -= 16

        c.setFont("Helvetica", 9)
        for day in DAYS_OF_WEEK:
            breakdown = report.daily_breakdown.get(day)
            if breakdown is None:
                continue
            values = [
                day.capitalize(),
                str(breakdown.shifts),
                f"{breakdown.hours:.1f}",
                str(breakdown.employees),
                str(breakdown.unfulfilled),
                str(breakdown.conflicts),
            ]
            for i, value in enumerate(values):
                c.drawString(self.margin + 5 + i * col_width, y, value)
            y -= 14

        c.showPage()

    def _draw_grid_pages(self, c, result: ScheduleRunResult, names: dict[str, str]) -> None:
        """Draw the employee x day grid, paginated by rows."""
        by_employee = result.assignments_by_employee()
        employee_ids = sorted(by_employee, key=lambda eid: (names.get(eid, eid), eid))
        if not employee_ids:
            return

        row_height = 24
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height) - 1)

        name_width = 130
        grid_left = self.margin + name_width
        day_width = (self.page_width - self.margin - grid_left) / len(DAYS_OF_WEEK)
        total_pages = (len(employee_ids) + rows_per_page - 1) // rows_per_page

        for page_start in range(0, len(employee_ids), rows_per_page):
            page_ids = employee_ids[page_start : page_start + rows_per_page]
            y = self._draw_title(c, "Employee Schedule", result)

            # Day headers
            c.setFillColorRGB(*COLORS["header"])
            c.rect(grid_left, y - 4, day_width * len(DAYS_OF_WEEK), 16, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            for i, day in enumerate(DAYS_OF_WEEK):
                c.drawCentredString(grid_left + (i + 0.5) * day_width, y, day.capitalize())

            for employee_id in page_ids:
                y -= row_height
                shifts = by_employee[employee_id]
                hours = sum(s.duration_hours for s in shifts)

                c.setFont("Helvetica", 9)
                c.drawString(self.margin, y + 8, names.get(employee_id, employee_id)[:22])
                c.setFont("Helvetica", 7)
                c.drawString(self.margin, y, f"{hours:.1f}h, {len(shifts)} shifts")

                c.setStrokeColorRGB(*COLORS["grid"])
                c.setLineWidth(0.5)
                for i, day in enumerate(DAYS_OF_WEEK):
                    cell_x = grid_left + i * day_width
                    c.rect(cell_x, y - 4, day_width, row_height - 2, fill=0, stroke=1)
                    day_shifts = [s for s in shifts if s.day == day]
                    if not day_shifts:
                        continue
                    c.setFillColorRGB(*COLORS["shift"])
                    c.rect(cell_x + 2, y - 2, day_width - 4, row_height - 6, fill=1, stroke=0)
                    c.setFillColorRGB(0, 0, 0)
                    c.setFont("Helvetica", 7)
                    label = ", ".join(f"{s.start_time}-{s.end_time}" for s in day_shifts)
                    c.drawCentredString(cell_x + day_width / 2, y + 5, label[:24])

            page_num = (page_start // rows_per_page) + 1
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {total_pages}",
            )
            c.showPage()

    def _draw_issues_page(self, c, result: ScheduleRunResult, names: dict[str, str]) -> None:
        """Draw unfulfilled slots, conflicts and recommendations."""
        y = self._draw_title(c, "Issues and Recommendations", result)
        bottom = self.margin + 20

        sections = [
            (
                "Unfulfilled Slots",
                COLORS["unfulfilled"],
                [
                    f"{u.day.capitalize()} {u.start_time}-{u.end_time}: "
                    f"{u.assigned} of {u.required} assigned (short {u.shortfall}), "
                    f"{u.coverage_percentage:.0f}% covered"
                    for u in result.unfulfilled
                ],
            ),
            (
                "Conflicts",
                COLORS["conflict"],
                [
                    f"{names.get(x.employee_id, x.employee_id)} {x.day.capitalize()}: "
                    f"{x.conflict_type.value} {x.slot1} / {x.slot2}"
                    for x in result.conflicts
                ],
            ),
            (
                "Recommendations",
                COLORS["header"],
                [
                    f"[{r.priority}] {r.message}"
                    for r in (result.report.recommendations if result.report else [])
                ],
            ),
        ]

        for title, color, lines in sections:
            if y < bottom + 40:
                c.showPage()
                y = self._draw_title(c, "Issues and Recommendations", result)
            c.setFillColorRGB(*color)
            c.rect(self.margin, y - 2, 10, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 12)
            c.drawString(self.margin + 15, y, title)
            y -= 18

            c.setFont("Helvetica", 9)
            for line in lines or ["None"]:
                if y < bottom:
                    c.showPage()
                    y = self._draw_title(c, "Issues and Recommendations", result)
                    c.setFont("Helvetica", 9)
                c.drawString(self.margin + 20, y, line[:140])
                y -= 13
            y -= 12

        c.showPage()
