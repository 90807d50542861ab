"""Capacity analysis, gap remediation and run reports."""

from shiftmatch.analysis.gap_analyzer import (
    CapacityAnalysis,
    CoverageStatus,
    DayCapacity,
    GapAnalyzer,
    GapFill,
    Recommendation,
    Resolution,
    ResolutionStrategy,
    ShiftAlternative,
)
from shiftmatch.analysis.report import (
    DayBreakdown,
    EmployeeUtilization,
    FairnessMetrics,
    ReportBuilder,
    ReportSummary,
    ScheduleReport,
)

__all__ = [
    # Gap analysis
    "CapacityAnalysis",
    "CoverageStatus",
    "DayCapacity",
    "GapAnalyzer",
    "GapFill",
    "Recommendation",
    "Resolution",
    "ResolutionStrategy",
    "ShiftAlternative",
    # Reports
    "DayBreakdown",
    "EmployeeUtilization",
    "FairnessMetrics",
    "ReportBuilder",
    "ReportSummary",
    "ScheduleReport",
]
