"""Candidate matching, ranking and allocation.

The week-level ScheduleOrchestrator lives in
``shiftmatch.scheduling.orchestrator``; it depends on the analysis
package, which in turn uses the components exported here.
"""

from shiftmatch.scheduling.allocator import CoverageAllocator, SlotCoverage
from shiftmatch.scheduling.candidate_finder import Candidate, CandidateFinder
from shiftmatch.scheduling.constraints import ConstraintTracker, EmployeeConstraintState
from shiftmatch.scheduling.ranker import CandidateRanker

__all__ = [
    # Matching
    "Candidate",
    "CandidateFinder",
    "CandidateRanker",
    # Allocation
    "CoverageAllocator",
    "SlotCoverage",
    # Constraints
    "ConstraintTracker",
    "EmployeeConstraintState",
]
