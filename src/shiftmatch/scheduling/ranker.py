"""Candidate ranking.

Candidates are ordered with a layered comparator where large differences
decide and small ones fall through to the next key:

1. Exact match first.
2. Higher coverage, unless within ``coverage_tie_points``.
3. Fewer accumulated hours, unless within ``hours_tie``.
4. Higher preference weight.

Remaining ties are broken by overlap length, employee ID and start
minute. The input is first put into a canonical order so the result does
not depend on the order candidates were found in.
"""

from functools import cmp_to_key
from typing import Optional

from shiftmatch.domain.policies import MatchingPolicy
from shiftmatch.scheduling.candidate_finder import Candidate


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


class CandidateRanker:
    """Sorts candidates best-first.

    Example:
        >>> ranker = CandidateRanker()
        >>> best = ranker.rank(candidates)[0]
    """

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    def compare(self, a: Candidate, b: Candidate) -> int:
        """Negative when ``a`` should be ranked ahead of ``b``."""
        if a.exact_match != b.exact_match:
            return -1 if a.exact_match else 1

        coverage_diff = b.coverage_percentage - a.coverage_percentage
        if abs(coverage_diff) > self.policy.coverage_tie_points:
            return _sign(coverage_diff)

        hours_diff = a.current_hours - b.current_hours
        if abs(hours_diff) > self.policy.hours_tie:
            return _sign(hours_diff)

        if a.preference != b.preference:
            return _sign(b.preference - a.preference)

        if a.overlap_minutes != b.overlap_minutes:
            return _sign(b.overlap_minutes - a.overlap_minutes)

        if a.employee_id != b.employee_id:
            return -1 if a.employee_id < b.employee_id else 1

        return _sign(a.actual_start_minutes - b.actual_start_minutes)

    def rank(self, candidates: list[Candidate]) -> list[Candidate]:
        """Return a new list of candidates, best first.

        Args:
            candidates: Candidates for a single requirement slot.

        Returns:
            Sorted copy; ranking an already-ranked list returns it unchanged.
        """
        canonical = sorted(
            candidates,
            key=lambda c: (c.employee_id, c.actual_start_minutes, c.actual_end_minutes),
        )
        return sorted(canonical, key=cmp_to_key(self.compare))
