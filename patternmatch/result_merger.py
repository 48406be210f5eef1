"""
Result Aggregator for Parallel Scans

Merges the per-worker match lists of a parallel scan into one ordered
sequence, and checks a parallel result against the sequential baseline.

Merge Strategy:
1. Take each worker's private match list (already ascending within its chunk)
2. Concatenate in worker-index order (chunk ranges are disjoint and increasing)
3. Sort by (position, pattern_index) as a safety net
4. Collapse to ascending, duplicate-free start offsets for SearchResult.positions

Verification is a correctness tool used by the benchmark and the tests, not
part of a normal scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from patternmatch.matching.base import Match, SearchResult


@dataclass
class VerificationReport:
    """
    Comparison of a sequential and a parallel result for the same input.

    Attributes:
        algorithm: Engine name of the sequential result
        equal: True when positions and matches are identical sequences
        sequential_count: Number of offsets in the sequential result
        parallel_count: Number of offsets in the parallel result
        missing: Offsets found sequentially but not in parallel
        unexpected: Offsets found in parallel but not sequentially
        reason: Short explanation when equal is False
    """
    algorithm: str
    equal: bool
    sequential_count: int
    parallel_count: int
    missing: list[int] = field(default_factory=list)
    unexpected: list[int] = field(default_factory=list)
    reason: str = ""

    def __bool__(self) -> bool:
        return self.equal


class ResultAggregator:
    """
    Merges per-worker matches and verifies parallel results.

    Example:
        aggregator = ResultAggregator()
        merged = aggregator.merge({0: [Match(3, 0)], 1: [Match(9, 0)]})
        report = aggregator.verify(sequential_result, parallel_result)
        assert report
    """

    def merge(self, per_worker: dict[int, list[Match]]) -> list[Match]:
        """
        Merge worker match lists into one list ordered by position.

        Args:
            per_worker: Mapping of worker index to that worker's matches.

        Returns:
            All matches, concatenated in worker order then sorted.
        """
        merged = []
        for worker_index in sorted(per_worker):
            merged.extend(per_worker[worker_index])
        return self.sort_matches(merged)

    @staticmethod
    def sort_matches(matches: Iterable[Match]) -> list[Match]:
        """Sort matches by position, then pattern index."""
        return sorted(matches)

    @staticmethod
    def positions(matches: Iterable[Match]) -> list[int]:
        """
        Collapse sorted matches into ascending, duplicate-free start offsets.

        Args:
            matches: Matches ordered by position.
        """
        result = []
        last = None
        for match in matches:
            if match.position != last:
                result.append(match.position)
                last = match.position
        return result

    def verify(self, sequential: SearchResult, parallel: SearchResult) -> VerificationReport:
        """
        Check that a parallel result reproduces the sequential baseline exactly.

        Compares ordered sequences, not sets: a parallel result with the right
        offsets in the wrong order is reported as unequal.

        Args:
            sequential: Result of search_sequential()
            parallel: Result of search_parallel() on the same input

        Returns:
            VerificationReport (truthy when the results agree)
        """
        report = VerificationReport(
            algorithm=sequential.algorithm,
            equal=True,
            sequential_count=len(sequential.positions),
            parallel_count=len(parallel.positions),
        )

        if sequential.algorithm != parallel.algorithm:
            report.equal = False
            report.reason = (
                f"algorithm mismatch: {sequential.algorithm} vs {parallel.algorithm}"
            )
            return report

        seq_set = set(sequential.positions)
        par_set = set(parallel.positions)
        report.missing = sorted(seq_set - par_set)
        report.unexpected = sorted(par_set - seq_set)

        if tuple(sequential.positions) != tuple(parallel.positions):
            report.equal = False
            if report.missing or report.unexpected:
                report.reason = (
                    f"{len(report.missing)} missing, {len(report.unexpected)} unexpected offsets"
                )
            else:
                report.reason = "same offsets in a different order or multiplicity"
        elif tuple(sequential.matches) != tuple(parallel.matches):
            report.equal = False
            report.reason = "same offsets but different pattern matches"

        return report
