"""
Base classes for exact pattern matching engines.

This module defines the abstract base class and data structures shared by the
Knuth-Morris-Pratt, Boyer-Moore and Aho-Corasick engines. Every engine offers
a sequential scan and a data-parallel scan; the parallel scan is implemented
once here:

    1. ChunkPartitioner splits the text into one overlapping chunk per worker
    2. ParallelTaskRunner scans every chunk independently (fan-out)
    3. The caller blocks until all workers are done (join)
    4. ResultAggregator merges the per-worker match lists

Subclasses only provide the per-chunk scanning loop and the overlap width.

Example:
    @register_engine("KMP")
    class KMPEngine(SinglePatternEngine):
        name = "KMP"
        ...
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple

from patternmatch.chunking import Chunk, ChunkPartitioner
from patternmatch.logging_config import Timer, debug_log
from patternmatch.parallel import (
    ExecutorStrategy,
    ParallelTaskRunner,
    ThreadPoolStrategy,
)
from patternmatch.result_merger import ResultAggregator
from patternmatch.system_resources import resolve_worker_count


class InvalidPatternError(ValueError):
    """Raised when a pattern (or text) cannot be searched: empty, or not 8-bit."""


class AutomatonFrozenError(RuntimeError):
    """Raised when a built Aho-Corasick automaton is asked to accept more patterns."""


class Match(NamedTuple):
    """A single occurrence: zero-based start offset and the index of the pattern found."""
    position: int
    pattern_index: int = 0


def to_symbols(value: Any, what: str = "text") -> bytes:
    """
    Normalize text or pattern input to an immutable byte string.

    bytes/bytearray/memoryview are taken as-is. str is encoded as Latin-1, so
    each character maps to one 8-bit symbol; characters above U+00FF are rejected.

    Raises:
        InvalidPatternError: For str input outside the 8-bit alphabet.
        TypeError: For any other input type.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return value.encode('latin-1')
        except UnicodeEncodeError as e:
            raise InvalidPatternError(
                f"{what} contains symbols outside the 8-bit alphabet "
                f"(first at offset {e.start}: {value[e.start]!r})"
            ) from e
    raise TypeError(f"{what} must be bytes or str, not {type(value).__name__}")


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of one scan invocation.

    Built fresh for every call and immutable once returned.

    Attributes:
        algorithm: Engine name ("KMP", "Boyer-Moore", "Aho-Corasick")
        positions: Ascending, duplicate-free zero-based match start offsets
        elapsed_ms: Wall-clock duration of the scan (preprocessing included)
        worker_count: Number of workers the text was split across (1 if sequential)
        is_parallel: True for search_parallel() results
        matches: Every (position, pattern_index) pair, ordered by position then
                 pattern index. Differs from positions only when several
                 patterns match at the same offset.
        patterns: The searched patterns, indexed by pattern_index
    """
    algorithm: str
    positions: tuple[int, ...]
    elapsed_ms: float
    worker_count: int
    is_parallel: bool
    matches: tuple[Match, ...] = ()
    patterns: tuple[bytes, ...] = field(default=(), repr=False)

    @property
    def match_count(self) -> int:
        """Number of distinct match offsets."""
        return len(self.positions)

    def counts_by_pattern(self) -> list[int]:
        """Occurrence count per pattern index, in pattern order."""
        counts = Counter(m.pattern_index for m in self.matches)
        return [counts.get(i, 0) for i in range(len(self.patterns))]

    def __len__(self) -> int:
        return len(self.positions)


ChunkScanner = Callable[[Chunk], list[Match]]


class BaseMatchEngine(ABC):
    """
    Abstract base class for matching engines.

    Class Attributes:
        name: Human-readable algorithm name (used in SearchResult and logs)

    Subclasses call `_scan_parallel()` with their chunk scanner and the
    overlap width their algorithm needs; the partition / fan-out / join /
    merge sequence is shared.
    """

    name: str = "BaseEngine"

    def __init__(self):
        self.partitioner = ChunkPartitioner()
        self.aggregator = ResultAggregator()

    def _build_result(
        self,
        matches: list[Match],
        timer: Timer,
        worker_count: int,
        is_parallel: bool,
        patterns: tuple[bytes, ...],
    ) -> SearchResult:
        matches = self.aggregator.sort_matches(matches)
        return SearchResult(
            algorithm=self.name,
            positions=tuple(self.aggregator.positions(matches)),
            elapsed_ms=timer.get_duration_ms(),
            worker_count=worker_count,
            is_parallel=is_parallel,
            matches=tuple(matches),
            patterns=patterns,
        )

    def _scan_parallel(
        self,
        text_length: int,
        overlap: int,
        scan_chunk: ChunkScanner,
        worker_count: int,
        strategy: ExecutorStrategy | None,
    ) -> list[Match]:
        """
        Partition, fan out one chunk per worker, join, and merge.

        Args:
            text_length: Length of the text being scanned.
            overlap: Symbols each worker reads past its nominal end.
            scan_chunk: Scans one chunk and returns the matches it owns,
                        in ascending position order.
            worker_count: Already-resolved worker count (>= 1).
            strategy: Injected execution strategy; if None a thread pool
                      sized to worker_count is created for this call.

        Returns:
            Merged match list, ordered by position.

        Raises:
            Exception: The first worker failure (by worker index) is re-raised
                       after all workers have finished.
        """
        chunks = self.partitioner.partition(text_length, worker_count, overlap)
        items = [(chunk.index, chunk) for chunk in chunks]

        if strategy is None:
            with ThreadPoolStrategy(max_workers=worker_count) as pool:
                task_results = ParallelTaskRunner(strategy=pool).run(scan_chunk, items)
        else:
            task_results = ParallelTaskRunner(strategy=strategy).run(scan_chunk, items)

        per_worker = {}
        for task in task_results:
            if not task.success:
                debug_log(f"[{self.name}] Worker {task.task_id} failed: {task.error!r}")
                raise task.error
            per_worker[task.task_id] = task.result

        return self.aggregator.merge(per_worker)

    @abstractmethod
    def search_sequential(self, text, *args, **kwargs) -> SearchResult:
        """
        Scan the whole text in one pass on the calling thread.

        Single-pattern engines take the pattern as the second argument;
        Aho-Corasick searches its registered pattern set.

        Returns:
            SearchResult with is_parallel=False and worker_count=1
        """
        pass

    @abstractmethod
    def search_parallel(self, text, *args, **kwargs) -> SearchResult:
        """
        Scan overlapping chunks of the text in parallel and merge the results.

        Must return the same positions as search_sequential() for every
        worker count.
        """
        pass

    def get_config(self) -> dict[str, Any]:
        """Return engine configuration for logging."""
        return {"name": self.name}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class SinglePatternEngine(BaseMatchEngine):
    """
    Shared driver for the single-pattern engines (KMP, Boyer-Moore).

    Handles input normalization, the empty-pattern and pattern-longer-than-text
    policies, timing and result construction. Subclasses implement:

        preprocess(pattern) -> table
        scan_range(text, pattern, table, start, stop, owner) -> list[Match]

    `scan_range` scans text[start:stop] and keeps only matches for which
    `owner(position)` is true (or all of them when owner is None).

    Policies:
        - An empty pattern raises InvalidPatternError before anything runs.
        - A pattern longer than the text is not an error; the result is empty.
    """

    @abstractmethod
    def preprocess(self, pattern: bytes):
        """Build the read-only lookup table for `pattern` (shared by all workers)."""
        pass

    @abstractmethod
    def scan_range(self, text, pattern, table, start, stop, owner=None) -> list[Match]:
        """Return the matches in text[start:stop] accepted by `owner`, in ascending order."""
        pass

    def _prepare(self, text, pattern) -> tuple[bytes, bytes]:
        text = to_symbols(text, "text")
        pattern = to_symbols(pattern, "pattern")
        if not pattern:
            raise InvalidPatternError(f"{self.name}: pattern cannot be empty")
        return text, pattern

    def search_sequential(self, text, pattern) -> SearchResult:
        """
        Find every occurrence of `pattern` in `text` with a single pass.

        Args:
            text: Text to search (bytes, or str restricted to 8-bit characters)
            pattern: Non-empty pattern

        Returns:
            SearchResult with is_parallel=False and worker_count=1

        Raises:
            InvalidPatternError: If the pattern is empty or not 8-bit
        """
        text, pattern = self._prepare(text, pattern)

        with Timer(f"{self.name} sequential scan", auto_log=False) as timer:
            table = self.preprocess(pattern)
            if len(pattern) > len(text):
                matches = []
            else:
                matches = self.scan_range(text, pattern, table, 0, len(text))

        debug_log(
            f"[{self.name}] Sequential: {len(matches)} matches of {len(pattern)}-symbol "
            f"pattern in {len(text)} symbols ({timer.duration_ms:.3f} ms)"
        )
        return self._build_result(matches, timer, 1, False, (pattern,))

    def search_parallel(
        self,
        text,
        pattern,
        worker_count: int | None = None,
        strategy: ExecutorStrategy | None = None,
    ) -> SearchResult:
        """
        Find every occurrence of `pattern` by scanning overlapping chunks in parallel.

        The result's positions equal search_sequential(text, pattern).positions
        for every worker count.

        Args:
            text: Text to search
            pattern: Non-empty pattern
            worker_count: Number of chunks/workers; None, 0 or negative = auto
            strategy: Optional execution strategy (e.g. SequentialStrategy in tests)

        Returns:
            SearchResult with is_parallel=True

        Raises:
            InvalidPatternError: If the pattern is empty or not 8-bit
        """
        text, pattern = self._prepare(text, pattern)
        workers = resolve_worker_count(worker_count)

        with Timer(f"{self.name} parallel scan", auto_log=False) as timer:
            # Built and frozen (tuple) before any worker starts
            table = self.preprocess(pattern)
            if len(pattern) > len(text):
                matches = []
            else:
                def scan_chunk(chunk: Chunk) -> list[Match]:
                    if chunk.is_empty:
                        return []
                    return self.scan_range(
                        text, pattern, table, chunk.start, chunk.scan_end, chunk.owns
                    )

                matches = self._scan_parallel(
                    len(text), len(pattern) - 1, scan_chunk, workers, strategy
                )

        debug_log(
            f"[{self.name}] Parallel ({workers} workers): {len(matches)} matches "
            f"({timer.duration_ms:.3f} ms)"
        )
        return self._build_result(matches, timer, workers, True, (pattern,))
