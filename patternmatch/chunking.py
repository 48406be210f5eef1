"""
Overlapping Text Partitioning for Parallel Scans

Splits a text of length n into one chunk per worker. Each chunk has a
nominal, non-overlapping range and a scan range that reaches `overlap`
symbols further, so a match starting near the end of a nominal range is
still fully visible to the worker that owns it.

Ownership rule: a worker reports a match only if the match's start offset
lies inside its nominal range. Nominal ranges tile the text exactly once,
so every match is reported by exactly one worker.

With overlap = pattern_length - 1 (or max_pattern_length - 1 for a pattern
set), any match starting in [start, end) ends before end + overlap, which is
inside the scan range.
"""

from dataclasses import dataclass

from patternmatch.logging_config import debug_log


@dataclass(frozen=True)
class Chunk:
    """
    A half-open range of the text assigned to one worker.

    Attributes:
        index: Worker index (0-based); chunks are ordered by it.
        start: First offset of the nominal range.
        end: One past the last offset of the nominal range.
        scan_end: One past the last offset the worker may read
                  (end + overlap, clipped to the text length).
    """
    index: int
    start: int
    end: int
    scan_end: int

    @property
    def is_empty(self) -> bool:
        """True when the worker has nothing to scan."""
        return self.start >= self.end

    @property
    def nominal_length(self) -> int:
        return max(0, self.end - self.start)

    def owns(self, position: int) -> bool:
        """Return True if a match starting at `position` belongs to this chunk."""
        return self.start <= position < self.end


class ChunkPartitioner:
    """
    Divides a text into overlapping per-worker chunks.

    Example:
        chunks = ChunkPartitioner().partition(text_length=10, worker_count=3, overlap=2)
        # [Chunk(0, 0, 4, 6), Chunk(1, 4, 8, 10), Chunk(2, 8, 10, 10)]
    """

    def partition(self, text_length: int, worker_count: int, overlap: int) -> list[Chunk]:
        """
        Partition [0, text_length) into `worker_count` chunks.

        Always returns exactly `worker_count` chunks; trailing workers whose
        nominal start is at or past the end of the text get empty chunks.

        Args:
            text_length: Length n of the text.
            worker_count: Number of workers t (must be >= 1).
            overlap: Extra symbols each worker may read past its nominal end.

        Returns:
            List of Chunk objects ordered by worker index.

        Raises:
            ValueError: If worker_count < 1, or text_length / overlap is negative.
        """
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")
        if text_length < 0:
            raise ValueError(f"text_length cannot be negative, got {text_length}")
        if overlap < 0:
            raise ValueError(f"overlap cannot be negative, got {overlap}")

        chunk_size = self.chunk_size(text_length, worker_count)

        chunks = []
        for index in range(worker_count):
            start = min(index * chunk_size, text_length)
            end = min(start + chunk_size, text_length)
            scan_end = min(end + overlap, text_length) if end > start else end
            chunks.append(Chunk(index=index, start=start, end=end, scan_end=scan_end))

        active = sum(1 for c in chunks if not c.is_empty)
        debug_log(
            f"[Partition] {text_length} symbols -> {worker_count} chunks of {chunk_size} "
            f"(overlap {overlap}, {active} active)"
        )
        return chunks

    @staticmethod
    def chunk_size(text_length: int, worker_count: int) -> int:
        """Nominal chunk size: ceil(text_length / worker_count)."""
        return -(-text_length // worker_count)
