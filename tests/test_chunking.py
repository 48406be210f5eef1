"""
Tests for ChunkPartitioner.

The partitioner must tile [0, n) with nominal ranges exactly once, extend each
scan range by the overlap without running past the text, and give trailing
workers empty chunks when there are more workers than symbols.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from patternmatch.chunking import Chunk, ChunkPartitioner


@pytest.fixture
def partitioner():
    return ChunkPartitioner()


class TestChunkSize:

    @pytest.mark.parametrize("n, t, expected", [
        (10, 3, 4),
        (9, 3, 3),
        (1, 4, 1),
        (0, 4, 0),
        (100, 1, 100),
    ])
    def test_chunk_size_is_ceiling(self, n, t, expected):
        assert ChunkPartitioner.chunk_size(n, t) == expected


class TestPartition:

    def test_basic_partition(self, partitioner):
        """Nominal ranges of ceil(n/t), scan ranges extended by the overlap."""
        chunks = partitioner.partition(text_length=10, worker_count=3, overlap=2)
        assert chunks == [
            Chunk(index=0, start=0, end=4, scan_end=6),
            Chunk(index=1, start=4, end=8, scan_end=10),
            Chunk(index=2, start=8, end=10, scan_end=10),
        ]

    def test_more_workers_than_symbols(self, partitioner):
        """Workers whose nominal start is past the text get empty chunks."""
        chunks = partitioner.partition(text_length=5, worker_count=4, overlap=1)
        assert len(chunks) == 4
        assert [c.is_empty for c in chunks] == [False, False, False, True]
        assert chunks[2] == Chunk(index=2, start=4, end=5, scan_end=5)

    def test_empty_text(self, partitioner):
        chunks = partitioner.partition(text_length=0, worker_count=3, overlap=5)
        assert len(chunks) == 3
        assert all(c.is_empty for c in chunks)

    @pytest.mark.parametrize("n", [1, 7, 64, 101])
    @pytest.mark.parametrize("t", [1, 2, 3, 8, 13])
    def test_every_position_owned_exactly_once(self, partitioner, n, t):
        chunks = partitioner.partition(text_length=n, worker_count=t, overlap=3)
        for position in range(n):
            owners = [c.index for c in chunks if c.owns(position)]
            assert len(owners) == 1, f"position {position} owned by {owners}"

    @pytest.mark.parametrize("overlap", [0, 1, 5, 50])
    def test_scan_end_never_exceeds_text(self, partitioner, overlap):
        chunks = partitioner.partition(text_length=40, worker_count=6, overlap=overlap)
        for chunk in chunks:
            assert chunk.end <= chunk.scan_end <= 40
            if not chunk.is_empty:
                assert chunk.scan_end == min(chunk.end + overlap, 40)

    def test_zero_overlap_scan_equals_nominal(self, partitioner):
        for chunk in partitioner.partition(text_length=17, worker_count=4, overlap=0):
            assert chunk.scan_end == chunk.end

    def test_chunks_are_ordered_and_contiguous(self, partitioner):
        chunks = partitioner.partition(text_length=50, worker_count=7, overlap=2)
        assert [c.index for c in chunks] == list(range(7))
        for left, right in zip(chunks, chunks[1:]):
            assert left.end == right.start


class TestPartitionErrors:

    @pytest.mark.parametrize("workers", [0, -1])
    def test_worker_count_must_be_positive(self, partitioner, workers):
        with pytest.raises(ValueError, match="worker_count"):
            partitioner.partition(text_length=10, worker_count=workers, overlap=0)

    def test_negative_overlap_rejected(self, partitioner):
        with pytest.raises(ValueError, match="overlap"):
            partitioner.partition(text_length=10, worker_count=2, overlap=-1)

    def test_negative_length_rejected(self, partitioner):
        with pytest.raises(ValueError, match="text_length"):
            partitioner.partition(text_length=-5, worker_count=2, overlap=0)


class TestChunkOwnership:

    def test_owns_is_half_open(self):
        chunk = Chunk(index=1, start=4, end=8, scan_end=10)
        assert not chunk.owns(3)
        assert chunk.owns(4)
        assert chunk.owns(7)
        assert not chunk.owns(8)
        assert chunk.nominal_length == 4
