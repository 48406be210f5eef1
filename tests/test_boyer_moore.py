"""
Tests for the Boyer-Moore (bad-character) engine.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from patternmatch.matching import (
    ABSENT,
    BoyerMooreEngine,
    InvalidPatternError,
    compute_bad_character_table,
)
from patternmatch.parallel import SequentialStrategy

DEMO_TEXT = b"ABABDABACDABABCABABABABDABACDABABCABAB"


@pytest.fixture
def bm():
    return BoyerMooreEngine()


class TestBadCharacterTable:

    def test_rightmost_occurrence_wins(self):
        table = compute_bad_character_table(b"ABCAB")
        assert table[ord("A")] == 3
        assert table[ord("B")] == 4
        assert table[ord("C")] == 2

    def test_absent_symbols(self):
        table = compute_bad_character_table(b"ABCAB")
        assert len(table) == 256
        assert table[ord("Z")] == ABSENT
        assert table[0] == ABSENT
        assert table[255] == ABSENT

    def test_high_symbols_supported(self):
        table = compute_bad_character_table(bytes([0xFF, 0x00]))
        assert table[0xFF] == 0
        assert table[0x00] == 1

    def test_empty_pattern_rejected(self):
        with pytest.raises(InvalidPatternError):
            compute_bad_character_table(b"")


class TestSequentialSearch:

    def test_demo_text(self, bm):
        assert bm.search_sequential(DEMO_TEXT, b"ABABCABAB").positions == (10, 29)

    def test_overlapping_matches(self, bm):
        """A full match advances by one so overlaps are kept."""
        assert bm.search_sequential(b"A" * 256, b"AA").positions == tuple(range(255))

    def test_absent_pattern(self, bm):
        assert bm.search_sequential(b"XYZ", b"ABC").positions == ()

    def test_pattern_longer_than_text(self, bm):
        assert bm.search_sequential(b"A", b"AA").positions == ()

    def test_single_symbol_pattern(self, bm):
        assert bm.search_sequential(b"ABCABC", b"C").positions == (2, 5)

    def test_match_at_text_start_and_end(self, bm):
        assert bm.search_sequential(b"ABXXAB", b"AB").positions == (0, 4)

    def test_mismatch_symbol_right_of_its_last_occurrence(self, bm):
        """Shift never goes backwards when the bad symbol sits right of j in the pattern."""
        assert bm.search_sequential(b"AABBAAB", b"AAB").positions == (0, 4)

    def test_result_metadata(self, bm):
        result = bm.search_sequential(DEMO_TEXT, b"AB")
        assert result.algorithm == "Boyer-Moore"
        assert result.is_parallel is False
        assert result.patterns == (b"AB",)

    def test_empty_pattern_raises(self, bm):
        with pytest.raises(InvalidPatternError):
            bm.search_sequential(DEMO_TEXT, b"")


class TestParallelSearch:

    @pytest.mark.parametrize("workers", [1, 2, 3, 5, 9, 38, 64])
    def test_demo_text_any_worker_count(self, bm, workers):
        result = bm.search_parallel(DEMO_TEXT, b"ABABCABAB", worker_count=workers)
        assert result.positions == (10, 29)
        assert result.worker_count == workers

    def test_overlapping_matches_across_chunks(self, bm):
        result = bm.search_parallel(
            b"A" * 256, b"AA", worker_count=16, strategy=SequentialStrategy()
        )
        assert result.positions == tuple(range(255))

    def test_absent_pattern(self, bm):
        assert bm.search_parallel(b"XYZ", b"ABC", worker_count=3).positions == ()

    def test_empty_text(self, bm):
        assert bm.search_parallel(b"", b"A", worker_count=4).positions == ()
