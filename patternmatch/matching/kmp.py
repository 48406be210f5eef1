"""
Knuth-Morris-Pratt Matching Engine

Finds every (overlapping) occurrence of a single pattern in O(n + m).

The prefix-failure table records, for every pattern position i, the length of
the longest proper prefix of pattern[0..i] that is also a suffix of it. On a
mismatch the scan falls back through this table instead of re-reading text,
so each text symbol is examined a bounded number of times.

Example:
    from patternmatch.matching import get_engine

    kmp = get_engine("KMP")
    result = kmp.search_sequential(b"ABABDABACDABABCABAB", b"ABABCABAB")
    result.positions  # (10,)
"""

from patternmatch.matching import register_engine
from patternmatch.matching.base import InvalidPatternError, Match, SinglePatternEngine


def compute_failure_table(pattern: bytes) -> tuple[int, ...]:
    """
    Build the longest-proper-prefix-suffix table for `pattern`.

    Two-pointer construction: `j` is the length of the current candidate
    border; on mismatch it falls back via table[j - 1], on match it grows by one.

    Args:
        pattern: Non-empty pattern.

    Returns:
        Tuple of length len(pattern) with table[0] == 0.

    Raises:
        InvalidPatternError: If the pattern is empty.
    """
    m = len(pattern)
    if m == 0:
        raise InvalidPatternError("Cannot build a failure table for an empty pattern")

    table = [0] * m
    j = 0
    for i in range(1, m):
        while j > 0 and pattern[i] != pattern[j]:
            j = table[j - 1]
        if pattern[i] == pattern[j]:
            j += 1
        table[i] = j

    return tuple(table)


@register_engine("KMP")
class KMPEngine(SinglePatternEngine):
    """
    Knuth-Morris-Pratt engine.

    Parallel scans reset the matched-prefix length to zero at each chunk
    start. That is safe because the chunk overlap (m - 1) keeps the whole
    window of any owned match inside the chunk's scan range.
    """

    name = "KMP"

    def preprocess(self, pattern: bytes) -> tuple[int, ...]:
        return compute_failure_table(pattern)

    def scan_range(self, text, pattern, table, start, stop, owner=None) -> list[Match]:
        """Scan text[start:stop] left to right, keeping matches accepted by `owner`."""
        m = len(pattern)
        matches = []
        j = 0

        for i in range(start, stop):
            symbol = text[i]
            while j > 0 and symbol != pattern[j]:
                j = table[j - 1]

            if symbol == pattern[j]:
                j += 1

            if j == m:
                position = i - m + 1
                if owner is None or owner(position):
                    matches.append(Match(position, 0))
                # Keep going for overlapping occurrences
                j = table[j - 1]

        return matches
