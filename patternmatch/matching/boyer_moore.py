"""
Boyer-Moore Matching Engine (bad-character rule)

Aligns the pattern against the text and compares right to left. On a
mismatch the pattern jumps so the mismatching text symbol lines up with its
rightmost occurrence in the pattern, or past it entirely if the symbol does
not occur. Worst case O(n * m), typically sub-linear on large alphabets.
"""

from patternmatch.config import ALPHABET_SIZE
from patternmatch.matching import register_engine
from patternmatch.matching.base import InvalidPatternError, Match, SinglePatternEngine

# Bad-character entry for symbols that do not occur in the pattern
ABSENT = -1


def compute_bad_character_table(pattern: bytes) -> tuple[int, ...]:
    """
    Build the last-occurrence table over the 8-bit alphabet.

    Args:
        pattern: Non-empty pattern.

    Returns:
        Tuple of ALPHABET_SIZE entries: the rightmost index of each symbol in
        the pattern, or ABSENT.

    Raises:
        InvalidPatternError: If the pattern is empty.
    """
    if not pattern:
        raise InvalidPatternError("Cannot build a bad-character table for an empty pattern")

    table = [ABSENT] * ALPHABET_SIZE
    # Later occurrences overwrite earlier ones
    for index, symbol in enumerate(pattern):
        table[symbol] = index
    return tuple(table)


@register_engine("Boyer-Moore")
class BoyerMooreEngine(SinglePatternEngine):
    """
    Boyer-Moore engine using the bad-character heuristic only.

    After a full match the alignment advances by one so overlapping
    occurrences are not skipped.
    """

    name = "Boyer-Moore"

    def preprocess(self, pattern: bytes) -> tuple[int, ...]:
        return compute_bad_character_table(pattern)

    def scan_range(self, text, pattern, table, start, stop, owner=None) -> list[Match]:
        """Try every alignment i with start <= i and i + m <= stop."""
        m = len(pattern)
        last_alignment = stop - m
        matches = []
        i = start

        while i <= last_alignment:
            j = m - 1
            while j >= 0 and pattern[j] == text[i + j]:
                j -= 1

            if j < 0:
                if owner is None or owner(i):
                    matches.append(Match(i, 0))
                i += 1
            else:
                # max() guards against the symbol's rightmost occurrence lying right of j
                i += max(1, j - table[text[i + j]])

        return matches
