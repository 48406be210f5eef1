"""
Random Test Text Generation

Generates benchmark texts over a small alphabet (DNA-like "ACGT" by
default) and cuts patterns out of them, so a benchmark pattern is guaranteed
to occur at least once.

Each TextGenerator owns its random.Random instance; there is no shared
module-level generator, and the same seed always yields the same text.

Usage:
    generator = TextGenerator(seed=42)
    text = generator.generate_text(1_000_000)
    pattern = generator.extract_pattern(text, 12)
"""

import random

from patternmatch.config import DEFAULT_ALPHABET, DEFAULT_SEED
from patternmatch.matching.base import to_symbols


class TextGenerator:
    """
    Seeded generator of random texts and patterns.

    Args:
        seed: Seed for this generator's private random.Random.
    """

    def __init__(self, seed: int | None = DEFAULT_SEED):
        self.seed = seed
        self._random = random.Random(seed)

    def generate_text(self, length: int, alphabet=DEFAULT_ALPHABET) -> bytes:
        """
        Generate `length` symbols drawn uniformly from `alphabet`.

        Raises:
            ValueError: If length is negative or the alphabet is empty.
        """
        if length < 0:
            raise ValueError(f"length cannot be negative, got {length}")
        symbols = to_symbols(alphabet, "alphabet")
        if not symbols:
            raise ValueError("alphabet cannot be empty")
        return bytes(self._random.choices(symbols, k=length))

    def extract_pattern(self, text, length: int) -> bytes:
        """
        Cut a random substring of `length` symbols out of `text`.

        A length larger than the text is clipped to the text length.

        Raises:
            ValueError: If the text is empty or length < 1.
        """
        text = to_symbols(text, "text")
        if not text:
            raise ValueError("Cannot extract a pattern from an empty text")
        if length < 1:
            raise ValueError(f"Pattern length must be at least 1, got {length}")

        length = min(length, len(text))
        start = self._random.randint(0, len(text) - length)
        return text[start:start + length]
