"""
Aho-Corasick Multi-Pattern Matching Engine

Searches for a whole set of patterns in one pass over the text.

Construction happens in two phases:
1. Trie insertion - each pattern is walked/created symbol by symbol from the
   root; the terminal node records the pattern's index. Indices follow
   insertion order and duplicate patterns keep separate indices.
2. Failure links - computed breadth-first. A node's failure link points to
   the deepest node whose path is a proper suffix of its own path; each node's
   output set is extended with its failure node's outputs, so shorter suffix
   matches are reported too.

The automaton has an explicit lifecycle:

    UNBUILT --build()--> BUILT

Patterns can only be added while UNBUILT. build() freezes every node
(children and outputs become tuples), after which the automaton is shared
read-only by all parallel workers without locking. Scanning an UNBUILT
automaton builds it first.

Example:
    from patternmatch.matching import get_engine

    ac = get_engine("Aho-Corasick", patterns=[b"ABC", b"BC"])
    result = ac.search_sequential(b"XABCX")
    result.positions  # (1, 2)
    result.matches    # (Match(position=1, pattern_index=0), Match(position=2, pattern_index=1))
"""

import threading
from collections import deque
from enum import Enum
from typing import Iterable

from patternmatch.config import ALPHABET_SIZE
from patternmatch.logging_config import Timer, debug_log
from patternmatch.matching import register_engine
from patternmatch.matching.base import (
    AutomatonFrozenError,
    BaseMatchEngine,
    InvalidPatternError,
    Match,
    SearchResult,
    to_symbols,
)
from patternmatch.parallel import ExecutorStrategy
from patternmatch.system_resources import resolve_worker_count


class AutomatonState(Enum):
    """Lifecycle of an AhoCorasickAutomaton."""
    UNBUILT = "unbuilt"
    BUILT = "built"


class AutomatonNode:
    """
    One state of the automaton (one trie node).

    Attributes:
        children: ALPHABET_SIZE slots, symbol -> child node or None
        failure: Fallback state; None only for the root
        outputs: Indices of patterns recognized on entering this state
        depth: Length of the path from the root
    """

    __slots__ = ('children', 'failure', 'outputs', 'depth')

    def __init__(self, depth: int = 0):
        self.children = [None] * ALPHABET_SIZE
        self.failure = None
        self.outputs = []
        self.depth = depth

    def __repr__(self) -> str:
        edges = sum(1 for child in self.children if child is not None)
        return f"AutomatonNode(depth={self.depth}, edges={edges}, outputs={list(self.outputs)})"


class AhoCorasickAutomaton:
    """
    Trie of patterns with failure links and propagated output sets.

    Thread safety: add_pattern() and build() take an internal lock, so a
    pattern can never be inserted while failure links are being computed.
    Once BUILT the structure is immutable and needs no locking.
    """

    def __init__(self, patterns: Iterable = ()):
        self._root = AutomatonNode()
        self._patterns: list[bytes] = []
        self._node_count = 1
        self._state = AutomatonState.UNBUILT
        self._lock = threading.Lock()
        self._pattern_lengths: tuple[int, ...] = ()

        for pattern in patterns:
            self.add_pattern(pattern)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_pattern(self, pattern) -> int:
        """
        Insert a pattern into the trie.

        Args:
            pattern: Non-empty bytes (or 8-bit str).

        Returns:
            The index assigned to the pattern (insertion order).

        Raises:
            InvalidPatternError: If the pattern is empty or not 8-bit.
            AutomatonFrozenError: If the automaton has already been built.
        """
        pattern = to_symbols(pattern, "pattern")
        if not pattern:
            raise InvalidPatternError("Aho-Corasick: pattern cannot be empty")

        with self._lock:
            if self._state is AutomatonState.BUILT:
                raise AutomatonFrozenError(
                    "Cannot add patterns after build(); create a new automaton instead"
                )

            node = self._root
            for symbol in pattern:
                child = node.children[symbol]
                if child is None:
                    child = AutomatonNode(depth=node.depth + 1)
                    node.children[symbol] = child
                    self._node_count += 1
                node = child

            index = len(self._patterns)
            self._patterns.append(pattern)
            node.outputs.append(index)

        return index

    def build(self) -> None:
        """
        Compute failure links and freeze the automaton.

        Calling build() on an already built automaton does nothing.
        """
        with self._lock:
            if self._state is AutomatonState.BUILT:
                return

            with Timer("[AhoCorasick] Failure-link construction", auto_log=False) as timer:
                self._link_failures()
                self._freeze()
                self._pattern_lengths = tuple(len(p) for p in self._patterns)
                self._state = AutomatonState.BUILT

        debug_log(
            f"[AhoCorasick] Built automaton: {len(self._patterns)} patterns, "
            f"{self._node_count} states ({timer.duration_ms:.3f} ms)"
        )

    def _link_failures(self) -> None:
        root = self._root
        queue = deque()

        # Depth 1 fails to the root
        for child in root.children:
            if child is not None:
                child.failure = root
                queue.append(child)

        while queue:
            current = queue.popleft()
            for symbol, child in enumerate(current.children):
                if child is None:
                    continue
                queue.append(child)

                # Walk the parent's failure chain until some state has this transition;
                # past the root (failure None) the chain ends at the root.
                fallback = current.failure
                while fallback is not None and fallback.children[symbol] is None:
                    fallback = fallback.failure

                target = fallback.children[symbol] if fallback is not None else root
                if target is None or target is child:
                    target = root

                child.failure = target
                child.outputs.extend(target.outputs)

    def _freeze(self) -> None:
        stack = [self._root]
        while stack:
            node = stack.pop()
            node.children = tuple(node.children)
            node.outputs = tuple(node.outputs)
            stack.extend(child for child in node.children if child is not None)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> AutomatonState:
        return self._state

    @property
    def is_built(self) -> bool:
        return self._state is AutomatonState.BUILT

    @property
    def root(self) -> AutomatonNode:
        return self._root

    @property
    def patterns(self) -> tuple[bytes, ...]:
        return tuple(self._patterns)

    @property
    def pattern_count(self) -> int:
        return len(self._patterns)

    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def max_pattern_length(self) -> int:
        """Length of the longest pattern (0 when there are none)."""
        return max((len(p) for p in self._patterns), default=0)

    def step(self, state: AutomatonNode, symbol: int) -> AutomatonNode:
        """
        Consume one symbol from `state` and return the next state.

        Follows failure links while the state has no transition for the
        symbol; the root absorbs symbols that start no pattern.
        """
        root = self._root
        while state is not root and state.children[symbol] is None:
            state = state.failure
        nxt = state.children[symbol]
        return nxt if nxt is not None else state

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def scan_range(self, text: bytes, start: int, stop: int, owner=None) -> list[Match]:
        """
        Run the automaton over text[start:stop] starting from the root.

        Matches are emitted in scan order; within one text position the
        longer patterns come first. Only matches accepted by `owner` are kept.

        Raises:
            RuntimeError: If called before build().
        """
        if not self.is_built:
            raise RuntimeError("scan_range() requires a built automaton")

        root = self._root
        lengths = self._pattern_lengths
        matches = []
        state = root

        for i in range(start, stop):
            symbol = text[i]
            while state is not root and state.children[symbol] is None:
                state = state.failure
            nxt = state.children[symbol]
            if nxt is not None:
                state = nxt

            for pattern_index in state.outputs:
                position = i - lengths[pattern_index] + 1
                if owner is None or owner(position):
                    matches.append(Match(position, pattern_index))

        return matches

    def __repr__(self) -> str:
        return (
            f"AhoCorasickAutomaton(patterns={len(self._patterns)}, "
            f"states={self._node_count}, state={self._state.value})"
        )


@register_engine("Aho-Corasick")
class AhoCorasickEngine(BaseMatchEngine):
    """
    Aho-Corasick engine: one automaton, many patterns.

    Patterns are registered with add_pattern() (or the constructor) and the
    automaton is frozen by build(), explicitly or implicitly on the first scan.
    A scan with no registered patterns returns an empty result.

    Args:
        patterns: Optional initial patterns.
    """

    name = "Aho-Corasick"

    def __init__(self, patterns: Iterable = ()):
        super().__init__()
        self.automaton = AhoCorasickAutomaton(patterns)

    def add_pattern(self, pattern) -> int:
        """Register a pattern; see AhoCorasickAutomaton.add_pattern()."""
        return self.automaton.add_pattern(pattern)

    def build(self) -> None:
        """Freeze the automaton; later add_pattern() calls are rejected."""
        self.automaton.build()

    @property
    def patterns(self) -> tuple[bytes, ...]:
        return self.automaton.patterns

    def search_sequential(self, text) -> SearchResult:
        """
        Find every occurrence of every registered pattern in one pass.

        Args:
            text: Text to search (bytes, or str restricted to 8-bit characters)

        Returns:
            SearchResult; positions are the distinct start offsets, matches
            carries the pattern index of each occurrence.
        """
        text = to_symbols(text, "text")

        with Timer(f"{self.name} sequential scan", auto_log=False) as timer:
            self.automaton.build()
            matches = self.automaton.scan_range(text, 0, len(text))

        debug_log(
            f"[{self.name}] Sequential: {len(matches)} matches of "
            f"{self.automaton.pattern_count} patterns in {len(text)} symbols "
            f"({timer.duration_ms:.3f} ms)"
        )
        return self._build_result(matches, timer, 1, False, self.automaton.patterns)

    def search_parallel(
        self,
        text,
        worker_count: int | None = None,
        strategy: ExecutorStrategy | None = None,
    ) -> SearchResult:
        """
        Scan overlapping chunks of `text` in parallel against the shared automaton.

        The overlap is max_pattern_length - 1 since any pattern may straddle a
        chunk boundary. Every worker starts from the root.

        Args:
            text: Text to search
            worker_count: Number of chunks/workers; None, 0 or negative = auto
            strategy: Optional execution strategy (e.g. SequentialStrategy in tests)

        Returns:
            SearchResult with is_parallel=True
        """
        text = to_symbols(text, "text")
        workers = resolve_worker_count(worker_count)

        with Timer(f"{self.name} parallel scan", auto_log=False) as timer:
            # Build-then-freeze happens before any worker starts
            self.automaton.build()
            automaton = self.automaton

            if automaton.pattern_count == 0:
                matches = []
            else:
                def scan_chunk(chunk) -> list[Match]:
                    if chunk.is_empty:
                        return []
                    return automaton.scan_range(text, chunk.start, chunk.scan_end, chunk.owns)

                matches = self._scan_parallel(
                    len(text), automaton.max_pattern_length - 1, scan_chunk, workers, strategy
                )

        debug_log(
            f"[{self.name}] Parallel ({workers} workers): {len(matches)} matches "
            f"({timer.duration_ms:.3f} ms)"
        )
        return self._build_result(matches, timer, workers, True, self.automaton.patterns)

    def get_config(self) -> dict:
        config = super().get_config()
        config.update({
            "patterns": self.automaton.pattern_count,
            "built": self.automaton.is_built,
        })
        return config
