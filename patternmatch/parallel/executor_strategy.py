"""
Parallel execution strategies for PatternMatch.

Implements Strategy Pattern to separate "what to parallelize" (one chunk
scan per worker) from "how to parallelize". Enables dependency injection
for testing.

Design Principles:
- Strategy Pattern: Different execution strategies (ThreadPool, Sequential)
  implement the same interface, allowing runtime selection.
- Dependency Injection: Engines accept a strategy as parameter, enabling
  deterministic testing with SequentialStrategy.
- Liskov Substitution: SequentialStrategy can replace ThreadPoolStrategy
  without changing results (same interface, same semantics).

Usage:
    # Production (parallel execution)
    strategy = ThreadPoolStrategy(max_workers=4)

    # Testing (deterministic, sequential execution)
    strategy = SequentialStrategy()

    # Both work identically:
    future = strategy.submit(scan_chunk, chunk)
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, TypeVar

from patternmatch.system_resources import resolve_worker_count

T = TypeVar('T')
R = TypeVar('R')


class ExecutorStrategy(ABC):
    """
    Abstract strategy for parallel execution.

    Defines the interface that all execution strategies must implement.

    Attributes:
        max_workers: Number of concurrent workers (1 for sequential).
    """

    max_workers: int

    @abstractmethod
    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """
        Submit a single task for execution.

        Args:
            fn: Function to execute.
            item: Argument to pass to the function.

        Returns:
            Future object that will contain the result.
        """
        pass

    @abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the executor and release resources.

        Args:
            wait: If True, wait for pending tasks to complete.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures cleanup."""
        self.shutdown(wait=True)
        return False


class ThreadPoolStrategy(ExecutorStrategy):
    """
    Thread-based parallel execution strategy.

    Every worker reads the same immutable text buffer and the same frozen
    preprocessing structure, so threads share them without copying and
    without locks.

    Args:
        max_workers: Maximum concurrent threads. None, zero or negative
                    selects the platform-reported available parallelism.

    Example:
        with ThreadPoolStrategy(max_workers=2) as strategy:
            futures = [strategy.submit(scan_chunk, chunk) for chunk in chunks]
    """

    def __init__(self, max_workers: int | None = None):
        max_workers = resolve_worker_count(max_workers)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="patternmatch-worker",
        )
        self.max_workers = max_workers

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """Submit a single task to the thread pool."""
        return self._executor.submit(fn, item)

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the thread pool."""
        self._executor.shutdown(wait=wait)


class SequentialStrategy(ExecutorStrategy):
    """
    Sequential execution strategy for testing and debugging.

    Runs every chunk scan on the calling thread, one after another, in
    chunk order. Produces exactly the same merged result as
    ThreadPoolStrategy, which makes it useful for isolating partitioning
    bugs from threading bugs.

    Example:
        result = KMPEngine().search_parallel(
            text, pattern, worker_count=8, strategy=SequentialStrategy()
        )
    """

    def __init__(self):
        """Initialize sequential strategy with max_workers=1."""
        self.max_workers = 1

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """
        Execute function synchronously and return completed Future.

        The function is executed immediately (not deferred), and the
        result is wrapped in a Future for interface compatibility.
        """
        future: Future = Future()
        try:
            result = fn(item)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """No-op for sequential strategy (no resources to release)."""
        pass
