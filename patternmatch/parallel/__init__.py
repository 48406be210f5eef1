"""
Parallel processing utilities for PatternMatch.

This module provides Strategy Pattern-based parallel execution for the
data-parallel chunk scans of the matching engines.

Architecture:
    The module uses the Strategy Pattern to separate "what to parallelize"
    from "how to parallelize". This enables:

    1. Production use: ThreadPoolStrategy for actual parallel execution
    2. Testing: SequentialStrategy for deterministic, debuggable tests

Components:
    ExecutorStrategy - Abstract base class defining the execution interface
    ThreadPoolStrategy - Thread-based parallel execution (production)
    SequentialStrategy - Sequential execution (testing/debugging)
    ParallelTaskRunner - Fan-out / join orchestration with per-task results
    TaskResult - Dataclass for task execution results

Usage Example:
    from patternmatch.parallel import ThreadPoolStrategy, ParallelTaskRunner

    with ThreadPoolStrategy(max_workers=4) as strategy:
        runner = ParallelTaskRunner(strategy=strategy)
        results = runner.run(scan_chunk, [(c.index, c) for c in chunks])

Testing Example:
    from patternmatch.parallel import SequentialStrategy, ParallelTaskRunner

    runner = ParallelTaskRunner(strategy=SequentialStrategy())
    results = runner.run(scan_chunk, items)
    assert len(results) == len(items)
"""

from .executor_strategy import (
    ExecutorStrategy,
    ThreadPoolStrategy,
    SequentialStrategy,
)
from .task_runner import ParallelTaskRunner, TaskResult

__all__ = [
    # Strategies
    'ExecutorStrategy',
    'ThreadPoolStrategy',
    'SequentialStrategy',
    # Task runner
    'ParallelTaskRunner',
    'TaskResult',
]
