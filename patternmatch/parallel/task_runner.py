"""
Task runner for data-parallel chunk scans.

Provides a fan-out / join interface over an ExecutorStrategy: every item is
submitted as an independent task, the caller blocks until all of them have
finished, and each task's outcome is reported separately.

Design Principles:
- Single Responsibility: TaskResult holds result data, ParallelTaskRunner
  handles execution orchestration.
- Dependency Inversion: Runner depends on ExecutorStrategy abstraction,
  not concrete implementations.
- No shared output: each task returns its own value; the runner only
  collects them after the join.

Usage:
    runner = ParallelTaskRunner(strategy=ThreadPoolStrategy(max_workers=4))

    items = [(chunk.index, chunk) for chunk in chunks]
    results = runner.run(scan_chunk, items)

    for result in results:
        if not result.success:
            raise result.error
"""

from dataclasses import dataclass
from typing import Callable, Any, Hashable
from concurrent.futures import wait

from .executor_strategy import ExecutorStrategy


@dataclass
class TaskResult:
    """
    Result of a single task execution.

    Attributes:
        task_id: Identifier for the task (the chunk/worker index for scans).
        success: True if task completed without exception.
        result: Return value from the task function (if success=True).
        error: Exception raised by the task (if success=False).
    """
    task_id: Hashable
    success: bool
    result: Any = None
    error: Exception = None


class ParallelTaskRunner:
    """
    Runs tasks using a configurable ExecutorStrategy.

    Features:
    - Join barrier: run() returns only after every submitted task finished
    - Results returned in submission order (task order), regardless of the
      order in which workers finish
    - Exception handling per-task (one failure doesn't abort other tasks)

    There is no cancellation: once started, every task runs to completion.

    Args:
        strategy: ExecutorStrategy implementation to use for execution.
    """

    def __init__(self, strategy: ExecutorStrategy):
        self.strategy = strategy

    def run(
        self,
        fn: Callable[[Any], Any],
        items: list[tuple[Hashable, Any]]
    ) -> list[TaskResult]:
        """
        Run function over items and wait for all of them.

        Args:
            fn: Function to execute for each item. Receives the payload
                from the items tuple.
            items: List of (task_id, payload) tuples.

        Returns:
            List of TaskResult objects in submission order.
        """
        if not items:
            return []

        submitted = [
            (task_id, self.strategy.submit(fn, payload))
            for task_id, payload in items
        ]

        # Join barrier: the only synchronization point between workers
        wait([future for _, future in submitted])

        results = []
        for task_id, future in submitted:
            exc = future.exception()
            if exc is None:
                results.append(TaskResult(task_id=task_id, success=True, result=future.result()))
            else:
                results.append(TaskResult(task_id=task_id, success=False, error=exc))

        return results
