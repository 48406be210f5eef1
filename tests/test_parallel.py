"""
Tests for the parallel processing module.

Tests cover:
- ExecutorStrategy implementations (ThreadPool, Sequential)
- ParallelTaskRunner fan-out / join, ordering and error capture
- Integration with config / system resources
"""

import sys
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from patternmatch.parallel import (
    ExecutorStrategy,
    ParallelTaskRunner,
    SequentialStrategy,
    TaskResult,
    ThreadPoolStrategy,
)


class TestSequentialStrategy:
    """Test SequentialStrategy for deterministic execution."""

    def test_sequential_runs_on_calling_thread(self):
        """Sequential strategy executes each task immediately, in submission order."""
        strategy = SequentialStrategy()
        seen = []
        for x in [1, 2, 3]:
            strategy.submit(lambda v: seen.append((v, threading.current_thread())), x)
        assert [v for v, _ in seen] == [1, 2, 3]
        assert all(t is threading.current_thread() for _, t in seen)

    def test_sequential_submit_returns_completed_future(self):
        """Submit returns a Future that is already complete."""
        strategy = SequentialStrategy()
        future = strategy.submit(lambda x: x + 10, 5)
        assert future.done()
        assert future.result() == 15

    def test_sequential_submit_captures_exceptions(self):
        """Submit captures exceptions in the Future."""
        strategy = SequentialStrategy()

        def raise_error(x):
            raise ValueError("Test error")

        future = strategy.submit(raise_error, 1)
        assert future.done()
        with pytest.raises(ValueError, match="Test error"):
            future.result()

    def test_sequential_max_workers_is_one(self):
        """Sequential strategy always has max_workers=1."""
        assert SequentialStrategy().max_workers == 1

    def test_sequential_context_manager(self):
        """Sequential strategy works as context manager."""
        with SequentialStrategy() as strategy:
            result = [strategy.submit(str.upper, s).result() for s in ["a", "b", "c"]]
        assert result == ["A", "B", "C"]

    def test_sequential_is_an_executor_strategy(self):
        assert isinstance(SequentialStrategy(), ExecutorStrategy)


class TestThreadPoolStrategy:
    """Test ThreadPoolStrategy for parallel execution."""

    def test_threadpool_default_uses_available_parallelism(self):
        """Default max_workers comes from the platform when no override is configured."""
        with patch("patternmatch.system_resources.PARALLEL_MAX_WORKERS", None), \
             patch("patternmatch.system_resources.get_available_parallelism", return_value=6):
            strategy = ThreadPoolStrategy()
        assert strategy.max_workers == 6
        strategy.shutdown()

    @pytest.mark.parametrize("requested", [0, -1, -8])
    def test_threadpool_non_positive_means_auto(self, requested):
        """Zero or negative worker counts are normalized, not rejected."""
        with patch("patternmatch.system_resources.PARALLEL_MAX_WORKERS", None), \
             patch("patternmatch.system_resources.get_available_parallelism", return_value=3):
            strategy = ThreadPoolStrategy(max_workers=requested)
        assert strategy.max_workers == 3
        strategy.shutdown()

    def test_threadpool_custom_max_workers(self):
        """Custom max_workers is respected."""
        strategy = ThreadPoolStrategy(max_workers=2)
        assert strategy.max_workers == 2
        strategy.shutdown()

    def test_threadpool_processes_all_items(self):
        """ThreadPool processes all submitted items."""
        with ThreadPoolStrategy(max_workers=2) as strategy:
            futures = [strategy.submit(lambda x: x * 2, x) for x in [1, 2, 3, 4]]
            results = [f.result(timeout=1) for f in futures]
        assert results == [2, 4, 6, 8]

    def test_threadpool_executes_concurrently(self):
        """ThreadPool executes tasks concurrently."""
        start_times = []
        end_times = []

        def slow_task(x):
            start_times.append(time.time())
            time.sleep(0.1)
            end_times.append(time.time())
            return x

        with ThreadPoolStrategy(max_workers=4) as strategy:
            futures = [strategy.submit(slow_task, x) for x in [1, 2, 3, 4]]
            for future in futures:
                future.result(timeout=1)

        # If sequential, total time would be ~0.4s; parallel should be ~0.1s
        total_duration = max(end_times) - min(start_times)
        assert total_duration < 0.25, f"Tasks should run in parallel, took {total_duration}s"

    def test_threadpool_submit_returns_future(self):
        """Submit returns a Future for async result retrieval."""
        with ThreadPoolStrategy(max_workers=2) as strategy:
            future = strategy.submit(lambda x: x * 2, 21)
            assert future.result(timeout=1) == 42


class TestParallelTaskRunner:
    """Test ParallelTaskRunner for fan-out / join orchestration."""

    def test_runner_processes_all_tasks(self):
        """Runner processes all submitted tasks."""
        runner = ParallelTaskRunner(strategy=SequentialStrategy())

        items = [(0, 10), (1, 20), (2, 30)]
        results = runner.run(lambda x: x * 2, items)

        assert len(results) == 3
        assert all(r.success for r in results)
        assert [r.result for r in results] == [20, 40, 60]

    def test_runner_handles_empty_items(self):
        """Runner handles empty task list gracefully."""
        runner = ParallelTaskRunner(strategy=SequentialStrategy())
        assert runner.run(lambda x: x, []) == []

    def test_runner_returns_submission_order_even_if_tasks_finish_out_of_order(self):
        """Results follow task order, not completion order."""
        def delayed(x):
            time.sleep(0.05 * (3 - x))
            return x

        with ThreadPoolStrategy(max_workers=3) as strategy:
            results = ParallelTaskRunner(strategy=strategy).run(delayed, [(i, i) for i in range(3)])

        assert [r.task_id for r in results] == [0, 1, 2]
        assert [r.result for r in results] == [0, 1, 2]

    def test_runner_waits_for_all_tasks(self):
        """run() returns only after every worker has finished (join barrier)."""
        finished = []
        lock = threading.Lock()

        def task(x):
            time.sleep(0.02 * x)
            with lock:
                finished.append(x)
            return x

        with ThreadPoolStrategy(max_workers=4) as strategy:
            ParallelTaskRunner(strategy=strategy).run(task, [(i, i) for i in range(4)])
            assert sorted(finished) == [0, 1, 2, 3]

    def test_runner_captures_task_errors(self):
        """Runner captures exceptions per-task without aborting others."""
        runner = ParallelTaskRunner(strategy=SequentialStrategy())

        def maybe_fail(x):
            if x == 2:
                raise ValueError("Task 2 failed")
            return x * 10

        results = runner.run(maybe_fail, [("t1", 1), ("t2", 2), ("t3", 3)])

        assert len(results) == 3
        failed = [r for r in results if not r.success]
        assert len(failed) == 1
        assert failed[0].task_id == "t2"
        assert isinstance(failed[0].error, ValueError)
        assert len([r for r in results if r.success]) == 2


class TestTaskResult:
    """Test TaskResult dataclass."""

    def test_task_result_success(self):
        result = TaskResult(task_id=0, success=True, result=[1, 2])
        assert result.success
        assert result.result == [1, 2]
        assert result.error is None

    def test_task_result_failure(self):
        error = ValueError("Test error")
        result = TaskResult(task_id=3, success=False, error=error)
        assert not result.success
        assert result.result is None
        assert result.error is error


class TestIntegrationWithConfig:
    """Test integration with config constants."""

    def test_configured_override_wins_over_platform(self):
        """A configured PARALLEL_MAX_WORKERS replaces auto-detection."""
        with patch("patternmatch.system_resources.PARALLEL_MAX_WORKERS", 2):
            strategy = ThreadPoolStrategy()
        assert strategy.max_workers == 2
        strategy.shutdown()

    def test_user_defined_workers_bounds_enforced(self):
        """User-defined worker count is bounded between 1 and 64."""
        from patternmatch.config import _user_workers, USER_DEFINED_MAX_WORKER_COUNT
        assert 1 <= _user_workers <= 64
        assert _user_workers == max(1, min(64, USER_DEFINED_MAX_WORKER_COUNT))

    def test_auto_detection_is_default(self):
        from patternmatch.config import PARALLEL_MAX_WORKERS, USER_PICKS_MAX_WORKER_COUNT
        assert USER_PICKS_MAX_WORKER_COUNT is False
        assert PARALLEL_MAX_WORKERS is None
