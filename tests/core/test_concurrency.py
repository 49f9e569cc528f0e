"""
Unit tests for the parallel join primitive.
"""

import threading

import pytest

from odinkit.core.concurrency import run_parallel


class TestRunParallel:
    """Test run_parallel()."""

    def test_results_in_task_order(self):
        """Test results are returned in submission order."""
        assert run_parallel(lambda: "a", lambda: "b") == ["a", "b"]

    def test_no_tasks(self):
        """Test an empty join returns an empty list."""
        assert run_parallel() == []

    def test_tasks_run_concurrently(self):
        """Test both tasks are running at the same time."""
        barrier = threading.Barrier(2, timeout=5)

        def task():
            barrier.wait()
            return True

        assert run_parallel(task, task) == [True, True]

    def test_first_failure_is_raised(self):
        """Test a failing task fails the join."""

        def fail():
            raise RuntimeError("clone failed")

        with pytest.raises(RuntimeError, match="clone failed"):
            run_parallel(fail, lambda: None)

    def test_other_task_runs_to_completion(self):
        """Test the sibling task is not cancelled when one task fails."""
        started = threading.Event()
        finished = threading.Event()

        def fail():
            started.wait(timeout=5)
            raise RuntimeError("install failed")

        def slow():
            started.set()
            finished.wait(timeout=0.2)
            finished.set()

        with pytest.raises(RuntimeError, match="install failed"):
            run_parallel(fail, slow)

        assert finished.is_set()
