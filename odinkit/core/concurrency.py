"""
Fail-fast joining of independent tasks.

The orchestrator runs two independent tasks side by side in exactly two
places: the cache restorer with the dependency installer, and the source
acquirer with the dependency installer. Both tasks always run to completion
(nothing is cancelled once started); the first failure is re-raised after
the join.
"""

import concurrent.futures
import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


def run_parallel(*tasks: Callable[[], Any]) -> List[Any]:
    """
    Run tasks concurrently and wait for all of them.

    Args:
        *tasks: Zero-argument callables

    Returns:
        Results in the same order as the tasks

    Raises:
        Exception: The first exception raised by any task, in completion order

    Example:
        >>> restored, _ = run_parallel(restorer.restore, installer_task)
    """
    if not tasks:
        return []

    results: List[Any] = [None] * len(tasks)
    first_error = None

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(tasks)) as pool:
        futures = {pool.submit(task): index for index, task in enumerate(tasks)}
        for future in concurrent.futures.as_completed(futures):
            index = futures[future]
            try:
                results[index] = future.result()
            except Exception as e:
                logger.debug(f"Parallel task {index} failed: {e}")
                if first_error is None:
                    first_error = e

    if first_error is not None:
        raise first_error

    return results


__all__ = ["run_parallel"]
