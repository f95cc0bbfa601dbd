"""
Parallel Helpers

Order-preserving thread pool mapping used for per-slit work.
"""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, TypeVar

from .errors import ValidationError

T = TypeVar('T')


def resolve_workers(max_workers: Optional[int]) -> int:
    """Return the worker count to use, defaulting to (cpu_count - 1)."""
    if max_workers is None:
        cpu_count = os.cpu_count() or 1
        return max(1, cpu_count - 1)
    if max_workers < 1:
        raise ValidationError(f"max_workers must be >= 1, got {max_workers}")
    return max_workers


def map_indexed(func: Callable[[int], T],
                count: int,
                max_workers: Optional[int] = None) -> List[T]:
    """
    Call ``func(i)`` for every i in [0, count) and collect the results.

    Results are stored in indexed slots, so ``result[i] == func(i)``
    regardless of which task finishes first.

    Args:
        func: Callable taking the task index
        count: Number of tasks
        max_workers: Thread count (None = cpu_count - 1, 1 = run inline)

    Returns:
        List of results in index order
    """
    workers = resolve_workers(max_workers)
    results: List[Optional[T]] = [None] * count

    if workers == 1 or count <= 1:
        for i in range(count):
            results[i] = func(i)
        return results

    with ThreadPoolExecutor(max_workers=min(workers, count)) as executor:
        future_to_idx = {executor.submit(func, i): i for i in range(count)}
        for future in as_completed(future_to_idx):
            results[future_to_idx[future]] = future.result()

    return results
