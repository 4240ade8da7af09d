"""Executor helpers shared by the graph builder and the centrality engine."""

from __future__ import annotations

import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

# Default worker count: use CPU count, capped at 8
DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)


def resolve_workers(workers: Optional[int]) -> int:
    return workers or DEFAULT_WORKERS


def make_executor(kind: str, workers: int, **kwargs) -> Executor:
    """Create a thread or process pool with ``workers`` workers."""
    if kind == "process":
        return ProcessPoolExecutor(max_workers=workers, **kwargs)
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=workers, **kwargs)
    raise ValueError(f"Unknown executor: {kind!r}. Choose from: process, thread")


def chunked(items: Sequence[T], parts: int) -> list[Sequence[T]]:
    """Split ``items`` into at most ``parts`` contiguous, near-equal slices."""
    if not items:
        return []
    parts = max(1, min(parts, len(items)))
    size, extra = divmod(len(items), parts)
    chunks = []
    start = 0
    for i in range(parts):
        end = start + size + (1 if i < extra else 0)
        chunks.append(items[start:end])
        start = end
    return chunks


def tree_reduce(
    combine: Callable[[T, T], T],
    items: Sequence[T],
    identity: Callable[[], T],
    executor: Optional[Executor] = None,
) -> T:
    """Balanced pairwise reduction.

    Each round combines neighbours ``(0,1), (2,3), ...`` and carries an odd
    last item over, so ``m`` items take ``ceil(log2 m)`` rounds. With an
    executor the pairs of one round are combined concurrently. ``combine``
    must be associative; it must be a module-level function for process pools.
    """
    level = list(items)
    if not level:
        return identity()
    while len(level) > 1:
        lefts = level[0:-1:2]
        rights = level[1::2]
        carry = [level[-1]] if len(level) % 2 else []
        if executor is None or len(lefts) == 1:
            merged = [combine(a, b) for a, b in zip(lefts, rights)]
        else:
            merged = list(executor.map(combine, lefts, rights))
        level = merged + carry
    return level[0]
