"""Weighted betweenness centrality (Brandes, with Dijkstra per source).

C_B(v) = Σ_{s≠v≠t} σ_st(v) / σ_st, normalized by 1 / ((n-1)(n-2)).

Each source runs an independent shortest-path search that records the
finish order, the number of shortest paths σ and the predecessor lists.
Walking the finish stack backwards yields that source's dependency vector;
the vectors of all sources are summed. Searches share no mutable state, so
sources are spread over a thread or process pool and the partial sums are
added up at the end.

Reference: Brandes, "A Faster Algorithm for Betweenness Centrality" (2001).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from heapq import heappop, heappush
from typing import Iterable, Optional, Sequence

import numpy as np

from ..exceptions import InvalidWeightError
from ..logging_config import get_logger
from ..parallel import chunked, make_executor, resolve_workers
from .models import CochangeGraph

logger = get_logger(__name__)

Adjacency = Sequence[Sequence[tuple[int, int]]]

# Below this many nodes a sequential fold beats pool start-up
_MIN_PARALLEL_NODES = 32


@dataclass
class ShortestPaths:
    """Result of one single-source search.

    Attributes:
        source: Handle of the start node
        stack: Finalized nodes in non-decreasing distance order
        pred: pred[v] = predecessors of v on some shortest path
        sigma: sigma[v] = number of shortest paths from source to v
        dist: Final distance per node, None when unreachable
    """

    source: int
    stack: list[int]
    pred: list[list[int]]
    sigma: list[int]
    dist: list[Optional[int]]

    def dependencies(self) -> np.ndarray:
        """Back-propagate dependencies; the source's own entry is zero."""
        delta = np.zeros(len(self.sigma))
        for w in reversed(self.stack):
            coeff = (1.0 + delta[w]) / self.sigma[w]
            for v in self.pred[w]:
                delta[v] += self.sigma[v] * coeff
        delta[self.source] = 0.0
        return delta


def single_source_dijkstra(
    adjacency: Adjacency, source: int, rank: Optional[Sequence[int]] = None
) -> ShortestPaths:
    """Dijkstra that counts shortest paths and keeps every tied predecessor.

    A node is finalized when it leaves the heap and is never touched again.
    Relaxing (v, w) with a strictly shorter candidate resets w to v's path
    count and predecessor; an equal candidate adds to both.

    Nodes at equal distance leave the heap in ``rank`` order (default: by
    handle). Zero-weight edges make that order matter, so callers pass a
    rank derived from the paths to get results independent of how the graph
    was assembled.
    """
    n = len(adjacency)
    dist: list[Optional[int]] = [None] * n
    seen: list[Optional[int]] = [None] * n
    sigma = [0] * n
    pred: list[list[int]] = [[] for _ in range(n)]
    stack: list[int] = []
    if rank is None:
        rank = range(n)

    sigma[source] = 1
    seen[source] = 0
    frontier = [(0, rank[source], source)]

    while frontier:
        d, _, v = heappop(frontier)
        if dist[v] is not None:
            continue
        dist[v] = d
        stack.append(v)

        for w, weight in adjacency[v]:
            if dist[w] is not None:
                continue
            candidate = d + weight
            tentative = seen[w]
            if tentative is None or candidate < tentative:
                seen[w] = candidate
                heappush(frontier, (candidate, rank[w], w))
                sigma[w] = sigma[v]
                pred[w] = [v]
            elif candidate == tentative:
                sigma[w] += sigma[v]
                pred[w].append(v)

    return ShortestPaths(source=source, stack=stack, pred=pred, sigma=sigma, dist=dist)


def accumulate_dependencies(
    adjacency: Adjacency, sources: Iterable[int], rank: Optional[Sequence[int]] = None
) -> np.ndarray:
    """Sum of the dependency vectors of ``sources``."""
    total = np.zeros(len(adjacency))
    for s in sources:
        total += single_source_dijkstra(adjacency, s, rank).dependencies()
    return total


def normalization_scale(n: int) -> float:
    if n <= 2:
        return 1.0
    return 1.0 / ((n - 1) * (n - 2))


class CentralityEngine:
    """Betweenness centrality for every file of a distance graph.

    Attributes:
        workers: Parallel workers; 1 forces a sequential fold
        executor: "thread" or "process"
        min_parallel_nodes: Smaller graphs are always folded sequentially
    """

    def __init__(
        self,
        workers: Optional[int] = None,
        executor: str = "thread",
        min_parallel_nodes: int = _MIN_PARALLEL_NODES,
    ) -> None:
        self.workers = resolve_workers(workers)
        self.executor = executor
        self.min_parallel_nodes = min_parallel_nodes

    def centrality(self, graph: CochangeGraph) -> dict[str, float]:
        """Return path -> normalized betweenness.

        Raises:
            InvalidWeightError: If any edge has a negative weight
        """
        n = graph.node_count
        if n <= 1:
            return {}

        check_weights(graph)
        adjacency = graph.adjacency_lists()
        totals = self._accumulate(adjacency, graph.path_ranks()) * normalization_scale(n)

        return {graph.node(i).path: float(totals[i]) for i in range(n)}

    def _accumulate(self, adjacency: Adjacency, rank: Sequence[int]) -> np.ndarray:
        n = len(adjacency)
        if self.workers == 1 or n < self.min_parallel_nodes:
            return accumulate_dependencies(adjacency, range(n), rank)

        chunks = chunked(range(n), self.workers)
        logger.debug("Centrality: %d sources over %d %s workers", n, len(chunks), self.executor)
        total = np.zeros(n)
        with make_executor(self.executor, self.workers) as pool:
            for part in pool.map(partial(accumulate_dependencies, adjacency, rank=rank), chunks):
                total += part
        return total


def check_weights(graph: CochangeGraph) -> None:
    """Fail fast on negative weights; Dijkstra is wrong with them."""
    for (a, b), weight in graph.edge_items():
        if weight < 0:
            raise InvalidWeightError(graph.node(a).path, graph.node(b).path, weight)


def betweenness_centrality(
    graph: CochangeGraph, workers: Optional[int] = None, executor: str = "thread"
) -> dict[str, float]:
    """Convenience wrapper around ``CentralityEngine``."""
    return CentralityEngine(workers=workers, executor=executor).centrality(graph)
