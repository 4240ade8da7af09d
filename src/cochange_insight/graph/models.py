"""Data models for the co-change graph.

The graph is index based: every file gets a dense integer handle
(``0..n-1``) and edges are keyed by the ordered handle pair ``(low, high)``.
Merging two graphs therefore only needs a handle translation table.

Weights start as raw co-occurrence counts. ``to_distance()`` turns them into
``max_weight - count`` exactly once, so strongly coupled files end up close.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from ..exceptions import GraphError, NodeNotFoundError
from ..temporal.models import ChangeKind

EdgeKey = tuple[int, int]


@dataclass
class FileNode:
    """Attribute record owned by the graph for one file.

    ``kind`` is ADDED only while every contributing change-set added the
    file; any disagreement collapses it to MODIFIED, whatever the merge order.
    """

    path: str
    kind: Optional[ChangeKind] = None


def _edge_key(a: int, b: int) -> EdgeKey:
    return (a, b) if a < b else (b, a)


def _combine_kinds(
    a: Optional[ChangeKind], b: Optional[ChangeKind]
) -> Optional[ChangeKind]:
    if a is None:
        return b
    if b is None or a is b:
        return a
    return ChangeKind.MODIFIED


class CochangeGraph:
    """Undirected weighted graph of files that change together.

    Attributes:
        is_distance: True once weights have been turned into distances
    """

    def __init__(self) -> None:
        self._nodes: list[FileNode] = []
        self._index: dict[str, int] = {}
        self._edges: dict[EdgeKey, int] = {}
        self._adjacency: list[dict[int, int]] = []
        self.is_distance = False

    # ── Size ─────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    # ── Construction ─────────────────────────────────────────────────

    def ensure_node(self, path: str, kind: Optional[ChangeKind] = None) -> int:
        """Return the handle for ``path``, creating the node if absent.

        The stored kind is refreshed when a new one is given.
        """
        idx = self._index.get(path)
        if idx is None:
            idx = len(self._nodes)
            self._nodes.append(FileNode(path=path, kind=kind))
            self._index[path] = idx
            self._adjacency.append({})
        elif kind is not None:
            self._nodes[idx].kind = kind
        return idx

    def add_weight(self, a: int, b: int, weight: int = 1) -> None:
        """Add ``weight`` to edge (a, b), creating it when absent."""
        if a == b:
            raise GraphError(f"self loop on {self._nodes[a].path}")
        key = _edge_key(a, b)
        total = self._edges.get(key, 0) + weight
        self._edges[key] = total
        self._adjacency[a][b] = total
        self._adjacency[b][a] = total

    def add_edge(self, path_a: str, path_b: str, weight: int = 1) -> None:
        """Path based ``add_weight``; creates missing nodes."""
        self.add_weight(self.ensure_node(path_a), self.ensure_node(path_b), weight)

    def merge(self, other: CochangeGraph) -> CochangeGraph:
        """Union two graphs, summing weights of shared edges.

        The smaller graph is folded into the larger one and the larger one is
        returned, so both inputs must be treated as consumed. The empty graph
        is the identity.
        """
        if self.is_distance or other.is_distance:
            raise GraphError("cannot merge distance graphs")
        if other.node_count == 0:
            return self
        if self.node_count == 0:
            return other

        big, small = (self, other) if self.node_count >= other.node_count else (other, self)

        rewrites: list[int] = []
        for node in small._nodes:
            idx = big.ensure_node(node.path)
            target = big._nodes[idx]
            target.kind = _combine_kinds(target.kind, node.kind)
            rewrites.append(idx)

        for (a, b), weight in small._edges.items():
            big.add_weight(rewrites[a], rewrites[b], weight)

        return big

    def without(self, paths: Iterable[str]) -> CochangeGraph:
        """Return a copy with ``paths`` and their incident edges removed.

        Handles are compacted, so they are not stable across this call.
        """
        drop = set(paths)
        return self._induced(node.path for node in self._nodes if node.path not in drop)

    def subgraph(self, paths: Iterable[str]) -> CochangeGraph:
        """Induced subgraph on the given paths (unknown paths are ignored)."""
        keep = set(paths)
        return self._induced(node.path for node in self._nodes if node.path in keep)

    def _induced(self, paths: Iterable[str]) -> CochangeGraph:
        result = CochangeGraph()
        result.is_distance = self.is_distance
        for path in paths:
            node = self._nodes[self._index[path]]
            result.ensure_node(node.path, node.kind)
        for (a, b), weight in self._edges.items():
            path_a, path_b = self._nodes[a].path, self._nodes[b].path
            if path_a in result and path_b in result:
                result.add_weight(result._index[path_a], result._index[path_b], weight)
        return result

    def to_distance(self) -> CochangeGraph:
        """Return a copy whose weights are ``max_weight - count``."""
        if self.is_distance:
            raise GraphError("distance transform already applied")
        result = self._induced(node.path for node in self._nodes)
        max_weight = self.max_weight()
        for key, count in self._edges.items():
            a, b = key
            distance = max_weight - count
            result._edges[key] = distance
            result._adjacency[a][b] = distance
            result._adjacency[b][a] = distance
        result.is_distance = True
        return result

    # ── Queries ──────────────────────────────────────────────────────

    def index_of(self, path: str) -> int:
        try:
            return self._index[path]
        except KeyError:
            raise NodeNotFoundError(path) from None

    def node(self, idx: int) -> FileNode:
        return self._nodes[idx]

    def nodes(self) -> Iterator[FileNode]:
        return iter(self._nodes)

    def paths(self) -> list[str]:
        return [node.path for node in self._nodes]

    def path_ranks(self) -> list[int]:
        """Position of each handle in sorted path order."""
        ranks = [0] * len(self._nodes)
        order = sorted(range(len(self._nodes)), key=lambda i: self._nodes[i].path)
        for position, idx in enumerate(order):
            ranks[idx] = position
        return ranks

    def edges(self) -> Iterator[tuple[str, str, int]]:
        """Yield ``(path_a, path_b, weight)`` for every edge."""
        for (a, b), weight in self._edges.items():
            yield self._nodes[a].path, self._nodes[b].path, weight

    def edge_items(self) -> Iterator[tuple[EdgeKey, int]]:
        return iter(self._edges.items())

    def has_edge(self, path_a: str, path_b: str) -> bool:
        a, b = self._index.get(path_a), self._index.get(path_b)
        if a is None or b is None:
            return False
        return _edge_key(a, b) in self._edges

    def weight(self, path_a: str, path_b: str) -> Optional[int]:
        """Weight of the edge between two paths, None when absent."""
        a, b = self._index.get(path_a), self._index.get(path_b)
        if a is None or b is None:
            return None
        return self._edges.get(_edge_key(a, b))

    def neighbors(self, idx: int) -> dict[int, int]:
        """Neighbour handle -> weight for one node. Do not mutate."""
        return self._adjacency[idx]

    def degree(self, path: str) -> int:
        return len(self._adjacency[self.index_of(path)])

    def max_weight(self) -> int:
        return max(self._edges.values(), default=0)

    def adjacency_lists(self) -> list[list[tuple[int, int]]]:
        """Plain ``[(neighbour, weight), ...]`` per handle, safe to pickle."""
        return [list(adj.items()) for adj in self._adjacency]

    def neighbourhood(self, path: str, depth: int = 1) -> set[str]:
        """Paths within ``depth`` hops of ``path``, including ``path`` itself."""
        start = self.index_of(path)
        seen = {start}
        frontier = deque([(start, 0)])
        while frontier:
            idx, hops = frontier.popleft()
            if hops >= depth:
                continue
            for nbr in self._adjacency[idx]:
                if nbr not in seen:
                    seen.add(nbr)
                    frontier.append((nbr, hops + 1))
        return {self._nodes[i].path for i in seen}

    def edge_map(self) -> dict[frozenset[str], int]:
        """Enumeration-order independent view, handy for comparisons."""
        return {frozenset((a, b)): w for a, b, w in self.edges()}

    def __repr__(self) -> str:
        kind = "distance" if self.is_distance else "count"
        return f"CochangeGraph(nodes={self.node_count}, edges={self.edge_count}, weights={kind})"


@dataclass
class BuildStats:
    """Counters collected while building the graph."""

    processed: int = 0
    oversized: int = 0
    empty: int = 0
    dropped_records: int = 0

    def merge(self, other: BuildStats) -> BuildStats:
        return BuildStats(
            processed=self.processed + other.processed,
            oversized=self.oversized + other.oversized,
            empty=self.empty + other.empty,
            dropped_records=self.dropped_records + other.dropped_records,
        )


@dataclass
class BuildResult:
    """Global co-change graph plus every path deleted in the window."""

    graph: CochangeGraph
    deleted: frozenset[str] = field(default_factory=frozenset)
    stats: BuildStats = field(default_factory=BuildStats)


@dataclass
class AnalysisResult:
    """Everything one pipeline run produces."""

    cochange: CochangeGraph  # raw co-occurrence counts
    distance: CochangeGraph  # max_weight - count
    centrality: dict[str, float]
    deleted: frozenset[str] = field(default_factory=frozenset)
    stats: BuildStats = field(default_factory=BuildStats)
    change_set_count: int = 0

    def ranked(self, top: Optional[int] = None) -> list[tuple[str, float]]:
        """(path, score) sorted by score descending, ties by path."""
        items = sorted(self.centrality.items(), key=lambda kv: (-kv[1], kv[0]))
        return items if top is None else items[:top]
