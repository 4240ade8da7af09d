"""Build the global co-change graph from a stream of change-sets.

Every admissible change-set becomes a small complete graph over the files it
touched (weight 1 per pair). Local graphs are merged with an associative,
commutative union, so the stream can be cut into shards and reduced in any
order or tree shape. Deleted files are collected on the side and removed
once, after the final merge.
"""

from __future__ import annotations

from functools import partial, reduce
from typing import Any, Iterable, Optional, Sequence

from ..config import DEFAULT_MAX_CHANGESET_SIZE
from ..exceptions import InvalidRecordError
from ..logging_config import get_logger
from ..parallel import chunked, make_executor, resolve_workers, tree_reduce
from ..temporal.models import ChangeKind, ChangeSet, FileChange
from .models import BuildResult, BuildStats, CochangeGraph

logger = get_logger(__name__)

# Below this many change-sets the pool overhead is not worth it
_MIN_PARALLEL_CHANGESETS = 64


def combinations_k_2(n: int) -> Iterable[tuple[int, int]]:
    """Unordered index pairs ``(x, y)`` with ``x < y`` in canonical order."""
    for x in range(n):
        for y in range(x + 1, n):
            yield x, y


def validate_record(record: Any) -> FileChange:
    """Coerce a ``FileChange`` or ``(path, kind)`` pair, rejecting bad paths."""
    if isinstance(record, FileChange):
        path, kind = record.path, record.kind
    elif isinstance(record, tuple) and len(record) == 2:
        path, kind = record
    else:
        raise InvalidRecordError(record, "expected FileChange or (path, kind)")

    if not isinstance(path, str) or not path.strip():
        raise InvalidRecordError(record, "empty path")
    try:
        kind = ChangeKind(kind)
    except ValueError:
        raise InvalidRecordError(record, f"unknown change kind {kind!r}") from None
    return FileChange(path=path, kind=kind)


def empty_result() -> BuildResult:
    return BuildResult(graph=CochangeGraph())


def combine_results(a: BuildResult, b: BuildResult) -> BuildResult:
    """Merge two partial results: graph union, deleted-set union, summed stats."""
    return BuildResult(
        graph=a.graph.merge(b.graph),
        deleted=a.deleted | b.deleted,
        stats=a.stats.merge(b.stats),
    )


def graph_from_changeset(
    change_set: Sequence[Any], max_changeset_size: int = DEFAULT_MAX_CHANGESET_SIZE
) -> BuildResult:
    """Turn one change-set into a local graph and its deleted paths."""
    stats = BuildStats()
    graph = CochangeGraph()

    if len(change_set) > max_changeset_size:
        logger.debug(
            "Skipping change-set with %d records (limit %d)", len(change_set), max_changeset_size
        )
        stats.oversized = 1
        return BuildResult(graph=graph, stats=stats)

    seen: set[str] = set()
    deleted: set[str] = set()
    nodes: list[int] = []
    for record in change_set:
        try:
            change = validate_record(record)
        except InvalidRecordError as e:
            logger.warning("Dropping record: %s", e)
            stats.dropped_records += 1
            continue

        # first occurrence of a path wins
        if change.path in seen:
            continue
        seen.add(change.path)

        if change.kind is ChangeKind.DELETED:
            deleted.add(change.path)
        else:
            nodes.append(graph.ensure_node(change.path, change.kind))

    for x, y in combinations_k_2(len(nodes)):
        graph.add_weight(nodes[x], nodes[y], 1)

    if nodes or deleted:
        stats.processed = 1
    else:
        stats.empty = 1
    return BuildResult(graph=graph, deleted=frozenset(deleted), stats=stats)


def fold_shard(shard: Sequence[Sequence[Any]], max_changeset_size: int) -> BuildResult:
    """Sequentially reduce one shard of change-sets into a partial result."""
    partials = (graph_from_changeset(cs, max_changeset_size) for cs in shard)
    return reduce(combine_results, partials, empty_result())


class GraphBuilder:
    """Reduce change-sets into one co-change graph.

    Attributes:
        max_changeset_size: Change-sets with more records are skipped
        remove_deleted: Drop every path seen as DELETED from the final graph
        workers: Parallel workers; 1 forces a sequential fold
        executor: "thread" or "process"
    """

    def __init__(
        self,
        max_changeset_size: int = DEFAULT_MAX_CHANGESET_SIZE,
        remove_deleted: bool = True,
        workers: Optional[int] = None,
        executor: str = "thread",
    ) -> None:
        self.max_changeset_size = max_changeset_size
        self.remove_deleted = remove_deleted
        self.workers = resolve_workers(workers)
        self.executor = executor

    def from_changeset(self, change_set: ChangeSet) -> BuildResult:
        return graph_from_changeset(change_set, self.max_changeset_size)

    def build(self, change_sets: Sequence[ChangeSet]) -> BuildResult:
        """Build the final graph, then apply the deleted-file filter once."""
        change_sets = list(change_sets)
        merged = self._reduce(change_sets)

        graph = merged.graph
        if self.remove_deleted and merged.deleted:
            graph = graph.without(merged.deleted)

        logger.info(
            "Built co-change graph: %d nodes, %d edges from %d change-sets "
            "(%d oversized, %d records dropped, %d deleted files)",
            graph.node_count,
            graph.edge_count,
            merged.stats.processed,
            merged.stats.oversized,
            merged.stats.dropped_records,
            len(merged.deleted),
        )
        return BuildResult(graph=graph, deleted=merged.deleted, stats=merged.stats)

    def _reduce(self, change_sets: list[ChangeSet]) -> BuildResult:
        if self.workers == 1 or len(change_sets) < _MIN_PARALLEL_CHANGESETS:
            return fold_shard(change_sets, self.max_changeset_size)

        shards = chunked(change_sets, self.workers)
        fold = partial(fold_shard, max_changeset_size=self.max_changeset_size)
        with make_executor(self.executor, self.workers) as pool:
            partials = list(pool.map(fold, shards))
            return tree_reduce(combine_results, partials, empty_result, executor=pool)
