"""Tests for cochange_insight.graph.models.CochangeGraph."""

import pytest

from cochange_insight.exceptions import GraphError, NodeNotFoundError
from cochange_insight.graph.models import CochangeGraph
from cochange_insight.temporal.models import ChangeKind


def make_graph(edges, isolated=()):
    graph = CochangeGraph()
    for path in isolated:
        graph.ensure_node(path)
    for a, b, w in edges:
        graph.add_edge(a, b, w)
    return graph


class TestConstruction:
    """Nodes are unique per path; weights accumulate on one edge."""

    def test_ensure_node_reuses_handle(self):
        graph = CochangeGraph()
        first = graph.ensure_node("a.py", ChangeKind.ADDED)
        second = graph.ensure_node("a.py")
        assert first == second
        assert graph.node_count == 1
        assert graph.node(first).kind is ChangeKind.ADDED

    def test_ensure_node_refreshes_kind(self):
        graph = CochangeGraph()
        idx = graph.ensure_node("a.py", ChangeKind.ADDED)
        graph.ensure_node("a.py", ChangeKind.MODIFIED)
        assert graph.node(idx).kind is ChangeKind.MODIFIED

    def test_handles_are_dense(self):
        graph = CochangeGraph()
        assert [graph.ensure_node(p) for p in ["x", "y", "z"]] == [0, 1, 2]

    def test_weights_accumulate(self):
        graph = make_graph([("a", "b", 1), ("b", "a", 1), ("a", "b", 3)])
        assert graph.edge_count == 1
        assert graph.weight("a", "b") == 5
        assert graph.weight("b", "a") == 5

    def test_self_loop_rejected(self):
        graph = CochangeGraph()
        idx = graph.ensure_node("a")
        with pytest.raises(GraphError):
            graph.add_weight(idx, idx)

    def test_contains_and_len(self):
        graph = make_graph([("a", "b", 1)])
        assert "a" in graph
        assert "z" not in graph
        assert len(graph) == 2


class TestQueries:
    """Read-only accessors."""

    def test_missing_edge_weight_is_none(self):
        graph = make_graph([("a", "b", 1)], isolated=("c",))
        assert graph.weight("a", "c") is None
        assert graph.weight("a", "zzz") is None
        assert not graph.has_edge("a", "c")
        assert graph.has_edge("b", "a")

    def test_degree(self):
        graph = make_graph([("a", "b", 1), ("a", "c", 2)])
        assert graph.degree("a") == 2
        assert graph.degree("b") == 1

    def test_index_of_unknown_path(self):
        graph = make_graph([("a", "b", 1)])
        with pytest.raises(NodeNotFoundError) as exc_info:
            graph.index_of("nope.py")
        assert exc_info.value.path == "nope.py"

    def test_max_weight(self):
        assert CochangeGraph().max_weight() == 0
        assert make_graph([("a", "b", 2), ("b", "c", 7)]).max_weight() == 7

    def test_adjacency_lists_are_symmetric(self):
        graph = make_graph([("a", "b", 4)])
        adjacency = graph.adjacency_lists()
        a, b = graph.index_of("a"), graph.index_of("b")
        assert adjacency[a] == [(b, 4)]
        assert adjacency[b] == [(a, 4)]

    def test_edges_yield_paths(self):
        graph = make_graph([("a", "b", 1), ("b", "c", 2)])
        assert sorted(graph.edges()) == [("a", "b", 1), ("b", "c", 2)]


class TestNeighbourhood:
    """Hop-bounded neighbourhoods and induced subgraphs."""

    def test_depth_one(self, path_graph):
        assert path_graph.neighbourhood("b", depth=1) == {"a", "b", "c"}

    def test_depth_two(self, path_graph):
        assert path_graph.neighbourhood("a", depth=2) == {"a", "b", "c"}

    def test_isolated_node(self):
        graph = make_graph([("a", "b", 1)], isolated=("z",))
        assert graph.neighbourhood("z", depth=3) == {"z"}

    def test_unknown_path(self, path_graph):
        with pytest.raises(NodeNotFoundError):
            path_graph.neighbourhood("missing")

    def test_subgraph_keeps_internal_edges_only(self, path_graph):
        sub = path_graph.subgraph({"a", "b", "d"})
        assert set(sub.paths()) == {"a", "b", "d"}
        assert sub.edge_map() == {frozenset(("a", "b")): 1}


class TestMerge:
    """Union of two graphs."""

    def test_empty_is_identity(self):
        graph = make_graph([("a", "b", 2)])
        assert graph.merge(CochangeGraph()) is graph
        other = make_graph([("a", "b", 2)])
        assert CochangeGraph().merge(other) is other

    def test_shared_edges_sum(self):
        left = make_graph([("a", "b", 1), ("b", "c", 1)])
        right = make_graph([("b", "c", 2), ("c", "d", 1)])
        merged = left.merge(right)
        assert merged.edge_map() == {
            frozenset(("a", "b")): 1,
            frozenset(("b", "c")): 3,
            frozenset(("c", "d")): 1,
        }
        assert set(merged.paths()) == {"a", "b", "c", "d"}

    def test_smaller_folds_into_larger(self):
        big = make_graph([("a", "b", 1), ("b", "c", 1)])
        small = make_graph([("x", "y", 1)])
        assert small.merge(big) is big
        assert big.node_count == 5

    def test_disjoint_handles_are_translated(self):
        left = make_graph([("a", "b", 1), ("c", "d", 1)])
        right = make_graph([("d", "a", 5)])
        merged = left.merge(right)
        assert merged.weight("a", "d") == 5
        assert merged.edge_count == 3

    def test_distance_graphs_cannot_merge(self):
        graph = make_graph([("a", "b", 1)]).to_distance()
        with pytest.raises(GraphError):
            graph.merge(make_graph([("a", "b", 1)]))


class TestDistanceTransform:
    """distance = max_weight - count, applied once."""

    def test_max_minus_count(self):
        graph = make_graph([("a", "b", 5), ("b", "c", 2), ("c", "d", 1)])
        distance = graph.to_distance()
        assert distance.is_distance
        assert distance.weight("a", "b") == 0
        assert distance.weight("b", "c") == 3
        assert distance.weight("c", "d") == 4

    def test_source_graph_untouched(self):
        graph = make_graph([("a", "b", 5), ("b", "c", 2)])
        graph.to_distance()
        assert graph.weight("b", "c") == 2
        assert not graph.is_distance

    def test_adjacency_follows_transform(self):
        graph = make_graph([("a", "b", 5), ("b", "c", 2)])
        distance = graph.to_distance()
        b = distance.index_of("b")
        c = distance.index_of("c")
        assert distance.neighbors(b)[c] == 3

    def test_second_transform_rejected(self):
        distance = make_graph([("a", "b", 1)]).to_distance()
        with pytest.raises(GraphError):
            distance.to_distance()

    def test_weights_non_negative(self):
        graph = make_graph([("a", "b", 9), ("b", "c", 1), ("a", "c", 4)])
        assert all(w >= 0 for _, _, w in graph.to_distance().edges())


class TestWithout:
    """Removing nodes drops incident edges and compacts handles."""

    def test_removes_incident_edges(self):
        graph = make_graph([("a", "b", 1), ("b", "c", 2), ("c", "d", 1)])
        trimmed = graph.without({"c"})
        assert set(trimmed.paths()) == {"a", "b", "d"}
        assert trimmed.edge_map() == {frozenset(("a", "b")): 1}

    def test_handles_compacted(self):
        graph = make_graph([("a", "b", 1), ("b", "c", 1)])
        trimmed = graph.without({"a"})
        assert sorted(trimmed.index_of(p) for p in trimmed.paths()) == [0, 1]

    def test_unknown_paths_ignored(self):
        graph = make_graph([("a", "b", 1)])
        assert graph.without({"zzz"}).edge_map() == graph.edge_map()


class TestMergedKinds:
    """A node's kind after merging does not depend on merge order."""

    def _single(self, path, kind):
        graph = CochangeGraph()
        graph.ensure_node(path, kind)
        return graph

    @pytest.mark.parametrize("left_first", [True, False])
    def test_disagreement_collapses_to_modified(self, left_first):
        added = self._single("a.py", ChangeKind.ADDED)
        modified = self._single("a.py", ChangeKind.MODIFIED)
        merged = added.merge(modified) if left_first else modified.merge(added)
        assert merged.node(merged.index_of("a.py")).kind is ChangeKind.MODIFIED

    def test_agreement_kept(self):
        left = self._single("a.py", ChangeKind.ADDED)
        merged = left.merge(self._single("a.py", ChangeKind.ADDED))
        assert merged.node(merged.index_of("a.py")).kind is ChangeKind.ADDED

    def test_bigger_graph_does_not_win(self):
        big = make_graph([("a.py", "b.py", 1)])
        big.ensure_node("a.py", ChangeKind.MODIFIED)
        small = self._single("a.py", ChangeKind.ADDED)
        merged = big.merge(small)
        assert merged.node(merged.index_of("a.py")).kind is ChangeKind.MODIFIED
        other = make_graph([("a.py", "b.py", 1)])
        other.ensure_node("a.py", ChangeKind.ADDED)
        merged = other.merge(self._single("a.py", ChangeKind.MODIFIED))
        assert merged.node(merged.index_of("a.py")).kind is ChangeKind.MODIFIED
