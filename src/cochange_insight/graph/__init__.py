"""Co-change graph construction and centrality."""

from .builder import GraphBuilder, combine_results, graph_from_changeset
from .centrality import CentralityEngine, betweenness_centrality, single_source_dijkstra
from .models import AnalysisResult, BuildResult, BuildStats, CochangeGraph, FileNode

__all__ = [
    "AnalysisResult",
    "BuildResult",
    "BuildStats",
    "CentralityEngine",
    "CochangeGraph",
    "FileNode",
    "GraphBuilder",
    "betweenness_centrality",
    "combine_results",
    "graph_from_changeset",
    "single_source_dijkstra",
]
