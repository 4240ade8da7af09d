"""
Cochange Insight - change-coupling centrality for git repositories

Files that change in the same commits are coupled. This package builds the
co-change graph of a repository, turns co-change counts into distances and
ranks every file by weighted betweenness centrality: the files that sit on
the most shortest coupling paths are the architectural bottlenecks.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import AnalysisConfig, load_config
from .graph import CentralityEngine, CochangeGraph, GraphBuilder
from .temporal import ChangeKind, FileChange, GitExtractor

__all__ = [
    "analyze",  # Main entry point
    "AnalysisConfig",
    "load_config",
    "CentralityEngine",
    "CochangeGraph",
    "GraphBuilder",
    "ChangeKind",
    "FileChange",
    "GitExtractor",
]
