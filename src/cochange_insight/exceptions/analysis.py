"""Analysis-related exceptions: change records, graph weights, graph queries."""

from typing import Any

from .base import CochangeInsightError


class AnalysisError(CochangeInsightError):
    """Base class for graph construction and centrality errors."""

    pass


class InvalidRecordError(AnalysisError):
    """Raised when a change record has an empty or malformed path."""

    def __init__(self, record: Any, reason: str):
        super().__init__(
            "Invalid change record",
            details={"record": repr(record), "reason": reason},
        )
        self.record = record
        self.reason = reason


class InvalidWeightError(AnalysisError):
    """Raised when an edge carries a negative distance."""

    def __init__(self, path_a: str, path_b: str, weight: float):
        super().__init__(
            f"Negative edge weight between {path_a} and {path_b}",
            details={"path_a": path_a, "path_b": path_b, "weight": str(weight)},
        )
        self.path_a = path_a
        self.path_b = path_b
        self.weight = weight


class NodeNotFoundError(AnalysisError):
    """Raised when a graph query names a path that is not in the graph."""

    def __init__(self, path: str):
        super().__init__(f"File not in graph: {path}", details={"path": path})
        self.path = path


class GraphError(AnalysisError):
    """Raised when a graph operation is used out of order."""

    def __init__(self, reason: str):
        super().__init__(f"Graph error: {reason}", details={"reason": reason})
        self.reason = reason
