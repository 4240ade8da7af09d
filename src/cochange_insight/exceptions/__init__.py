"""Exception hierarchy for Cochange Insight."""

from .analysis import (
    AnalysisError,
    GraphError,
    InvalidRecordError,
    InvalidWeightError,
    NodeNotFoundError,
)
from .base import CochangeInsightError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .temporal import GitLogError, GitUnavailableError, TemporalError

__all__ = [
    "CochangeInsightError",
    "AnalysisError",
    "InvalidRecordError",
    "InvalidWeightError",
    "NodeNotFoundError",
    "GraphError",
    "TemporalError",
    "GitUnavailableError",
    "GitLogError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
