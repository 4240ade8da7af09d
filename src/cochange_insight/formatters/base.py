"""Base formatter interface for Cochange Insight output rendering."""

from abc import ABC, abstractmethod
from typing import Optional

from ..graph.models import AnalysisResult


class BaseFormatter(ABC):
    """Abstract base class for centrality report formatters."""

    @abstractmethod
    def render(self, result: AnalysisResult, top: Optional[int] = None) -> None:
        """Render the report to stderr/stdout as appropriate."""

    @abstractmethod
    def format(self, result: AnalysisResult, top: Optional[int] = None) -> str:
        """Return formatted string representation of the report."""
