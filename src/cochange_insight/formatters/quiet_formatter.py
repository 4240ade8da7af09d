"""Quiet formatter: file paths only."""

from typing import Optional

from ..graph.models import AnalysisResult
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render just file paths, most central first, one per line."""

    def render(self, result: AnalysisResult, top: Optional[int] = None) -> None:
        print(self.format(result, top))

    def format(self, result: AnalysisResult, top: Optional[int] = None) -> str:
        return "\n".join(path for path, _ in result.ranked(top))
