"""CSV formatter: one ``"path",score`` row per file."""

import csv
import io
import sys
from decimal import Decimal
from typing import Optional

from ..graph.models import AnalysisResult
from .base import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Render centrality scores as headerless CSV, totals on stderr."""

    def render(self, result: AnalysisResult, top: Optional[int] = None) -> None:
        print(self.format(result, top), end="")
        print(
            f"Total nodes: {result.distance.node_count} edges: {result.distance.edge_count}",
            file=sys.stderr,
        )

    def format(self, result: AnalysisResult, top: Optional[int] = None) -> str:
        output = io.StringIO()
        # paths are quoted, the fixed-point score is written as a bare number
        writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        for path, score in result.ranked(top):
            writer.writerow([path, Decimal(f"{score:.6f}")])
        return output.getvalue()
