"""JSON formatter for Cochange Insight."""

import json
from typing import Optional

from ..graph.models import AnalysisResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render summary and ranked files as JSON."""

    def render(self, result: AnalysisResult, top: Optional[int] = None) -> None:
        print(self.format(result, top))

    def format(self, result: AnalysisResult, top: Optional[int] = None) -> str:
        graph = result.cochange
        data = {
            "summary": {
                "change_sets": result.change_set_count,
                "processed": result.stats.processed,
                "oversized": result.stats.oversized,
                "dropped_records": result.stats.dropped_records,
                "deleted_files": len(result.deleted),
                "nodes": graph.node_count,
                "edges": graph.edge_count,
                "max_cochange": graph.max_weight(),
            },
            "files": [
                {
                    "path": path,
                    "centrality": round(score, 6),
                    "degree": graph.degree(path),
                }
                for path, score in result.ranked(top)
            ],
        }
        return json.dumps(data, indent=2)
