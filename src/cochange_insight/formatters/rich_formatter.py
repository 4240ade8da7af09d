"""Rich terminal formatter for Cochange Insight."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..graph.models import AnalysisResult
from .base import BaseFormatter

console = Console()


def _centrality_label(score: float, peak: float) -> str:
    if peak <= 0:
        return "[dim]none[/dim]"
    ratio = score / peak
    if ratio >= 0.75:
        return "[red bold]bottleneck[/red bold]"
    elif ratio >= 0.4:
        return "[yellow]elevated[/yellow]"
    elif score > 0:
        return "[green]low[/green]"
    else:
        return "[dim]none[/dim]"


class RichFormatter(BaseFormatter):
    """Summary panel followed by a table of the most central files."""

    def render(self, result: AnalysisResult, top: Optional[int] = None) -> None:
        self._print_summary(result)
        self._print_table(result, top)

    def format(self, result: AnalysisResult, top: Optional[int] = None) -> str:
        # Rich output goes directly to console; return empty string
        self.render(result, top)
        return ""

    def _print_summary(self, result: AnalysisResult) -> None:
        graph = result.cochange
        stats = result.stats
        lines = [
            f"Change-sets: [bold]{result.change_set_count}[/bold] "
            f"([green]{stats.processed}[/green] used, "
            f"[yellow]{stats.oversized}[/yellow] oversized)",
            f"Files: [bold]{graph.node_count}[/bold]   "
            f"Co-change pairs: [bold]{graph.edge_count}[/bold]   "
            f"Max co-change: [bold]{graph.max_weight()}[/bold]",
        ]
        if result.deleted:
            lines.append(f"Deleted files excluded: [dim]{len(result.deleted)}[/dim]")
        if stats.dropped_records:
            lines.append(f"[red]Invalid records dropped: {stats.dropped_records}[/red]")
        console.print(
            Panel("\n".join(lines), title="[bold cyan]Co-change Graph[/bold cyan]", expand=False)
        )

    def _print_table(self, result: AnalysisResult, top: Optional[int]) -> None:
        ranked = result.ranked(top)
        if not ranked:
            console.print("[yellow]Not enough co-changing files to rank.[/yellow]")
            return

        peak = ranked[0][1]
        table = Table(title="Most central files", show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("File", style="cyan", no_wrap=False)
        table.add_column("Centrality", justify="right")
        table.add_column("Partners", justify="right")
        table.add_column("Level")

        for rank, (path, score) in enumerate(ranked, start=1):
            table.add_row(
                str(rank),
                path,
                f"{score:.6f}",
                str(result.cochange.degree(path)),
                _centrality_label(score, peak),
            )
        console.print(table)
