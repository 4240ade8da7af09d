"""Graph export commands: DOT for the whole graph or one file's neighbourhood."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import CochangeInsightError
from ..formatters import format_dot, neighbourhood_dot
from ..graph.models import AnalysisResult, CochangeGraph
from ..logging_config import get_logger
from . import app
from ._common import (
    CONFIG_OPTION,
    EXECUTOR_OPTION,
    INCLUDE_OPTION,
    KEEP_DELETED_OPTION,
    MAX_CHANGESET_OPTION,
    MAX_COMMITS_OPTION,
    MERGES_ONLY_OPTION,
    QUIET_OPTION,
    REPO_ARGUMENT,
    SINCE_OPTION,
    VERBOSE_OPTION,
    WEIGHTS_OPTION,
    WORKERS_OPTION,
    console,
    err_console,
    run_analysis,
)

logger = get_logger(__name__)

_WEIGHTS = ("distance", "count")


def _check_weights(weights: str) -> None:
    if weights not in _WEIGHTS:
        raise typer.BadParameter(
            f"expected distance or count, got {weights!r}", param_hint="--weights"
        )


def _pick_graph(result: AnalysisResult, weights: str) -> CochangeGraph:
    return result.distance if weights == "distance" else result.cochange


@app.command()
def neighbours(
    path: str = typer.Argument(..., help="File whose neighbourhood to export"),
    repo: Path = REPO_ARGUMENT,
    depth: int = typer.Option(1, "--depth", "-d", help="Hops from the file", min=1),
    weights: str = WEIGHTS_OPTION,
    since: Optional[str] = SINCE_OPTION,
    include: Optional[list[str]] = INCLUDE_OPTION,
    max_commits: Optional[int] = MAX_COMMITS_OPTION,
    max_changeset_size: Optional[int] = MAX_CHANGESET_OPTION,
    keep_deleted: bool = KEEP_DELETED_OPTION,
    merges_only: bool = MERGES_ONLY_OPTION,
    workers: Optional[int] = WORKERS_OPTION,
    executor: Optional[str] = EXECUTOR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
):
    """
    Print a file's co-change neighbourhood as Graphviz DOT.

    [bold cyan]Examples:[/bold cyan]

      cochange-insight neighbours src/app.py . | dot -Tsvg > app.svg

      cochange-insight neighbours src/app.py . --depth 2 --weights count
    """
    _check_weights(weights)
    try:
        _, result = run_analysis(
            repo,
            config=config,
            since=since,
            include=include,
            max_commits=max_commits,
            max_changeset_size=max_changeset_size,
            keep_deleted=keep_deleted,
            merges_only=merges_only,
            workers=workers,
            executor=executor,
            verbose=verbose,
            quiet=quiet,
        )
        typer.echo(neighbourhood_dot(_pick_graph(result, weights), path, depth), nl=False)

    except typer.Exit:
        raise
    except CochangeInsightError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def graph(
    repo: Path = REPO_ARGUMENT,
    weights: str = WEIGHTS_OPTION,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write DOT to this file instead of stdout", dir_okay=False
    ),
    since: Optional[str] = SINCE_OPTION,
    include: Optional[list[str]] = INCLUDE_OPTION,
    max_commits: Optional[int] = MAX_COMMITS_OPTION,
    max_changeset_size: Optional[int] = MAX_CHANGESET_OPTION,
    keep_deleted: bool = KEEP_DELETED_OPTION,
    merges_only: bool = MERGES_ONLY_OPTION,
    workers: Optional[int] = WORKERS_OPTION,
    executor: Optional[str] = EXECUTOR_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
):
    """
    Export the whole co-change graph as Graphviz DOT.

    [bold cyan]Examples:[/bold cyan]

      cochange-insight graph . --weights count -o cochange.dot
    """
    _check_weights(weights)
    try:
        _, result = run_analysis(
            repo,
            config=config,
            since=since,
            include=include,
            max_commits=max_commits,
            max_changeset_size=max_changeset_size,
            keep_deleted=keep_deleted,
            merges_only=merges_only,
            workers=workers,
            executor=executor,
            verbose=verbose,
            quiet=quiet,
        )
        dot = format_dot(_pick_graph(result, weights))
        if output is None:
            typer.echo(dot, nl=False)
        else:
            output.write_text(dot, encoding="utf-8")
            if not quiet:
                console.print(
                    f"Wrote [green]{result.cochange.node_count}[/green] files to {output}"
                )

    except typer.Exit:
        raise
    except CochangeInsightError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
