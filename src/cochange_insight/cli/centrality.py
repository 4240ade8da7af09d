"""Centrality command: rank files by co-change betweenness."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import CochangeInsightError
from ..formatters import get_formatter
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
    WORKERS_OPTION,
    console,
    run_analysis,
)

logger = get_logger(__name__)


@app.command()
def centrality(
    repo: Path = REPO_ARGUMENT,
    since: Optional[str] = SINCE_OPTION,
    include: Optional[list[str]] = INCLUDE_OPTION,
    max_commits: Optional[int] = MAX_COMMITS_OPTION,
    max_changeset_size: Optional[int] = MAX_CHANGESET_OPTION,
    keep_deleted: bool = KEEP_DELETED_OPTION,
    merges_only: bool = MERGES_ONLY_OPTION,
    workers: Optional[int] = WORKERS_OPTION,
    executor: Optional[str] = EXECUTOR_OPTION,
    top: Optional[int] = typer.Option(
        None, "--top", "-t", help="Number of files to show (default 20)", min=1
    ),
    all_files: bool = typer.Option(False, "--all", help="Show every file"),
    fmt: str = typer.Option(
        "rich", "--format", "-f", help="Output format: rich, csv, json or quiet"
    ),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
):
    """
    Rank files by betweenness centrality in the co-change graph.

    Files that often change together are close; files that sit on many
    shortest coupling paths are the bottlenecks.

    [bold cyan]Examples:[/bold cyan]

      cochange-insight centrality /path/to/repo --since 2024-01-01

      cochange-insight centrality . --format csv --all > centrality.csv

      cochange-insight centrality . -i '\\.py$' --merges-only
    """
    try:
        formatter = get_formatter(fmt)
        settings, result = run_analysis(
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
            top=top,
        )
        limit = None if all_files else settings.top
        formatter.render(result, limit)

    except typer.Exit:
        raise
    except (CochangeInsightError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
