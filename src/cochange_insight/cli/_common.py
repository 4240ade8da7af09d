"""Shared CLI options and helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..api import analyze
from ..config import AnalysisConfig, load_config
from ..graph.models import AnalysisResult
from ..logging_config import setup_logging

console = Console()
err_console = Console(stderr=True)

REPO_ARGUMENT = typer.Argument(
    Path("."),
    help="Path to the git repository",
    exists=True,
    file_okay=False,
    dir_okay=True,
)
SINCE_OPTION = typer.Option(
    None, "--since", "-s", help="Only commits after this date (YYYY-MM-DD)"
)
INCLUDE_OPTION = typer.Option(
    None, "--include", "-i", help="Regex of paths to keep (repeatable)"
)
MAX_COMMITS_OPTION = typer.Option(
    None, "--max-commits", help="Maximum commits to read (0 = unlimited)", min=0
)
MAX_CHANGESET_OPTION = typer.Option(
    None,
    "--max-changeset-size",
    help="Skip commits touching more files than this (default 40)",
    min=1,
)
KEEP_DELETED_OPTION = typer.Option(
    False, "--keep-deleted", help="Keep files that were deleted in the window"
)
MERGES_ONLY_OPTION = typer.Option(
    False, "--merges-only", help="One change-set per merged branch"
)
WORKERS_OPTION = typer.Option(None, "--workers", "-w", help="Parallel workers", min=1, max=64)
EXECUTOR_OPTION = typer.Option(None, "--executor", help="Worker pool: thread or process")
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Debug logging")
QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Suppress logging")
WEIGHTS_OPTION = typer.Option(
    "distance", "--weights", help="Edge weights to export: distance or count"
)


def run_analysis(
    repo: Path,
    config: Optional[Path] = None,
    since: Optional[str] = None,
    include: Optional[list[str]] = None,
    max_commits: Optional[int] = None,
    max_changeset_size: Optional[int] = None,
    keep_deleted: bool = False,
    merges_only: bool = False,
    workers: Optional[int] = None,
    executor: Optional[str] = None,
    verbose: bool = False,
    quiet: bool = False,
    top: Optional[int] = None,
) -> tuple[AnalysisConfig, AnalysisResult]:
    """Build the configuration from CLI options and run the pipeline.

    Logging is configured from the merged ``verbosity``, so TOML files and
    ``COCHANGE_VERBOSITY`` count as much as ``--verbose``/``--quiet``.
    """
    overrides = {
        "since": since,
        "include_patterns": include or None,
        "git_max_commits": max_commits,
        "max_changeset_size": max_changeset_size,
        "remove_deleted": False if keep_deleted else None,
        "merges_only": True if merges_only else None,
        "workers": workers,
        "executor": executor,
        "top": top,
        "verbose": verbose,
        "quiet": quiet,
    }
    settings = load_config(config_file=config, **overrides)
    setup_logging(settings.verbosity)
    return settings, analyze(str(repo), config=settings)
