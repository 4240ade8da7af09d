"""Public API for Cochange Insight.

Example:
    >>> from cochange_insight import analyze
    >>>
    >>> result = analyze("/path/to/repo", since="2024-01-01")
    >>> for path, score in result.ranked(top=10):
    ...     print(path, score)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from .config import AnalysisConfig, load_config
from .exceptions import InvalidPathError
from .graph.builder import GraphBuilder
from .graph.centrality import CentralityEngine
from .graph.models import AnalysisResult
from .logging_config import get_logger
from .temporal.git_extractor import GitExtractor
from .temporal.models import ChangeSet

logger = get_logger(__name__)


def analyze(
    repo_path: str = ".",
    config_file: Optional[Path] = None,
    change_sets: Optional[Iterable[ChangeSet]] = None,
    config: Optional[AnalysisConfig] = None,
    **overrides,
) -> AnalysisResult:
    """Build the co-change graph of a repository and rank files by centrality.

    Pipeline:
    1. Load configuration (auto-discover TOML + apply overrides)
    2. Read change-sets from git (skipped when ``change_sets`` is given)
    3. Build the co-change graph and drop deleted files
    4. Turn co-change counts into distances
    5. Compute betweenness centrality on the distance graph

    Args:
        repo_path: Path to the git repository (default: current directory)
        config_file: Optional explicit config file path
        change_sets: Pre-extracted change-sets (any iterable); bypasses git
        config: Ready-made configuration; ``config_file`` and overrides are
            ignored when given
        **overrides: Configuration overrides (e.g. since="2024-01-01")

    Returns:
        AnalysisResult with the count graph, the distance graph and scores

    Raises:
        CochangeInsightError: On invalid configuration or unreadable history
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)

    if change_sets is not None:
        change_sets = list(change_sets)
    else:
        root = validate_repo_path(Path(repo_path))
        extractor = GitExtractor(
            str(root),
            max_commits=config.git_max_commits,
            since=config.since,
            include_patterns=config.include_patterns,
            merges_only=config.merges_only,
        )
        change_sets = extractor.extract()

    builder = GraphBuilder(
        max_changeset_size=config.max_changeset_size,
        remove_deleted=config.remove_deleted,
        workers=config.workers,
        executor=config.executor,
    )
    built = builder.build(change_sets)

    distance = built.graph.to_distance()
    engine = CentralityEngine(workers=config.workers, executor=config.executor)
    centrality = engine.centrality(distance)

    logger.info("Computed centrality for %d files", len(centrality))

    return AnalysisResult(
        cochange=built.graph,
        distance=distance,
        centrality=centrality,
        deleted=built.deleted,
        stats=built.stats,
        change_set_count=len(change_sets),
    )


def validate_repo_path(path: Path) -> Path:
    """Resolve ``path`` and check it is a readable directory.

    Raises:
        InvalidPathError: If the path is missing, not a directory or unreadable
    """
    try:
        resolved = path.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")
    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")
    if not os.access(resolved, os.R_OK):
        raise InvalidPathError(resolved, "Directory is not readable")
    return resolved
