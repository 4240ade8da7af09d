"""Configuration loading and management for Cochange Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.cochange-insight.toml)
    3. Project config (./cochange-insight.toml)
    4. Explicit config file
    5. Environment variables (COCHANGE_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(max_changeset_size=60, verbose=True)
    >>> config.max_changeset_size
    60
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import CochangeInsightError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
ExecutorKind = Literal["thread", "process"]

# Commits touching more files than this are treated as mass refactors
DEFAULT_MAX_CHANGESET_SIZE = 40

_ENV_PREFIX = "COCHANGE_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a co-change centrality run.

    Attributes:
        Graph construction:
            max_changeset_size: Change-sets with more records are discarded
            remove_deleted: Drop files that were deleted anywhere in the window

        Performance tuning:
            workers: Number of parallel workers (None = auto-detect)
            executor: "thread" or "process" pool for the parallel phases

        Git integration:
            git_max_commits: Maximum commits to read (0 = unlimited)
            since: Earliest commit date, YYYY-MM-DD
            include_patterns: Regexes; only matching paths are kept
            merges_only: One change-set per merged branch (first-parent diff)

        Output control:
            top: Number of files shown by the rich report
            verbosity: Logging verbosity level
    """

    # Graph construction
    max_changeset_size: int = DEFAULT_MAX_CHANGESET_SIZE
    remove_deleted: bool = True

    # Performance tuning
    workers: Optional[int] = None  # None = auto-detect from CPU cores
    executor: ExecutorKind = "thread"

    # Git integration
    git_max_commits: int = 5000
    since: Optional[str] = None
    include_patterns: list[str] = field(default_factory=list)
    merges_only: bool = False

    # Output control
    top: int = 20
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_changeset_size < 1:
            raise InvalidConfigError(
                "max_changeset_size", self.max_changeset_size, "must be at least 1"
            )

        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.executor not in ("thread", "process"):
            raise InvalidConfigError("executor", self.executor, "must be 'thread' or 'process'")

        if self.git_max_commits < 0:
            raise InvalidConfigError("git_max_commits", self.git_max_commits, "must be non-negative")
        if self.since is not None:
            try:
                datetime.strptime(self.since, "%Y-%m-%d")
            except ValueError:
                raise InvalidConfigError("since", self.since, "expected YYYY-MM-DD")
        for pattern in self.include_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidConfigError("include_patterns", pattern, f"bad regex: {e}")

        if self.top < 1:
            raise InvalidConfigError("top", self.top, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be quiet, normal or verbose"
            )


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        CochangeInsightError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".cochange-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise CochangeInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "cochange-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise CochangeInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise CochangeInsightError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise CochangeInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update(overrides)

    if "include_patterns" in merged:
        merged["include_patterns"] = list(merged["include_patterns"])

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise CochangeInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COCHANGE_* environment variables.

    Supported environment variables:
        COCHANGE_MAX_CHANGESET_SIZE: int
        COCHANGE_REMOVE_DELETED: bool (true/false/1/0)
        COCHANGE_WORKERS: int
        COCHANGE_EXECUTOR: thread/process
        COCHANGE_GIT_MAX_COMMITS: int
        COCHANGE_SINCE: YYYY-MM-DD
        COCHANGE_MERGES_ONLY: bool
        COCHANGE_TOP: int
        COCHANGE_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any COCHANGE_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{_ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise CochangeInsightError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that are not settable from the environment.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Lists (include_patterns) are too awkward for env vars
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
