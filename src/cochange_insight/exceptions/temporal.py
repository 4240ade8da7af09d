"""Temporal exceptions: git discovery and history extraction."""

from pathlib import Path
from typing import Union

from .base import CochangeInsightError


class TemporalError(CochangeInsightError):
    """Base class for git history errors."""

    pass


class GitUnavailableError(TemporalError):
    """Raised when git is missing or the path is not a repository."""

    def __init__(self, repo_path: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot read git history: {repo_path}",
            details={"repo_path": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason


class GitLogError(TemporalError):
    """Raised when `git log` exits with an error."""

    def __init__(self, repo_path: Union[str, Path], reason: str):
        super().__init__(
            f"git log failed in {repo_path}",
            details={"repo_path": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason
