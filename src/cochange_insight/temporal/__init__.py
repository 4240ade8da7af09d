"""Temporal input: change events read from git history."""

from .git_extractor import GitExtractor
from .models import ChangeKind, ChangeSet, FileChange

__all__ = [
    "ChangeKind",
    "ChangeSet",
    "FileChange",
    "GitExtractor",
]
