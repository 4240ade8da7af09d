"""Data models for change events read from version control."""

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    """How a file was touched by a commit.

    Renames are reported as MODIFIED on the new path, copies as ADDED.
    """

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileChange:
    path: str
    kind: ChangeKind = ChangeKind.MODIFIED


# One commit's worth of file changes, in the order git reported them
ChangeSet = list[FileChange]


# git --name-status letter -> ChangeKind
STATUS_KINDS: dict[str, ChangeKind] = {
    "A": ChangeKind.ADDED,
    "C": ChangeKind.ADDED,
    "M": ChangeKind.MODIFIED,
    "T": ChangeKind.MODIFIED,
    "R": ChangeKind.MODIFIED,
    "D": ChangeKind.DELETED,
}
