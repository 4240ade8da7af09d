"""Extract change-sets from git history via subprocess."""

import re
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import GitLogError, GitUnavailableError
from ..logging_config import get_logger
from .models import STATUS_KINDS, ChangeKind, ChangeSet, FileChange

logger = get_logger(__name__)

# Header marker keeps commit lines apart from --name-status lines
_HEADER_PREFIX = "@@commit|"


class GitExtractor:
    """Parse ``git log --name-status`` into one change-set per commit."""

    def __init__(
        self,
        repo_path: str,
        max_commits: int = 5000,
        since: Optional[str] = None,
        include_patterns: Sequence[str] = (),
        merges_only: bool = False,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.max_commits = max_commits
        self.since = since
        self.include_patterns = [re.compile(p) for p in include_patterns]
        self.merges_only = merges_only

    def extract(self) -> list[ChangeSet]:
        """Run git log and return change-sets, newest commit first.

        Raises:
            GitUnavailableError: If git is missing or the path is not a repo
            GitLogError: If git log fails
        """
        self._check_git_repo()
        raw = self._run_git_log()
        change_sets = self._parse_log(raw)
        logger.info("Read %d change-sets from %s", len(change_sets), self.repo_path)
        return change_sets

    def _check_git_repo(self) -> None:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except FileNotFoundError:
            raise GitUnavailableError(self.repo_path, "git executable not found")
        except subprocess.TimeoutExpired:
            raise GitUnavailableError(self.repo_path, "git rev-parse timed out")
        if result.returncode != 0:
            raise GitUnavailableError(self.repo_path, "not a git repository")

    def _build_command(self) -> list[str]:
        cmd = [
            "git",
            "-C",
            self.repo_path,
            # keep non-ASCII paths as UTF-8 instead of C-quoted octal
            "-c",
            "core.quotePath=false",
            "log",
            f"--format={_HEADER_PREFIX}%H|%at",
            "--name-status",
        ]
        if self.max_commits:
            cmd.append(f"-n{self.max_commits}")
        if self.since:
            cmd.append(f"--since={self.since}")
        if self.merges_only:
            # one change-set per merged branch: the merge's diff against mainline
            cmd.extend(["--first-parent", "--merges", "--diff-merges=first-parent"])
        return cmd

    # Maximum git log output size (50MB) to prevent OOM on huge repos
    _MAX_OUTPUT_BYTES = 50 * 1024 * 1024
    _READ_CHUNK_BYTES = 1024 * 1024

    def _run_git_log(self) -> str:
        cmd = self._build_command()
        try:
            # Popen for streaming to avoid loading unbounded output into memory
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            raise GitUnavailableError(self.repo_path, "git executable not found")

        try:
            chunks = []
            total_size = 0
            truncated = False
            stdout = proc.stdout
            if stdout is None:
                raise GitLogError(self.repo_path, "no output stream")
            while True:
                chunk = stdout.read(self._READ_CHUNK_BYTES)
                if not chunk:
                    break
                chunks.append(chunk)
                total_size += len(chunk)
                if total_size > self._MAX_OUTPUT_BYTES:
                    logger.warning(
                        "git log output exceeded %d bytes, dropping the oldest commits",
                        self._MAX_OUTPUT_BYTES,
                    )
                    truncated = True
                    proc.kill()
                    break

            try:
                proc.wait(timeout=30)
            except subprocess.TimeoutExpired:
                proc.kill()
                raise GitLogError(self.repo_path, "git log timed out")
            if proc.returncode != 0 and proc.returncode != -9:  # -9 = killed
                stderr = proc.stderr.read() if proc.stderr else ""
                logger.warning("git log failed: %s", stderr.strip())
                raise GitLogError(self.repo_path, stderr.strip() or f"exit {proc.returncode}")
            raw = "".join(chunks)
            return _drop_partial_commit(raw) if truncated else raw
        finally:
            if proc.stdout:
                proc.stdout.close()
            if proc.stderr:
                proc.stderr.close()

    def _parse_log(self, raw: str) -> list[ChangeSet]:
        """Parse git log output into change-sets.

        Commits without (matching) file records, such as merges without
        diffs, produce no change-set.
        """
        change_sets: list[ChangeSet] = []
        current: Optional[ChangeSet] = None

        for line in raw.split("\n"):
            line = line.rstrip("\r")
            if not line.strip():
                continue

            if line.startswith(_HEADER_PREFIX):
                if current:
                    change_sets.append(current)
                current = []
            elif current is not None:
                change = self._parse_status_line(line)
                if change is not None and self._is_included(change.path):
                    current.append(change)

        if current:
            change_sets.append(current)

        return change_sets

    @staticmethod
    def _parse_status_line(line: str) -> Optional[FileChange]:
        """Parse ``M\\tpath``, ``R087\\told\\tnew`` or ``C100\\tsrc\\tdst``."""
        parts = line.split("\t")
        if len(parts) < 2:
            logger.debug("Ignoring unexpected git log line: %r", line)
            return None

        status = parts[0][:1]
        kind = STATUS_KINDS.get(status, ChangeKind.MODIFIED)
        # renames and copies name the destination last
        path = parts[-1]
        return FileChange(path=path, kind=kind)

    def _is_included(self, path: str) -> bool:
        if not self.include_patterns:
            return True
        return any(p.search(path) for p in self.include_patterns)


def _drop_partial_commit(raw: str) -> str:
    """Cut truncated output back to the last complete commit.

    The commit whose header was read last may be missing records, or end in
    the middle of a path, so it is dropped along with everything after it.
    """
    cut = raw.rfind("\n" + _HEADER_PREFIX)
    if cut < 0:
        return ""
    return raw[: cut + 1]
