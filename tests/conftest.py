"""Shared test fixtures for Cochange Insight tests."""

import logging
import os
import shutil
import subprocess
from pathlib import Path

import pytest

from cochange_insight.graph.models import CochangeGraph


def weighted_graph(edges: list[tuple[str, str, int]], isolated: tuple[str, ...] = ()) -> CochangeGraph:
    """Graph from (a, b, weight) triples, used as a distance graph."""
    graph = CochangeGraph()
    for path in isolated:
        graph.ensure_node(path)
    for a, b, w in edges:
        graph.add_edge(a, b, w)
    return graph


@pytest.fixture
def path_graph():
    """Path graph a - b - c - d with unit distances."""
    return weighted_graph([("a", "b", 1), ("b", "c", 1), ("c", "d", 1)])


@pytest.fixture
def complete_graph():
    """K4 with all distances equal."""
    nodes = ["a", "b", "c", "d"]
    return weighted_graph(
        [(nodes[i], nodes[j], 1) for i in range(4) for j in range(i + 1, 4)]
    )


@pytest.fixture
def star_graph():
    """Star: center connected to 4 leaves."""
    return weighted_graph([("center", leaf, 1) for leaf in "abcd"])


@pytest.fixture
def square_graph():
    """Cycle a - b - c - d - a: two equal shortest paths between opposite corners."""
    return weighted_graph([("a", "b", 1), ("b", "c", 1), ("c", "d", 1), ("d", "a", 1)])


# ── git repositories ────────────────────────────────────────────────

_GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


class GitRepo:
    """Tiny helper that writes files and commits them."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.env = {**os.environ, **_GIT_ENV, "HOME": str(root)}
        self.git("init", "-q")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.root), *args],
            capture_output=True,
            text=True,
            env=self.env,
            check=True,
        )
        return result.stdout

    def write(self, *paths: str) -> None:
        for path in paths:
            target = self.root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            previous = target.read_text() if target.exists() else ""
            target.write_text(previous + "change\n")

    def remove(self, *paths: str) -> None:
        self.git("rm", "-q", *paths)

    def commit(self, message: str) -> None:
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    return GitRepo(tmp_path / "repo")


@pytest.fixture
def history_repo(git_repo):
    """Three commits: add a.py+b.py; touch a.py+b.py, add c.py; delete c.py."""
    git_repo.write("a.py", "b.py")
    git_repo.commit("initial")
    git_repo.write("a.py", "b.py", "c.py")
    git_repo.commit("feature")
    git_repo.remove("c.py")
    git_repo.commit("cleanup")
    return git_repo


@pytest.fixture
def restore_logging():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    package = logging.getLogger("cochange_insight")
    saved = (list(root.handlers), root.level, package.level)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    package.setLevel(saved[2])
