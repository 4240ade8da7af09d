"""Tests for cochange_insight.temporal.git_extractor."""

import pytest

from cochange_insight.exceptions import GitLogError, GitUnavailableError
from cochange_insight.temporal.git_extractor import GitExtractor, _drop_partial_commit
from cochange_insight.temporal.models import ChangeKind, FileChange

A, M, D = ChangeKind.ADDED, ChangeKind.MODIFIED, ChangeKind.DELETED

SAMPLE_LOG = (
    "@@commit|" + "c" * 40 + "|1700000300\n"
    "\n"
    "M\tsrc/app.py\n"
    "R087\tsrc/old_name.py\tsrc/new_name.py\n"
    "D\tdocs/obsolete.md\n"
    "@@commit|" + "b" * 40 + "|1700000200\n"
    "@@commit|" + "a" * 40 + "|1700000100\n"
    "\n"
    "A\tsrc/app.py\n"
    "C100\tsrc/template.py\tsrc/copy.py\n"
    "T\tbin/tool\n"
    "X\tweird.bin\n"
)


class TestParseLog:
    """Parsing of `git log --name-status` output."""

    def test_one_changeset_per_commit_with_files(self):
        change_sets = GitExtractor(".")._parse_log(SAMPLE_LOG)
        # the middle commit has no files (e.g. an empty merge)
        assert len(change_sets) == 2

    def test_status_letters(self):
        newest, oldest = GitExtractor(".")._parse_log(SAMPLE_LOG)
        assert newest == [
            FileChange("src/app.py", M),
            FileChange("src/new_name.py", M),
            FileChange("docs/obsolete.md", D),
        ]
        assert oldest == [
            FileChange("src/app.py", A),
            FileChange("src/copy.py", A),
            FileChange("bin/tool", M),
            FileChange("weird.bin", M),
        ]

    def test_include_patterns(self):
        extractor = GitExtractor(".", include_patterns=[r"^src/", r"\.md$"])
        newest, oldest = extractor._parse_log(SAMPLE_LOG)
        assert [c.path for c in newest] == ["src/app.py", "src/new_name.py", "docs/obsolete.md"]
        assert [c.path for c in oldest] == ["src/app.py", "src/copy.py"]

    def test_commit_emptied_by_filter_is_dropped(self):
        extractor = GitExtractor(".", include_patterns=[r"^bin/"])
        change_sets = extractor._parse_log(SAMPLE_LOG)
        assert change_sets == [[FileChange("bin/tool", M)]]

    def test_empty_output(self):
        assert GitExtractor(".")._parse_log("") == []

    def test_malformed_status_line_ignored(self):
        raw = "@@commit|" + "a" * 40 + "|1\nnot-a-status-line\nM\tok.py\n"
        assert GitExtractor(".")._parse_log(raw) == [[FileChange("ok.py", M)]]

    def test_crlf_output(self):
        raw = "@@commit|" + "a" * 40 + "|1\r\nM\tone.py\r\nA\ttwo.py\r\n"
        assert GitExtractor(".")._parse_log(raw) == [
            [FileChange("one.py", M), FileChange("two.py", A)]
        ]


class TestTruncatedOutput:
    """Output cut at the size limit never yields a partial commit."""

    def test_last_commit_dropped(self):
        raw = SAMPLE_LOG[: SAMPLE_LOG.index("A\tsrc/app.py") + 7]
        assert raw.endswith("A\tsrc/a")
        kept = _drop_partial_commit(raw)
        change_sets = GitExtractor(".")._parse_log(kept)
        assert [c.path for cs in change_sets for c in cs] == [
            "src/app.py",
            "src/new_name.py",
            "docs/obsolete.md",
        ]

    def test_cut_inside_first_commit(self):
        assert _drop_partial_commit(SAMPLE_LOG[:80]) == ""

    def test_size_limit_on_real_repository(self, history_repo):
        extractor = GitExtractor(str(history_repo.root))
        extractor._READ_CHUNK_BYTES = 10
        extractor._MAX_OUTPUT_BYTES = 100
        assert extractor.extract() == [[FileChange("c.py", D)]]


class TestBuildCommand:
    def test_defaults(self):
        cmd = GitExtractor("/tmp/repo")._build_command()
        assert cmd[:6] == ["git", "-C", cmd[2], "-c", "core.quotePath=false", "log"]
        assert "--name-status" in cmd
        assert "-n5000" in cmd
        assert not any(arg.startswith("--since") for arg in cmd)

    def test_unlimited_commits(self):
        cmd = GitExtractor("/tmp/repo", max_commits=0)._build_command()
        assert not any(arg.startswith("-n") for arg in cmd)

    def test_since_and_merges_only(self):
        cmd = GitExtractor("/tmp/repo", since="2024-01-31", merges_only=True)._build_command()
        assert "--since=2024-01-31" in cmd
        assert "--first-parent" in cmd
        assert "--merges" in cmd
        assert "--diff-merges=first-parent" in cmd


class TestExtractFromRepository:
    """End-to-end against real temporary repositories."""

    def test_history(self, history_repo):
        change_sets = GitExtractor(str(history_repo.root)).extract()
        assert change_sets == [
            [FileChange("c.py", D)],
            [FileChange("a.py", M), FileChange("b.py", M), FileChange("c.py", A)],
            [FileChange("a.py", A), FileChange("b.py", A)],
        ]

    def test_max_commits(self, history_repo):
        change_sets = GitExtractor(str(history_repo.root), max_commits=1).extract()
        assert change_sets == [[FileChange("c.py", D)]]

    def test_include_filter(self, history_repo):
        change_sets = GitExtractor(str(history_repo.root), include_patterns=[r"^a"]).extract()
        assert change_sets == [[FileChange("a.py", M)], [FileChange("a.py", A)]]

    def test_rename_reported_on_new_path(self, git_repo):
        git_repo.write("old.py", "other.py")
        git_repo.commit("initial")
        git_repo.git("mv", "old.py", "new.py")
        git_repo.commit("rename")
        newest = GitExtractor(str(git_repo.root)).extract()[0]
        assert newest == [FileChange("new.py", M)]

    def test_non_ascii_path_not_quoted(self, git_repo):
        git_repo.write("caf\u00e9.py", "plain.py")
        git_repo.commit("accents")
        change_sets = GitExtractor(str(git_repo.root)).extract()
        assert change_sets == [[FileChange("caf\u00e9.py", A), FileChange("plain.py", A)]]

    def test_merges_only(self, git_repo):
        git_repo.write("base.py")
        git_repo.commit("initial")
        main = git_repo.git("rev-parse", "--abbrev-ref", "HEAD").strip()
        git_repo.git("checkout", "-q", "-b", "feature")
        git_repo.write("x.py")
        git_repo.commit("x")
        git_repo.write("y.py")
        git_repo.commit("y")
        git_repo.git("checkout", "-q", main)
        git_repo.git("merge", "-q", "--no-ff", "-m", "merge feature", "feature")

        change_sets = GitExtractor(str(git_repo.root), merges_only=True).extract()
        assert change_sets == [[FileChange("x.py", A), FileChange("y.py", A)]]

    def test_not_a_repository(self, git_repo, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(GitUnavailableError) as exc_info:
            GitExtractor(str(plain)).extract()
        assert exc_info.value.reason == "not a git repository"

    def test_repository_without_commits(self, git_repo):
        with pytest.raises(GitLogError):
            GitExtractor(str(git_repo.root)).extract()
