"""
Integration tests for a full poll run against real git repositories.

Requires the git binary; skipped otherwise.

Usage:
    pytest veilleur/tests/integration/test_git_poll.py
"""

from unittest.mock import patch

import pytest
from rich.console import Console

from veilleur.core.orchestrator import Veilleur
from veilleur.core.sinks import NotificationSink
from veilleur.domain.exceptions import GitCommandError
from veilleur.domain.models import FailureReport


class RecordingSink(NotificationSink):
    """Sink that keeps every report in memory."""

    name = "recording"

    def __init__(self):
        self.reports = []

    def send(self, report: FailureReport) -> None:
        self.reports.append(report)


@pytest.fixture
def sink():
    sink = RecordingSink()
    with patch("veilleur.core.notifier.build_sink", return_value=sink):
        yield sink


@pytest.fixture
def poll(git_repo, reporter):
    """Run one poll cycle over the directory holding git_repo."""

    def _poll(**overrides):
        veilleur = Veilleur(
            git_repo.path.parent,
            overrides=overrides,
            reporter=reporter,
            console=Console(quiet=True),
        )
        veilleur.run()
        return veilleur.summaries

    return _poll


def _count_runs(path) -> int:
    return len(path.read_text().splitlines()) if path.exists() else 0


class TestGitPoll:
    """End-to-end poll runs."""

    def test_first_run_tests_and_records(self, git_repo, poll, sink):
        """Test one branch, no marker: runs once, records HEAD date."""
        (summary,) = poll(testcmd="echo hi")

        assert summary.tested == ["main"]
        marker = git_repo.path / ".git" / "ci" / "main"
        assert marker.read_text() == git_repo.head_date()
        assert sink.reports == []

    def test_second_run_executes_nothing(self, git_repo, poll, tmp_path):
        """Test no new commits means zero test executions."""
        runs = tmp_path / "runs.log"
        testcmd = f"echo run >> {runs}"

        poll(testcmd=testcmd)
        marker = git_repo.path / ".git" / "ci" / "main"
        before = marker.read_text()
        (summary,) = poll(testcmd=testcmd)

        assert _count_runs(runs) == 1
        assert summary.skipped == ["main"]
        assert marker.read_text() == before

    def test_new_commit_is_tested(self, git_repo, poll, tmp_path):
        """Test a commit after the last run triggers a new run."""
        runs = tmp_path / "runs.log"
        testcmd = f"echo run >> {runs}"

        poll(testcmd=testcmd)
        git_repo.commit("CHANGES", "v2\n", "Second commit")
        poll(testcmd=testcmd)

        assert _count_runs(runs) == 2
        assert (git_repo.path / ".git/ci/main").read_text() == git_repo.head_date()

    def test_failure_notifies_author_and_committer(self, git_repo, poll, sink):
        """Test a failing command reports to %a,%c of HEAD."""
        (summary,) = poll(testcmd="false")

        assert summary.failed == ["main"]
        (report,) = sink.reports
        assert report.recipients == ("author@example.com", "committer@example.com")
        assert report.subject == f"CI failed for {git_repo.path}:main"
        assert (git_repo.path / ".git/ci/main").exists()

    def test_empty_mailto_sends_nothing(self, poll, sink):
        """Test -m '' disables mail without crashing."""
        (summary,) = poll(testcmd="false", mailto="")

        assert summary.failed == ["main"]
        assert sink.reports == []

    def test_dry_run_never_runs_command(self, poll, tmp_path):
        """Test dry-run marks branches without running tests."""
        runs = tmp_path / "runs.log"

        (summary,) = poll(testcmd=f"echo run >> {runs}", dryrun=True)

        assert summary.tested == ["main"]
        assert _count_runs(runs) == 0

    def test_tests_run_on_each_branch(self, git_repo, poll, sink):
        """Test every branch is checked out before its tests run."""
        git_repo.git("checkout", "-q", "-b", "feature/login")
        git_repo.commit("login.txt", "wip\n", "Start login")
        git_repo.git("checkout", "-q", "main")

        (summary,) = poll(testcmd="test -f login.txt")

        assert summary.tested == ["feature/login", "main"]
        assert summary.failed == ["main"]
        assert (git_repo.path / ".git/ci/feature/login").exists()

    def test_repo_settings_file(self, git_repo, poll, tmp_path):
        """Test .ci-settings.yaml supplies the test command."""
        runs = tmp_path / "runs.log"
        (git_repo.path / ".ci-settings.yaml").write_text(
            f"testcmd: echo yaml >> {runs}\n"
        )

        poll()

        assert runs.read_text() == "yaml\n"

    def test_broken_repository_aborts(self, git_repo, poll):
        """Test git failures propagate out of the run."""
        broken = git_repo.path.parent / "broken.repo"
        broken.mkdir()
        (broken / ".git").write_text("gitdir: /nonexistent\n")

        with pytest.raises(GitCommandError):
            poll(testcmd="true")
