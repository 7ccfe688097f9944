"""
Test fixtures and configuration.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
from shared.reporter.system_reporter import SystemReporter

from veilleur.config.settings import Options
from veilleur.domain.models import CommitInfo

AUTHOR_EMAIL = "author@example.com"
COMMITTER_EMAIL = "committer@example.com"


@pytest.fixture
def reporter() -> SystemReporter:
    """Reporter that only lets errors through."""
    return SystemReporter(name="veilleur-tests", verbose=0)


@pytest.fixture
def make_options() -> Callable[..., Options]:
    """Build Options with a few overrides."""

    def _make(**overrides) -> Options:
        return Options.model_validate(overrides)

    return _make


@pytest.fixture
def commit() -> CommitInfo:
    """A HEAD snapshot with distinct author and committer."""
    return CommitInfo(
        hash="3f2a9c1d8e7b6a5f4e3d2c1b0a9f8e7d6c5b4a39",
        author_email=AUTHOR_EMAIL,
        committer_email=COMMITTER_EMAIL,
        subject="Fix flaky parser test",
        date="Mon, 12 Oct 2026 09:15:00 +0200",
    )


@pytest.fixture
def fake_repo(tmp_path: Path) -> Path:
    """Directory that looks like a working tree (has a .git dir)."""
    repo = tmp_path / "project.repo"
    (repo / ".git").mkdir(parents=True)
    return repo


# ================================================================
# Real git repositories
# ================================================================


class GitRepo:
    """Small helper around a throwaway git repository."""

    def __init__(self, path: Path):
        self.path = path
        self._tick = 0

    def git(self, *args: str, env: Optional[Dict[str, str]] = None) -> str:
        full_env = dict(os.environ)
        full_env.update(env or {})
        completed = subprocess.run(
            ["git", "-C", str(self.path), *args],
            capture_output=True,
            text=True,
            check=True,
            env=full_env,
        )
        return completed.stdout

    def commit(self, filename: str, content: str, message: str) -> None:
        """Commit a file with a unique, strictly increasing author date."""
        self._tick += 1
        date = f"2026-10-{self._tick:02d}T12:00:00+0000"
        (self.path / filename).write_text(content)
        self.git("add", filename)
        self.git(
            "commit",
            "-q",
            "-m",
            message,
            env={
                "GIT_AUTHOR_NAME": "Author",
                "GIT_AUTHOR_EMAIL": AUTHOR_EMAIL,
                "GIT_AUTHOR_DATE": date,
                "GIT_COMMITTER_NAME": "Committer",
                "GIT_COMMITTER_EMAIL": COMMITTER_EMAIL,
                "GIT_COMMITTER_DATE": date,
            },
        )

    def head_date(self) -> str:
        return self.git("log", "-1", "--format=%aD").strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    """A *.repo working tree on branch main with one commit."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    path = tmp_path / "repos" / "project.repo"
    path.mkdir(parents=True)

    repo = GitRepo(path)
    repo.git("init", "-q")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    repo.git("config", "user.name", "Tester")
    repo.git("config", "user.email", "tester@example.com")
    repo.git("config", "commit.gpgsign", "false")
    repo.commit("README", "hello\n", "Initial commit")
    return repo
