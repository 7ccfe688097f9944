"""
Change tracker - decides whether a branch needs testing.

Persists the date of the last tested commit of each branch in
<repo>/.git/ci/<branch>.
"""

from pathlib import Path
from typing import Optional

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.core.repo_inspector import RepoInspector

MARKER_DIRNAME = "ci"


class ChangeTracker:
    """
    Reads and writes per-branch change markers.

    A missing marker means the branch was never tested. A marker
    whose content differs from the current HEAD date means a new
    commit arrived since the last test.
    """

    def __init__(
        self,
        inspector: RepoInspector,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize change tracker.

        Args:
            inspector: Used to read the current HEAD date
            reporter: Optional reporter for logging
        """
        self.inspector = inspector
        self.reporter = reporter or SystemReporter(name="change_tracker", verbose=1)

    @staticmethod
    def marker_dir(repo_path: Path) -> Path:
        return Path(repo_path) / ".git" / MARKER_DIRNAME

    def marker_path(self, repo_path: Path, branch: str) -> Path:
        return self.marker_dir(repo_path) / branch

    def ensure_marker_dir(self, repo_path: Path) -> None:
        """Create <repo>/.git/ci if it does not exist yet."""
        self.marker_dir(repo_path).mkdir(exist_ok=True)

    def read_marker(self, repo_path: Path, branch: str) -> Optional[str]:
        """
        Read the stored commit date for a branch.

        Returns:
            Stored date string, or None if the branch was never tested
        """
        path = self.marker_path(repo_path, branch)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def has_changed(self, repo_path: Path, branch: str) -> bool:
        """
        Check whether the checked-out branch needs testing.

        Args:
            repo_path: Repository working tree
            branch: Branch currently checked out

        Returns:
            True if the marker is absent or differs from HEAD's date
        """
        stored = self.read_marker(repo_path, branch)
        if stored is None:
            return True

        current = self.inspector.last_commit(repo_path).date
        return stored != current

    def record_tested(self, repo_path: Path, branch: str, date: str) -> None:
        """
        Overwrite the marker of a branch with a commit date.

        Args:
            repo_path: Repository working tree
            branch: Branch name (may contain '/')
            date: Date string of the tested commit
        """
        path = self.marker_path(repo_path, branch)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(date, encoding="utf-8")

        self.reporter.info(
            f"{VeilleurEmoji.MARKER} Recorded {branch} at {date}",
            context="ChangeTracker",
            verbose_level=2,
        )
