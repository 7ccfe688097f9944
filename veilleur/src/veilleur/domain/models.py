"""
Value objects passed through the poll loop.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from veilleur.config.settings import Options


@dataclass(frozen=True)
class CommandResult:
    """Merged output and exit status of one command."""

    command: Tuple[str, ...]
    output: str
    status: int

    @property
    def ok(self) -> bool:
        return self.status == 0


@dataclass(frozen=True)
class CommitInfo:
    """
    Snapshot of HEAD for the checked-out branch.

    ``date`` is the author date string as printed by git; it is
    what the change marker stores.
    """

    hash: str
    author_email: str
    committer_email: str
    subject: str
    date: str


@dataclass(frozen=True)
class TestOutcome:
    """
    Aggregated result of one test command block.

    ``output`` holds the output of the last command line only.
    """

    __test__ = False

    success: bool
    output: str
    statuses: Tuple[int, ...] = ()


@dataclass(frozen=True)
class BranchContext:
    """Repository, branch and effective options for one loop step."""

    repo_path: Path
    branch: str
    options: Options


@dataclass
class PollSummary:
    """What happened to each branch of one repository."""

    repo_path: Path
    tested: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every tested branch passed."""
        return not self.failed


@dataclass(frozen=True)
class FailureReport:
    """A composed failure message, ready for a notification sink."""

    sender: str
    recipients: Tuple[str, ...]
    subject: str
    body: str
