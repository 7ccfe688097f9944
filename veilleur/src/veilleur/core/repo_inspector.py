"""
Repository inspector - branch listing, checkout, pull and HEAD metadata.

Thin wrapper over git commands run through CommandRunner.
"""

from pathlib import Path
from typing import List, Optional

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.core.command_runner import CommandRunner
from veilleur.domain.exceptions import GitCommandError
from veilleur.domain.models import CommandResult, CommitInfo

REMOTE_PREFIX = "remotes/origin/"
FIELD_SEPARATOR = "||"
LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%aE", "%cE", "%s", "%aD"])


class RepoInspector:
    """
    Queries and switches the working tree of a git repository.

    Every operation targets the repository given as argument; the
    inspector itself holds no repository state.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize repository inspector.

        Args:
            runner: Command runner used for git invocations
            reporter: Optional reporter for logging
        """
        self.reporter = reporter or SystemReporter(name="repo_inspector", verbose=1)
        self.runner = runner or CommandRunner(self.reporter)

    def _git(self, repo_path: Path, *args: str) -> CommandResult:
        command = ["git", "-C", str(repo_path), *args]
        result = self.runner.run(command)
        if not result.ok:
            self.reporter.error(
                f"{VeilleurEmoji.GIT} git {args[0]} failed in {repo_path}: "
                f"{result.output.strip()}",
                context="RepoInspector",
            )
            raise GitCommandError(command, result.output, result.status)
        return result

    def list_branches(self, repo_path: Path) -> List[str]:
        """
        List local and remote branches.

        Strips the current-branch marker and the remotes/origin/ prefix,
        drops HEAD pseudo-branches, deduplicates and sorts.

        Args:
            repo_path: Repository working tree

        Returns:
            Sorted list of unique branch names

        Raises:
            GitCommandError: If git branch fails
        """
        result = self._git(repo_path, "branch", "-a")
        return parse_branches(result.output)

    def checkout(self, repo_path: Path, branch: str) -> None:
        """
        Switch the working tree to a branch.

        Raises:
            GitCommandError: If git checkout fails
        """
        self.reporter.info(
            f"{VeilleurEmoji.BRANCH} Checking out {branch}",
            context="RepoInspector",
            verbose_level=2,
        )
        self._git(repo_path, "checkout", branch)

    def pull(self, repo_path: Path) -> None:
        """
        Pull the checked-out branch.

        A failing pull is fatal to the whole run.

        Raises:
            CommandFailureError: If git pull fails
        """
        self.reporter.info(
            f"{VeilleurEmoji.PULL} Pulling {repo_path}",
            context="RepoInspector",
            verbose_level=2,
        )
        self.runner.run(
            ["git", "-C", str(repo_path), "pull", "--force"], halt_on_failure=True
        )

    def last_commit(self, repo_path: Path) -> CommitInfo:
        """
        Read HEAD of the checked-out branch.

        Raises:
            GitCommandError: If git log fails
        """
        result = self._git(repo_path, "log", "-1", f"--format={LOG_FORMAT}")
        return parse_commit(result.output)


def parse_branches(output: str) -> List[str]:
    """
    Parse `git branch -a` output into unique sorted branch names.

    Args:
        output: Raw git output

    Returns:
        Sorted list of branch names
    """
    branches = set()
    for line in output.splitlines():
        name = line.lstrip("*+ ").strip()
        if name.startswith(REMOTE_PREFIX):
            name = name[len(REMOTE_PREFIX) :]
        if not name or name.startswith("("):
            continue
        if name == "HEAD" or name.startswith("HEAD ->"):
            continue
        branches.add(name)
    return sorted(branches)


def parse_commit(output: str) -> CommitInfo:
    """
    Parse one line of `git log --format=%H||%aE||%cE||%s||%aD`.

    The subject may itself contain the separator, so the first three
    fields and the last one are fixed and the rest is the subject.

    Raises:
        ValueError: If the line has fewer than five fields
    """
    fields = output.strip().split(FIELD_SEPARATOR)
    if len(fields) < 5:
        raise ValueError(f"Unexpected git log output: {output!r}")

    return CommitInfo(
        hash=fields[0].strip(),
        author_email=fields[1].strip(),
        committer_email=fields[2].strip(),
        subject=FIELD_SEPARATOR.join(fields[3:-1]).strip(),
        date=fields[-1].strip(),
    )
