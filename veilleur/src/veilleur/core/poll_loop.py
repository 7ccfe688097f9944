"""
Poll loop - tests every changed branch of one repository.

Per branch, strictly in order:
- Checkout (and pull when enabled)
- Change check against the stored marker
- Test run
- Failure notification
- Marker update
"""

from pathlib import Path
from typing import Optional

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.config.settings import Options
from veilleur.core.change_tracker import ChangeTracker
from veilleur.core.notifier import Notifier
from veilleur.core.repo_inspector import RepoInspector
from veilleur.core.test_executor import TestExecutor
from veilleur.domain.models import BranchContext, PollSummary


class PollLoop:
    """
    Runs one poll cycle over the branches of a repository.

    Branches are processed one at a time because every checkout
    mutates the shared working tree. Git and notification errors
    propagate and abort the cycle.
    """

    def __init__(
        self,
        repo_path: Path,
        options: Options,
        inspector: RepoInspector,
        tracker: ChangeTracker,
        executor: TestExecutor,
        notifier: Notifier,
        reporter: Optional[SystemReporter] = None,
    ):
        self.repo_path = Path(repo_path)
        self.options = options
        self.inspector = inspector
        self.tracker = tracker
        self.executor = executor
        self.notifier = notifier
        self.reporter = reporter or SystemReporter(name="poll_loop", verbose=1)

    def run(self) -> PollSummary:
        """
        Test every branch that changed since its last test.

        Returns:
            PollSummary of tested, skipped and failed branches
        """
        summary = PollSummary(repo_path=self.repo_path)

        branches = self.inspector.list_branches(self.repo_path)
        self.reporter.info(
            f"{VeilleurEmoji.REPO} {self.repo_path}: {len(branches)} branch(es)",
            context="PollLoop",
            verbose_level=2,
        )

        for branch in branches:
            context = BranchContext(
                repo_path=self.repo_path, branch=branch, options=self.options
            )
            self._process_branch(context, summary)

        return summary

    def _process_branch(self, context: BranchContext, summary: PollSummary) -> None:
        repo_path, branch, options = context.repo_path, context.branch, context.options

        self.tracker.ensure_marker_dir(repo_path)
        self.inspector.checkout(repo_path, branch)
        if options.pull:
            self.inspector.pull(repo_path)

        if not options.runalways and not self.tracker.has_changed(repo_path, branch):
            self.reporter.info(
                f"{VeilleurEmoji.UNCHANGED} Branch {branch} hasn't changed, "
                f"doing nothing",
                context="PollLoop",
                verbose_level=2,
            )
            summary.skipped.append(branch)
            return

        outcome = self.executor.run_tests(repo_path, options)
        summary.tested.append(branch)

        if outcome.success:
            self.reporter.info(
                f"{VeilleurEmoji.TEST_PASS} {repo_path}:{branch} passed",
                context="PollLoop",
            )
        else:
            summary.failed.append(branch)
            self.reporter.warning(
                f"{VeilleurEmoji.TEST_FAIL} {repo_path}:{branch} failed",
                context="PollLoop",
            )
            commit = self.inspector.last_commit(repo_path)
            self.notifier.notify(repo_path, branch, commit, options, outcome)

        # Marker tracks "was tested", not "passed"
        self.tracker.record_tested(
            repo_path, branch, self.inspector.last_commit(repo_path).date
        )
