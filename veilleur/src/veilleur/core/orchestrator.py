"""
Veilleur orchestrator - polls every repository of a directory.

Coordinates:
- Directory scanning (*.repo entries)
- Option loading (env, .ci-settings.yaml, CLI flags)
- One PollLoop per repository
- Summary display
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from rich.console import Console
from shared.reporter.emojis import SystemEmoji, VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.config.settings import (
    Options,
    load_environment,
    load_options,
    unknown_keys,
)
from veilleur.core.change_tracker import ChangeTracker
from veilleur.core.command_runner import CommandRunner
from veilleur.core.directory_scanner import DirectoryScanner
from veilleur.core.notifier import Notifier
from veilleur.core.poll_loop import PollLoop
from veilleur.core.repo_inspector import RepoInspector
from veilleur.core.reporter import SummaryReporter
from veilleur.core.test_executor import TestExecutor
from veilleur.domain.models import PollSummary


class Veilleur:
    """
    Main orchestrator for one poll run.

    Repositories are processed sequentially; an exception raised by
    one repository ends the run.
    """

    def __init__(
        self,
        directory: Path,
        overrides: Optional[Mapping[str, Any]] = None,
        reporter: Optional[SystemReporter] = None,
        console: Optional[Console] = None,
        env_file: Optional[Path] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            directory: Directory containing *.repo working trees
            overrides: Options given on the command line
            reporter: Reporter for logging
            console: Rich console for the summary
            env_file: Optional .env file with VEILLEUR_* defaults
        """
        self.directory = Path(directory)
        self.overrides: Dict[str, Any] = dict(overrides or {})
        self.reporter = reporter or SystemReporter(name="veilleur", verbose=1)
        self.console = console or Console()
        self.env_file = env_file

        self.scanner = DirectoryScanner(self.reporter)
        self.display_reporter = SummaryReporter()
        self.summaries: List[PollSummary] = []

    def run(self) -> bool:
        """
        Poll every repository once.

        Returns:
            True if no tested branch failed
        """
        start_time = time.time()
        self.reporter.info(
            f"{SystemEmoji.STARTUP} Polling repositories in {self.directory}",
            context="Veilleur",
            verbose_level=2,
        )

        environment = load_environment(self.env_file)

        for repo_path in self.scanner.scan(self.directory):
            options = load_options(repo_path, self.overrides, environment)
            self.summaries.append(self.poll_repository(repo_path, options))

        all_passed = all(summary.success for summary in self.summaries)

        # Quiet on clean runs so cron only mails when something failed
        if self.reporter.verbose >= 2 or not all_passed:
            self.console.print(
                self.display_reporter.create_summary_panel(
                    self.summaries, time.time() - start_time
                )
            )
        return all_passed

    def poll_repository(self, repo_path: Path, options: Options) -> PollSummary:
        """
        Build the loop components for one repository and run them.

        Args:
            repo_path: Repository working tree
            options: Effective options for this repository

        Returns:
            PollSummary of the repository
        """
        reporter = self.reporter
        if options.verbose and reporter.verbose < 2:
            reporter = reporter.with_verbosity(2)

        reporter.info(
            f"{SystemEmoji.CONFIG} {repo_path.name}: "
            f"{options.model_dump(by_alias=True)}",
            context="Veilleur",
            verbose_level=2,
        )
        for key in unknown_keys(repo_path):
            reporter.warning(
                f"{SystemEmoji.WARNING} Ignoring unknown setting '{key}' "
                f"in {repo_path.name}",
                context="Veilleur",
            )

        runner = CommandRunner(reporter)
        inspector = RepoInspector(runner, reporter)
        loop = PollLoop(
            repo_path=repo_path,
            options=options,
            inspector=inspector,
            tracker=ChangeTracker(inspector, reporter),
            executor=TestExecutor(runner, reporter),
            notifier=Notifier(reporter=reporter),
            reporter=reporter,
        )

        summary = loop.run()
        reporter.info(
            f"{VeilleurEmoji.REPO} {repo_path.name}: {len(summary.tested)} tested, "
            f"{len(summary.skipped)} skipped, {len(summary.failed)} failed",
            context="Veilleur",
            verbose_level=2,
        )
        return summary


def run_for_dir(
    directory: Path,
    overrides: Optional[Mapping[str, Any]] = None,
    reporter: Optional[SystemReporter] = None,
    env_file: Optional[Path] = None,
) -> bool:
    """Poll every repository of a directory once."""
    return Veilleur(directory, overrides, reporter, env_file=env_file).run()
