"""
Directory scanner - finds repositories to poll.
"""

from pathlib import Path
from typing import List, Optional

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

REPO_SUFFIX = ".repo"


class DirectoryScanner:
    """Lists `*.repo` directories of a scan directory."""

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter or SystemReporter(name="directory_scanner", verbose=1)

    def scan(self, directory: Path) -> List[Path]:
        """
        Find candidate repositories.

        Hidden entries and anything that is not a directory are
        skipped.

        Args:
            directory: Directory to scan

        Returns:
            Repository paths sorted by name
        """
        directory = Path(directory)
        repos = [
            entry
            for entry in sorted(directory.iterdir(), key=lambda p: p.name)
            if entry.name.endswith(REPO_SUFFIX)
            and not entry.name.startswith(".")
            and entry.is_dir()
        ]

        self.reporter.info(
            f"{VeilleurEmoji.SCAN} Found {len(repos)} repository(ies) in {directory}",
            context="DirectoryScanner",
            verbose_level=2,
        )
        return repos
