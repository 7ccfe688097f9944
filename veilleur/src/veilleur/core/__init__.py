"""Poll loop components."""

from veilleur.core.change_tracker import ChangeTracker
from veilleur.core.command_runner import CommandRunner
from veilleur.core.directory_scanner import DirectoryScanner
from veilleur.core.notifier import Notifier
from veilleur.core.poll_loop import PollLoop
from veilleur.core.repo_inspector import RepoInspector
from veilleur.core.test_executor import TestExecutor

__all__ = [
    "ChangeTracker",
    "CommandRunner",
    "DirectoryScanner",
    "Notifier",
    "PollLoop",
    "RepoInspector",
    "TestExecutor",
]
