"""
Command execution exceptions.
"""

from typing import Sequence


class VeilleurError(Exception):
    """Base exception for veilleur errors."""

    pass


class CommandFailureError(VeilleurError):
    """Raised when a command on the halting path exits non-zero."""

    def __init__(self, command: Sequence[str], output: str, status: int):
        """
        Initialize CommandFailureError.

        Args:
            command: Argument list that was executed
            output: Merged stdout/stderr of the command
            status: Exit status
        """
        super().__init__(f"Error running {' '.join(command)}:\n{output}")
        self.command = list(command)
        self.output = output
        self.status = status


class GitCommandError(VeilleurError):
    """Raised when a git query (branch, checkout, log) fails."""

    def __init__(self, command: Sequence[str], output: str, status: int):
        """
        Initialize GitCommandError.

        Args:
            command: Git argument list that was executed
            output: Raw git output
            status: Exit status
        """
        super().__init__(output.strip() or f"git exited with status {status}")
        self.command = list(command)
        self.output = output
        self.status = status
