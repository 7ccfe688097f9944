"""
Command runner - executes commands and captures their output.

Commands are argument lists; stdout and stderr are merged into a
single text stream.
"""

import os
import signal
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.domain.exceptions import CommandFailureError
from veilleur.domain.models import CommandResult

# Exit status reported for commands killed after their timeout (as timeout(1))
TIMEOUT_STATUS = 124


class CommandRunner:
    """
    Runs one command at a time and returns its merged output.

    Non-zero exit statuses are returned to the caller, except on the
    halting path (halt_on_failure=True) where they raise
    CommandFailureError, which ends the process with exit code 1.
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        """
        Initialize command runner.

        Args:
            reporter: Optional reporter for logging
        """
        self.reporter = reporter or SystemReporter(name="command_runner", verbose=1)

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[Path] = None,
        halt_on_failure: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Execute a command.

        Args:
            command: Argument list (no shell interpolation)
            cwd: Working directory (default: current directory)
            halt_on_failure: Raise CommandFailureError on non-zero exit
            timeout: Seconds before the command is killed (None = wait forever)

        Returns:
            CommandResult with merged output and exit status

        Raises:
            CommandFailureError: If halt_on_failure and the command failed
        """
        argv = tuple(str(part) for part in command)
        self.reporter.info(
            f"Running {' '.join(argv)}", context="CommandRunner", verbose_level=2
        )

        with subprocess.Popen(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            start_new_session=True,
        ) as proc:
            try:
                output, _ = proc.communicate(timeout=timeout)
            except subprocess.TimeoutExpired:
                # Kill the whole group so background children die too
                self._kill_group(proc)
                partial, _ = proc.communicate()
                self.reporter.warning(
                    f"{VeilleurEmoji.TIMEOUT} Command timed out after "
                    f"{timeout}s: {' '.join(argv)}",
                    context="CommandRunner",
                )
                result = CommandResult(
                    command=argv,
                    output=f"{partial or ''}\n[timed out after {timeout}s]",
                    status=TIMEOUT_STATUS,
                )
            except BaseException:
                self._kill_group(proc)
                raise
            else:
                result = CommandResult(
                    command=argv,
                    output=output or "",
                    status=self._normalize_status(proc.returncode),
                )

        if not result.ok and halt_on_failure:
            self.reporter.error(
                f"Error running {' '.join(argv)}:\n{result.output}",
                context="CommandRunner",
            )
            raise CommandFailureError(argv, result.output, result.status)

        return result

    @staticmethod
    def _normalize_status(returncode: int) -> int:
        """Map 'killed by signal N' (-N) to 128 + N like a POSIX shell."""
        if returncode < 0:
            return 128 - returncode
        return returncode

    @staticmethod
    def _kill_group(proc: subprocess.Popen) -> None:
        """Kill the process group started for proc."""
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            # Group already exited
            pass
