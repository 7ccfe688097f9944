"""
Notifier - composes and sends failure reports.

Recipients come from the mailto template, where %a is replaced by the
commit author email and %c by the committer email.
"""

from pathlib import Path
from typing import List, Optional

from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.config.settings import Options
from veilleur.core.sinks import NotificationSink, build_sink
from veilleur.domain.exceptions import NotificationError
from veilleur.domain.models import CommitInfo, FailureReport, TestOutcome

INDENT = "    "
SIGNATURE = "veilleur, your local continuous integration poller"


def resolve_recipients(template: str, commit: CommitInfo) -> List[str]:
    """
    Expand a mailto template into a recipient list.

    Only the first %a and the first %c are substituted.

    Args:
        template: Comma-separated addresses with %a/%c placeholders
        commit: Commit providing the author and committer emails

    Returns:
        Recipient addresses (empty list if the template is empty)
    """
    expanded = template.replace("%a", commit.author_email, 1).replace(
        "%c", commit.committer_email, 1
    )
    return [address.strip() for address in expanded.split(",") if address.strip()]


def _indent(text: str) -> str:
    return INDENT + text.replace("\n", "\n" + INDENT)


def compose_report(
    repo_path: Path,
    branch: str,
    commit: CommitInfo,
    options: Options,
    outcome: TestOutcome,
    recipients: List[str],
) -> FailureReport:
    """
    Build the failure report for one branch.

    Returns:
        FailureReport with subject and plain-text body
    """
    body = "\n".join(
        [
            f"Tests are failing for the {branch} branch in {repo_path}.",
            "",
            "The last commit was:",
            "",
            _indent(commit.subject),
            _indent(commit.date),
            _indent(commit.hash),
            "",
            "",
            "Commands:",
            _indent(options.testcmd),
            "",
            "Output:",
            "",
            _indent(outcome.output),
            "",
            "",
            "-- ",
            f" {SIGNATURE}",
            "",
        ]
    )

    return FailureReport(
        sender=options.sender,
        recipients=tuple(recipients),
        subject=f"CI failed for {repo_path}:{branch}",
        body=body,
    )


class Notifier:
    """
    Sends failure reports through a notification sink.

    A delivery failure is logged together with the full report and
    then raised as NotificationError; it is never swallowed.
    """

    def __init__(
        self,
        sink: Optional[NotificationSink] = None,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize notifier.

        Args:
            sink: Transport (default: chosen per call from options.notifier)
            reporter: Optional reporter for logging
        """
        self.sink = sink
        self.reporter = reporter or SystemReporter(name="notifier", verbose=1)

    def notify(
        self,
        repo_path: Path,
        branch: str,
        commit: CommitInfo,
        options: Options,
        outcome: TestOutcome,
    ) -> Optional[FailureReport]:
        """
        Send the failure report of a branch.

        Args:
            repo_path: Repository working tree
            branch: Failing branch
            commit: HEAD of the failing branch
            options: Effective options (mailto, from, testcmd, notifier)
            outcome: Failed test outcome

        Returns:
            The report that was sent, or None if there were no recipients

        Raises:
            NotificationError: If the sink failed to deliver
        """
        recipients = resolve_recipients(options.mailto, commit)
        if not recipients:
            self.reporter.info(
                f"{VeilleurEmoji.MAIL_OFF} No recipients for {repo_path}:{branch}, "
                f"not sending a report",
                context="Notifier",
            )
            return None

        report = compose_report(repo_path, branch, commit, options, outcome, recipients)
        sink = self.sink or build_sink(options, self.reporter)

        try:
            sink.send(report)
        except Exception as e:
            self.reporter.error(
                f"Error: Unable to send {sink.name} notification: {e}",
                context="Notifier",
            )
            self.reporter.error(
                f"Subject: {report.subject}\n\n{report.body}", context="Notifier"
            )
            raise NotificationError(sink.name, str(e)) from e

        self.reporter.info(
            f"{VeilleurEmoji.MAIL} Sent failure report for {repo_path}:{branch} "
            f"to {', '.join(recipients)}",
            context="Notifier",
        )
        return report
