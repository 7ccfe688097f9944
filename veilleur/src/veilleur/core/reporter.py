"""
Summary reporter - creates Rich renderable objects for a poll run.

Builds the end-of-run panel; printing is left to the orchestrator's
Rich Console.
"""

from typing import List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from veilleur.domain.models import PollSummary


class SummaryReporter:
    """
    Creates Rich renderables from PollSummary objects.

    Does not handle printing itself.
    """

    def create_summary_panel(self, summaries: List[PollSummary], duration: float) -> Panel:
        """
        Create the end-of-run panel.

        Args:
            summaries: One PollSummary per repository
            duration: Total run time in seconds

        Returns:
            Rich Panel with one row per repository
        """
        if not summaries:
            content = Text("\n  No repositories found\n", style="yellow")
            return Panel(
                content,
                title="[bold]Poll Summary[/bold]",
                border_style="white",
                width=67,
            )

        table = Table(expand=True, show_edge=False, box=None)
        table.add_column("Repository", style="bold")
        table.add_column("Tested", justify="right")
        table.add_column("Skipped", justify="right")
        table.add_column("Failed", justify="right")

        for summary in summaries:
            failed = Text(
                ", ".join(summary.failed) if summary.failed else "0",
                style="red" if summary.failed else "green",
            )
            table.add_row(
                summary.repo_path.name,
                str(len(summary.tested)),
                str(len(summary.skipped)),
                failed,
            )

        all_passed = all(summary.success for summary in summaries)
        return Panel(
            table,
            title="[bold]Poll Summary[/bold]",
            subtitle=f"{duration:.2f}s",
            border_style="green" if all_passed else "red",
            width=67,
        )
