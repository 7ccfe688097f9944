"""
Notification sinks - transports for failure reports.

Sinks only deliver; composing the message and handling delivery
failures is the Notifier's job.
"""

import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Optional

import httpx
from shared.reporter.emojis import VeilleurEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur.config.settings import Options
from veilleur.domain.models import FailureReport


class NotificationSink(ABC):
    """Delivers a FailureReport somewhere."""

    name: str = "sink"

    @abstractmethod
    def send(self, report: FailureReport) -> None:
        """
        Deliver a report.

        Raises:
            Exception: Any transport error; the caller reports it
        """


class EmailSink(NotificationSink):
    """Sends reports through an SMTP relay without authentication."""

    name = "email"

    def __init__(self, host: str = "localhost", port: int = 25, timeout: float = 30):
        self.host = host
        self.port = port
        self.timeout = timeout

    def build_message(self, report: FailureReport) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = report.subject
        message["From"] = report.sender
        message["To"] = ", ".join(report.recipients)
        message.set_content(report.body)
        return message

    def send(self, report: FailureReport) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.send_message(
                self.build_message(report),
                from_addr=report.sender,
                to_addrs=list(report.recipients),
            )


class WebhookSink(NotificationSink):
    """Posts reports as JSON to an HTTP endpoint."""

    name = "webhook"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.client = client

    def send(self, report: FailureReport) -> None:
        payload = {
            "subject": report.subject,
            "from": report.sender,
            "recipients": list(report.recipients),
            "body": report.body,
        }

        if self.client is not None:
            response = self.client.post(self.url, json=payload, timeout=self.timeout)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json=payload)

        response.raise_for_status()


class LogSink(NotificationSink):
    """Writes reports to the log instead of sending them."""

    name = "log"

    def __init__(self, reporter: SystemReporter):
        self.reporter = reporter

    def send(self, report: FailureReport) -> None:
        self.reporter.warning(
            f"{VeilleurEmoji.TEST_FAIL} {report.subject} "
            f"(to: {', '.join(report.recipients)})",
            context="LogSink",
        )
        for line in report.body.splitlines():
            self.reporter.warning(line, context="LogSink")


def build_sink(options: Options, reporter: SystemReporter) -> NotificationSink:
    """
    Create the sink selected by options.notifier.

    Args:
        options: Effective repository options
        reporter: Reporter for the log sink

    Returns:
        NotificationSink instance
    """
    if options.notifier == "webhook":
        return WebhookSink(options.webhook_url)
    if options.notifier == "log":
        return LogSink(reporter)
    return EmailSink(options.smtp_host, options.smtp_port)
