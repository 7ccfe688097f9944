"""
Notification and configuration exceptions.
"""

from veilleur.domain.exceptions.command_exceptions import VeilleurError


class NotificationError(VeilleurError):
    """Raised when a failure report could not be delivered."""

    def __init__(self, sink: str, reason: str):
        """
        Initialize NotificationError.

        Args:
            sink: Name of the notification sink (email, webhook, log)
            reason: Transport error description
        """
        super().__init__(f"Unable to send notification via {sink}: {reason}")
        self.sink = sink
        self.reason = reason


class ConfigError(VeilleurError):
    """Raised when repository settings are invalid."""

    pass
