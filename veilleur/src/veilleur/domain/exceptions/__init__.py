"""
Domain exceptions for veilleur.
"""

from veilleur.domain.exceptions.command_exceptions import (
    CommandFailureError,
    GitCommandError,
    VeilleurError,
)
from veilleur.domain.exceptions.notification_exceptions import (
    ConfigError,
    NotificationError,
)

__all__ = [
    "VeilleurError",
    "CommandFailureError",
    "GitCommandError",
    "NotificationError",
    "ConfigError",
]
