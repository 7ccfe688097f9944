"""Emoji definitions for system reporting."""

from shared.reporter.emojis.base_emojis import ComponentEmoji
from shared.reporter.emojis.veilleur_emojis import SystemEmoji, VeilleurEmoji

__all__ = [
    "ComponentEmoji",
    "SystemEmoji",
    "VeilleurEmoji",
]
