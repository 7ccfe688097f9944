"""Configuration loading for veilleur."""

from veilleur.config.settings import (
    Options,
    PollerSettings,
    load_environment,
    load_options,
    load_repo_settings,
)

__all__ = [
    "Options",
    "PollerSettings",
    "load_environment",
    "load_options",
    "load_repo_settings",
]
