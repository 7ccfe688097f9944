"""
Configuration management for veilleur.

Layered configuration using environment variables, per-repository YAML
files and command-line flags.
Priority: CLI flags > .ci-settings.yaml > environment variables > defaults
"""

from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from veilleur.domain.exceptions import ConfigError

SETTINGS_FILENAME = ".ci-settings.yaml"

# Keys accepted in .ci-settings.yaml and as CLI overrides
OPTION_KEYS = (
    "verbose",
    "dryrun",
    "runalways",
    "mailto",
    "from",
    "testcmd",
    "pull",
    "timeout",
    "notifier",
    "smtp_host",
    "smtp_port",
    "webhook_url",
)


class Options(BaseModel):
    """
    Effective configuration for one repository.

    Built once per repository by load_options() and never mutated.
    The YAML/CLI key ``from`` maps to the ``sender`` attribute.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    verbose: bool = False
    dryrun: bool = False
    runalways: bool = False
    mailto: str = "%a,%c"
    sender: str = Field(default="ci@example.com", alias="from")
    testcmd: str = "bundle exec rake"
    pull: bool = False
    timeout: Optional[float] = Field(default=None, gt=0)
    notifier: Literal["email", "webhook", "log"] = "email"
    smtp_host: str = "localhost"
    smtp_port: int = Field(default=25, ge=1, le=65535)
    webhook_url: Optional[str] = None

    @field_validator("mailto", "testcmd", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v: Any) -> Any:
        """A bare ``mailto:`` key in YAML means no recipients."""
        return "" if v is None else v

    @field_validator("testcmd")
    @classmethod
    def validate_testcmd(cls, v: str) -> str:
        """Require at least one non-blank command line."""
        if not any(line.strip() for line in v.split("\n")):
            raise ValueError("testcmd must contain at least one command")
        return v

    @model_validator(mode="after")
    def validate_webhook(self) -> "Options":
        """The webhook sink needs a URL."""
        if self.notifier == "webhook" and not self.webhook_url:
            raise ValueError("notifier 'webhook' requires webhook_url")
        return self

    def command_lines(self):
        """Non-blank lines of testcmd, in order."""
        return [line for line in self.testcmd.split("\n") if line.strip()]


class PollerSettings(BaseSettings):
    """
    Process-wide defaults read from the environment.

    Every option can be set with a VEILLEUR_ prefixed variable,
    e.g. VEILLEUR_FROM or VEILLEUR_TESTCMD.
    """

    model_config = SettingsConfigDict(
        env_prefix="VEILLEUR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    verbose: Optional[bool] = None
    dryrun: Optional[bool] = None
    runalways: Optional[bool] = None
    mailto: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="VEILLEUR_FROM")
    testcmd: Optional[str] = None
    pull: Optional[bool] = None
    timeout: Optional[float] = None
    notifier: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    webhook_url: Optional[str] = None

    def as_overrides(self) -> Dict[str, Any]:
        """Return only the values that were actually set."""
        values = self.model_dump(exclude_none=True)
        if "from_" in values:
            values["from"] = values.pop("from_")
        return values


def load_environment(env_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load environment defaults.

    Args:
        env_file: Optional .env file to load before reading the environment

    Returns:
        Dict of option values set through VEILLEUR_* variables
    """
    if env_file is not None and env_file.exists():
        load_dotenv(env_file, override=False)
    try:
        return PollerSettings().as_overrides()
    except ValidationError as e:
        raise ConfigError(f"Invalid VEILLEUR_* environment: {e}") from e


def load_repo_settings(repo_path: Path) -> Dict[str, Any]:
    """
    Read <repo>/.ci-settings.yaml.

    Args:
        repo_path: Repository working tree

    Returns:
        Mapping of recognised keys (empty if the file is absent or empty)

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    settings_path = Path(repo_path) / SETTINGS_FILENAME
    if not settings_path.exists():
        return {}

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{settings_path} must contain a mapping")

    return {str(key): value for key, value in loaded.items()}


def load_options(
    repo_path: Path,
    overrides: Optional[Mapping[str, Any]] = None,
    environment: Optional[Mapping[str, Any]] = None,
) -> Options:
    """
    Merge all configuration layers for one repository.

    Args:
        repo_path: Repository working tree
        overrides: CLI flags (highest priority)
        environment: Values from load_environment() (defaults to reading it)

    Returns:
        Frozen Options instance

    Raises:
        ConfigError: If a value fails validation
    """
    merged: Dict[str, Any] = {}
    merged.update(load_environment() if environment is None else environment)

    for key, value in load_repo_settings(repo_path).items():
        if key in OPTION_KEYS:
            merged[key] = value

    merged.update(overrides or {})

    try:
        return Options.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings for {repo_path}: {e}") from e


def unknown_keys(repo_path: Path) -> List[str]:
    """List keys of .ci-settings.yaml that load_options() ignores."""
    return sorted(k for k in load_repo_settings(repo_path) if k not in OPTION_KEYS)
