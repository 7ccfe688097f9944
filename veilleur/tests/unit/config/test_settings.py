"""
Unit tests for configuration loading.

Tests layer precedence (defaults < env < YAML < CLI), YAML parsing and
validation errors.

Usage:
    pytest veilleur/tests/unit/config/test_settings.py
"""

import pytest
from pydantic import ValidationError

from veilleur.config.settings import (
    Options,
    load_environment,
    load_options,
    load_repo_settings,
    unknown_keys,
)
from veilleur.domain.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from VEILLEUR_* variables and stray .env files."""
    import os

    for key in list(os.environ):
        if key.startswith("VEILLEUR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def _write_settings(repo, text: str) -> None:
    (repo / ".ci-settings.yaml").write_text(text, encoding="utf-8")


class TestOptions:
    """Tests for the Options model."""

    def test_defaults(self):
        """Test built-in defaults."""
        options = Options()

        assert options.verbose is False
        assert options.dryrun is False
        assert options.runalways is False
        assert options.mailto == "%a,%c"
        assert options.sender == "ci@example.com"
        assert options.testcmd == "bundle exec rake"
        assert options.notifier == "email"
        assert options.timeout is None

    def test_frozen(self):
        """Test options cannot be mutated after merge."""
        options = Options()

        with pytest.raises(ValidationError):
            options.dryrun = True

    def test_from_alias(self):
        """Test the 'from' key maps to sender."""
        assert Options.model_validate({"from": "bot@host"}).sender == "bot@host"

    def test_command_lines(self):
        """Test blank lines are dropped from testcmd."""
        options = Options(testcmd="make\n\nmake test\n")

        assert options.command_lines() == ["make", "make test"]

    def test_blank_testcmd_rejected(self):
        """Test a testcmd without commands is invalid."""
        with pytest.raises(ValidationError):
            Options(testcmd="  \n")

    def test_webhook_requires_url(self):
        """Test the webhook notifier needs webhook_url."""
        with pytest.raises(ValidationError):
            Options(notifier="webhook")


class TestRepoSettings:
    """Tests for .ci-settings.yaml reading."""

    def test_missing_file(self, fake_repo):
        """Test a repository without settings yields no overrides."""
        assert load_repo_settings(fake_repo) == {}

    def test_empty_file(self, fake_repo):
        """Test an empty document yields no overrides."""
        _write_settings(fake_repo, "")

        assert load_repo_settings(fake_repo) == {}

    def test_invalid_yaml(self, fake_repo):
        """Test broken YAML raises ConfigError."""
        _write_settings(fake_repo, "testcmd: [unclosed\n")

        with pytest.raises(ConfigError):
            load_repo_settings(fake_repo)

    def test_non_mapping(self, fake_repo):
        """Test a YAML list is rejected."""
        _write_settings(fake_repo, "- make\n- make test\n")

        with pytest.raises(ConfigError):
            load_repo_settings(fake_repo)

    def test_unknown_keys_listed(self, fake_repo):
        """Test unrecognised keys are reported and ignored."""
        _write_settings(fake_repo, "testcmd: make\ncolour: blue\n")

        assert unknown_keys(fake_repo) == ["colour"]
        assert not hasattr(load_options(fake_repo, environment={}), "colour")


class TestLoadOptions:
    """Tests for layer precedence."""

    def test_yaml_overrides_defaults(self, fake_repo):
        """Test repository settings replace defaults."""
        _write_settings(
            fake_repo,
            "testcmd: |\n  make deps\n  make test\nfrom: repo@host\nrunalways: true\n",
        )

        options = load_options(fake_repo, environment={})

        assert options.testcmd == "make deps\nmake test\n"
        assert options.sender == "repo@host"
        assert options.runalways is True

    def test_cli_overrides_yaml(self, fake_repo):
        """Test command-line flags win over repository settings."""
        _write_settings(fake_repo, "mailto: team@host\nfrom: repo@host\n")

        options = load_options(
            fake_repo, {"mailto": "", "from": "cli@host"}, environment={}
        )

        assert options.mailto == ""
        assert options.sender == "cli@host"

    def test_yaml_null_mailto(self, fake_repo):
        """Test an empty mailto key disables mail."""
        _write_settings(fake_repo, "mailto:\n")

        assert load_options(fake_repo, environment={}).mailto == ""

    def test_environment_layer(self, fake_repo, monkeypatch):
        """Test VEILLEUR_* variables sit between defaults and YAML."""
        monkeypatch.setenv("VEILLEUR_FROM", "env@host")
        monkeypatch.setenv("VEILLEUR_TESTCMD", "tox")
        _write_settings(fake_repo, "testcmd: make\n")

        environment = load_environment()
        options = load_options(fake_repo, environment=environment)

        assert environment == {"from": "env@host", "testcmd": "tox"}
        assert options.sender == "env@host"
        assert options.testcmd == "make"

    def test_env_file_loaded(self, tmp_path):
        """Test an explicit .env file feeds the environment layer."""
        env_file = tmp_path / "poller.env"
        env_file.write_text("VEILLEUR_SMTP_HOST=mail.internal\n")

        try:
            assert load_environment(env_file)["smtp_host"] == "mail.internal"
        finally:
            import os

            os.environ.pop("VEILLEUR_SMTP_HOST", None)

    def test_invalid_value(self, fake_repo):
        """Test bad values surface as ConfigError."""
        _write_settings(fake_repo, "smtp_port: not-a-port\n")

        with pytest.raises(ConfigError):
            load_options(fake_repo, environment={})
