"""
Tests for CLI argument parser and exit code mapping.
"""

from unittest.mock import patch

import pytest
import responses

from tgenv.cli.parser import CLI
from tgenv.core.exceptions import (
    MinRequiredError,
    NoMatchingVersionError,
    VerificationError,
)
from tgenv.versions.pipeline import InstallResult

INSTALL_PIPELINE = "tgenv.cli.commands.install.InstallPipeline"


@pytest.fixture
def cli(settings):
    return CLI(settings=settings)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_no_command_shows_help(self, cli, capsys):
        """Test that running without command shows help."""
        result = cli.run([])

        assert result == 1
        assert "usage:" in capsys.readouterr().out.lower()

    def test_version_flag(self, cli, capsys):
        """Test --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        assert "tgenv" in capsys.readouterr().out

    def test_unknown_command_is_argparse_error(self, cli):
        with pytest.raises(SystemExit) as exc_info:
            cli.run(["frobnicate"])

        assert exc_info.value.code == 2

    def test_invalid_environment(self, capsys, monkeypatch):
        """Test that a malformed TGENV_HTTP_TIMEOUT is reported."""
        monkeypatch.setenv("TGENV_HTTP_TIMEOUT", "soon")

        result = CLI().run(["list"])

        assert result == 1
        assert "ERROR:" in capsys.readouterr().err


class TestArgumentParsing:
    """Test subcommand parsing."""

    def test_install_without_version(self, cli):
        args = cli.parse_args(["install"])

        assert args.command == "install"
        assert args.version == []

    def test_install_with_version(self, cli):
        args = cli.parse_args(["install", "latest:^0\\.5"])

        assert args.version == ["latest:^0\\.5"]

    def test_use_requires_version(self, cli):
        with pytest.raises(SystemExit):
            cli.parse_args(["use"])

    @pytest.mark.parametrize("command", ["list", "list-remote", "version-name"])
    def test_commands_without_arguments(self, cli, command):
        assert cli.parse_args([command]).command == command


class TestExitCodes:
    """Test mapping of failures to exit codes."""

    def test_install_two_arguments_is_usage_error(self, cli, settings, capsys):
        """Test that extra arguments fail before any network access."""
        with responses.RequestsMock() as rsps:
            result = cli.run(["install", "1.0.0", "1.1.0"])

            assert len(rsps.calls) == 0

        assert result == 2
        assert "usage: tgenv install" in capsys.readouterr().err
        assert not settings.root.exists()

    def test_resolution_failure(self, cli, capsys):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.side_effect = NoMatchingVersionError("9.9.9")
            result = cli.run(["install", "9.9.9"])

        assert result == 1
        assert "No versions matching '9.9.9'" in capsys.readouterr().err

    def test_min_required_failure(self, cli):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.side_effect = MinRequiredError(
                "min-required is currently not supported here"
            )
            result = cli.run(["install", "min-required"])

        assert result == 3

    def test_verification_failure(self, cli, capsys):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.side_effect = VerificationError(
                "SHA256 hash does not match for terragrunt_linux_amd64"
            )
            result = cli.run(["install", "1.0.0"])

        assert result == 1
        assert "SHA256 hash does not match" in capsys.readouterr().err

    def test_keyboard_interrupt(self, cli):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.side_effect = KeyboardInterrupt
            result = cli.run(["install", "1.0.0"])

        assert result == 130

    def test_unexpected_error(self, cli):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.side_effect = RuntimeError("boom")
            result = cli.run(["install", "1.0.0"])

        assert result == 1

    def test_install_success(self, cli, settings, capsys):
        with patch(INSTALL_PIPELINE) as mock_pipeline:
            mock_pipeline.return_value.run.return_value = InstallResult(
                version="1.0.0",
                path=settings.versions_dir / "1.0.0" / "terragrunt",
                was_installed=False,
            )
            result = cli.run(["install", "1.0.0"])

        assert result == 0
        mock_pipeline.return_value.run.assert_called_once_with("1.0.0")
        assert "tgenv use 1.0.0" in capsys.readouterr().out
