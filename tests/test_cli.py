"""Tests for CLI module."""

import pytest
import yaml
from click.testing import CliRunner

from spothost import __version__
from spothost.cli import main


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "log_level": "WARNING",
                "channel": {"room_name": "lobby"},
                "join_code": {"refresh_rate": 0.01},
            }
        )
    )
    return path


class TestCLIHelp:
    """Test CLI help output."""

    def test_cli_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Pair remote controls" in result.output
        assert "simulate" in result.output


class TestVersionCommand:
    def test_version(self, runner):
        result = runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert f"spothost version {__version__}" in result.output


class TestConfigCommand:
    def test_shows_effective_config(self, runner, config_file):
        result = runner.invoke(main, ["--config", str(config_file), "config"])

        assert result.exit_code == 0
        shown = yaml.safe_load(result.output)
        assert shown["channel"]["room_name"] == "lobby"
        assert shown["join_code"]["refresh_rate"] == 0.01

    def test_invalid_config_reported(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"join_code": {"refresh_rate": -1}}))

        result = runner.invoke(main, ["--config", str(path), "config"])

        assert result.exit_code != 0
        assert "refresh_rate" in result.output


class TestSimulateCommand:
    def test_prints_rotations(self, runner, config_file):
        """Simulation prints the requested number of join codes."""
        result = runner.invoke(
            main, ["--config", str(config_file), "simulate", "--rotations", "3"]
        )

        assert result.exit_code == 0, result.output
        lines = [l for l in result.output.splitlines() if l.startswith("Join code")]
        assert len(lines) == 3
        assert all(" lobby" in line for line in lines)

    def test_interval_overrides_config(self, runner, tmp_path):
        """--interval works even when the config disables rotation."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"join_code": {"refresh_rate": None}}))

        result = runner.invoke(
            main,
            ["--config", str(path), "simulate", "-n", "1", "--interval", "0.01"],
        )

        assert result.exit_code == 0, result.output
        assert "Join code 1/1: spot" in result.output

    def test_rotation_disabled(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"join_code": {"refresh_rate": None}}))

        result = runner.invoke(main, ["--config", str(path), "simulate"])

        assert result.exit_code != 0
        assert "--interval" in result.output

    def test_qr_output(self, runner, config_file):
        result = runner.invoke(
            main, ["--config", str(config_file), "simulate", "-n", "1", "--qr"]
        )

        assert result.exit_code == 0, result.output
        assert len(result.output.splitlines()) > 10


class TestLoggingOptions:
    def test_verbose_sets_debug(self, runner, config_file):
        """--verbose overrides the configured log level."""
        import logging

        result = runner.invoke(main, ["--config", str(config_file), "--verbose", "version"])

        assert result.exit_code == 0
        assert logging.getLogger("spothost").level == logging.DEBUG

    def test_invalid_log_level_reported(self, runner, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"log_level": "chatty"}))

        result = runner.invoke(main, ["--config", str(path), "version"])

        assert result.exit_code != 0
        assert "Unknown log level" in result.output
