"""
Tests for environment configuration and the CLI.
"""

import sys

import pytest

from ..cli import main
from ..config import Settings
from ..errors import ConfigError


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in (
            "CYBERDUEL_MATCHMAKING_DELAY",
            "CYBERDUEL_MATCHMAKING_TIMEOUT",
            "CYBERDUEL_OPPONENT_INTERVAL",
            "CYBERDUEL_OPPONENT_SEED",
            "ALLOWED_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.matchmaking_delay == 2.5
        assert settings.matchmaking_timeout is None
        assert settings.opponent_interval == 4.0
        assert settings.opponent_seed is None
        assert settings.allowed_origins == ["*"]

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CYBERDUEL_MATCHMAKING_DELAY", "0.5")
        monkeypatch.setenv("CYBERDUEL_MATCHMAKING_TIMEOUT", "10")
        monkeypatch.setenv("CYBERDUEL_OPPONENT_SEED", "42")
        monkeypatch.setenv("CYBERDUEL_LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000,https://dash.example")

        settings = Settings.from_env()

        assert settings.matchmaking_delay == 0.5
        assert settings.matchmaking_timeout == 10.0
        assert settings.opponent_seed == 42
        assert settings.log_level == "DEBUG"
        assert settings.allowed_origins == ["http://localhost:3000", "https://dash.example"]

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("CYBERDUEL_OPPONENT_INTERVAL", "soon")
        with pytest.raises(ConfigError, match="CYBERDUEL_OPPONENT_INTERVAL"):
            Settings.from_env()

    def test_negative_delay(self, monkeypatch):
        monkeypatch.setenv("CYBERDUEL_MATCHMAKING_DELAY", "-1")
        with pytest.raises(ConfigError):
            Settings.from_env()


class TestCLI:

    def test_actions_command(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["cyberduel", "actions", "--role", "defender"])
        main()
        out = capsys.readouterr().out
        assert "honeypot_deploy" in out
        assert "phishing_email" not in out

    def test_no_command_prints_help(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["cyberduel"])
        with pytest.raises(SystemExit):
            main()
