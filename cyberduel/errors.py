"""
Errors raised by the engine.

User-input rejections (wrong turn, not enough energy, ...) are NOT errors;
they come back as a rejected ActionResult. Everything here signals either
a programmer mistake or a matchmaking failure.
"""


class CyberDuelError(Exception):
    """Base class for engine errors."""


class InvalidActionError(CyberDuelError, KeyError):
    """An action id is not in the catalog."""

    def __init__(self, action_id: str):
        self.action_id = action_id
        super().__init__(f"Unknown action: {action_id}")

    def __str__(self) -> str:
        return self.args[0]


class MatchmakingError(CyberDuelError):
    """Base class for matchmaking failures."""


class MatchmakingInProgressError(MatchmakingError):
    """A matchmaking request is already outstanding."""


class MatchmakingCancelledError(MatchmakingError):
    """The outstanding matchmaking request was cancelled."""


class MatchmakingTimeoutError(MatchmakingError):
    """Matchmaking did not complete within the configured timeout."""


class ConfigError(CyberDuelError, ValueError):
    """A configuration value could not be parsed."""
