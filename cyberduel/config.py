"""Environment configuration for the CyberDuel engine."""

from __future__ import annotations
import os
from dataclasses import dataclass, field

from .errors import ConfigError


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {raw!r}")
    return value


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    """Engine configuration. Timings are in seconds."""

    matchmaking_delay: float = 2.5
    matchmaking_timeout: float | None = None
    opponent_interval: float = 4.0
    submit_latency: float = 0.0
    opponent_seed: int | None = None
    log_level: str = "INFO"
    env: str = "development"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration from environment variables."""
        return cls(
            matchmaking_delay=_env_float("CYBERDUEL_MATCHMAKING_DELAY", 2.5),
            matchmaking_timeout=_env_float("CYBERDUEL_MATCHMAKING_TIMEOUT", None),
            opponent_interval=_env_float("CYBERDUEL_OPPONENT_INTERVAL", 4.0),
            submit_latency=_env_float("CYBERDUEL_SUBMIT_LATENCY", 0.0),
            opponent_seed=_env_int("CYBERDUEL_OPPONENT_SEED", None),
            log_level=os.getenv("CYBERDUEL_LOG_LEVEL", "INFO").upper(),
            env=os.getenv("CYBERDUEL_ENV", "development"),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )


# Fabricated opponents, keyed by the role they play
OPPONENT_PROFILES = {
    "defender": {"username": "Firewall", "avatar_seed": "firewall"},
    "attacker": {"username": "Nyx", "avatar_seed": "nyx"},
}
OPPONENT_LEVEL = 14
OPPONENT_XP = 100
OPPONENT_XP_TO_NEXT_LEVEL = 1000
AVATAR_URL_TEMPLATE = "https://i.pravatar.cc/150?u={seed}"
