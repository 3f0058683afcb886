"""
Match State - Players, log entries and the match container.

Design principles:
- One Match holds exactly two players for its whole lifetime
- Resource values are clamped after every mutation
- The log is append-only
- Snapshots are deep copies; nothing outside the store holds live state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
import time
import uuid


MAX_INTEGRITY = 100
STARTING_ENERGY = 5
MAX_ENERGY = 10
ENERGY_REGEN = 4


class Role(Enum):
    """The two factions. Each may only use its own actions."""
    ATTACKER = "attacker"
    DEFENDER = "defender"

    @property
    def opponent(self) -> Role:
        return Role.DEFENDER if self is Role.ATTACKER else Role.ATTACKER


class MatchStatus(Enum):
    """High-level match status. ACTIVE -> FINISHED happens exactly once."""
    ACTIVE = "active"
    FINISHED = "finished"


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class PlayerProfile:
    """
    Identity of a player.

    Only username and role matter to the engine; the rest is
    display-only.
    """
    username: str
    role: Role
    avatar_url: str = ""
    level: int = 1
    xp: int = 0
    xp_to_next_level: int = 1000


@dataclass
class PlayerState:
    """Per-match resources of one player."""
    profile: PlayerProfile
    system_integrity: int = MAX_INTEGRITY
    energy: int = STARTING_ENERGY
    max_energy: int = MAX_ENERGY
    is_human: bool = True

    @property
    def username(self) -> str:
        return self.profile.username

    @property
    def role(self) -> Role:
        return self.profile.role

    @property
    def is_compromised(self) -> bool:
        return self.system_integrity <= 0

    def clamp(self):
        """Force integrity and energy back into their ranges."""
        self.system_integrity = clamp(self.system_integrity, 0, MAX_INTEGRITY)
        self.energy = clamp(self.energy, 0, self.max_energy)


@dataclass
class LogEntry:
    """One line of the battle log."""
    entry_id: str
    turn: int
    text: str
    timestamp: float


@dataclass
class Match:
    """
    Complete state of one match.

    All mutation goes through the Reducer; everyone else sees clones.
    """
    match_id: str
    players: list[PlayerState]
    current_turn: str
    turn_number: int = 1
    log: list[LogEntry] = field(default_factory=list)
    status: MatchStatus = MatchStatus.ACTIVE
    winner: str | None = None

    def __post_init__(self):
        if len(self.players) != 2:
            raise ValueError("A match needs exactly two players")
        if self.players[0].username == self.players[1].username:
            raise ValueError("Players in a match must have distinct usernames")
        if self.current_turn not in self.usernames:
            raise ValueError(f"{self.current_turn} is not playing in this match")

    @classmethod
    def create(
        cls,
        first: PlayerState,
        second: PlayerState,
        match_id: str | None = None,
    ) -> Match:
        """Start a match with `first` to act, including the two seed log lines."""
        match = cls(
            match_id=match_id or f"match-{uuid.uuid4().hex[:12]}",
            players=[first, second],
            current_turn=first.username,
        )
        match.add_log(f"Match started between {first.username} and {second.username}!")
        match.add_log(f"{match.current_turn}'s turn.")
        return match

    @property
    def usernames(self) -> tuple[str, str]:
        return (self.players[0].username, self.players[1].username)

    @property
    def is_active(self) -> bool:
        return self.status == MatchStatus.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.status == MatchStatus.FINISHED

    @property
    def current_player(self) -> PlayerState:
        return self.get_player(self.current_turn)

    def get_player(self, username: str) -> PlayerState | None:
        """Get player by username."""
        for p in self.players:
            if p.username == username:
                return p
        return None

    def opponent_of(self, username: str) -> PlayerState | None:
        """Get the other player, or None if username is not in the match."""
        if username not in self.usernames:
            return None
        for p in self.players:
            if p.username != username:
                return p
        return None

    def add_log(self, text: str) -> LogEntry:
        """Append a log entry stamped with the current turn number."""
        entry = LogEntry(
            entry_id=f"log-{uuid.uuid4().hex}",
            turn=self.turn_number,
            text=text,
            timestamp=time.time(),
        )
        self.log.append(entry)
        return entry

    def clone(self) -> Match:
        """Deep copy the match."""
        return deepcopy(self)
