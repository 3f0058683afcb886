"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the battle UI and the
engine. Engine objects are converted with the `from_*` constructors.

Error Codes:
- MATCH_NOT_FOUND: No live match with that id
- INVALID_ACTION: Action id is not in the catalog
- MATCHMAKING_IN_PROGRESS: A matchmaking request is already outstanding
- MATCHMAKING_CANCELLED: The request was cancelled before a match was found
- MATCHMAKING_TIMEOUT: No match was found in time
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.action import ActionResult
from ..engine_core.catalog import ActionDef
from ..engine_core.state import LogEntry, Match, PlayerProfile, PlayerState, Role


# =============================================================================
# Enums
# =============================================================================

class RoleName(str, Enum):
    """Faction values."""
    ATTACKER = "attacker"
    DEFENDER = "defender"

    def to_role(self) -> Role:
        return Role(self.value)


class MatchStatusName(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


class ErrorCode(str, Enum):
    """Structured error codes."""
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    MATCHMAKING_IN_PROGRESS = "MATCHMAKING_IN_PROGRESS"
    MATCHMAKING_CANCELLED = "MATCHMAKING_CANCELLED"
    MATCHMAKING_TIMEOUT = "MATCHMAKING_TIMEOUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ActionInfo(BaseModel):
    """Catalog entry for display."""
    id: str
    name: str
    description: str
    cost: int = Field(ge=0)
    damage: int = Field(description="Positive hits the opponent, negative heals self")
    defense: int = Field(ge=0, description="Integrity restored to self")
    role: RoleName

    @classmethod
    def from_action(cls, action: ActionDef) -> "ActionInfo":
        return cls(
            id=action.id,
            name=action.name,
            description=action.description,
            cost=action.cost,
            damage=action.damage,
            defense=action.defense,
            role=RoleName(action.role.value),
        )


class ProfileInfo(BaseModel):
    """Player identity. Everything but username and role is cosmetic."""
    username: str = Field(..., min_length=1)
    role: RoleName
    avatar_url: str = ""
    level: int = Field(1, ge=0)
    xp: int = Field(0, ge=0)
    xp_to_next_level: int = Field(1000, ge=0)

    def to_profile(self) -> PlayerProfile:
        return PlayerProfile(
            username=self.username,
            role=self.role.to_role(),
            avatar_url=self.avatar_url,
            level=self.level,
            xp=self.xp,
            xp_to_next_level=self.xp_to_next_level,
        )

    @classmethod
    def from_profile(cls, profile: PlayerProfile) -> "ProfileInfo":
        return cls(
            username=profile.username,
            role=RoleName(profile.role.value),
            avatar_url=profile.avatar_url,
            level=profile.level,
            xp=profile.xp,
            xp_to_next_level=profile.xp_to_next_level,
        )


class PlayerInfo(BaseModel):
    """A player panel: identity plus integrity and energy bars."""
    profile: ProfileInfo
    system_integrity: int = Field(ge=0, le=100)
    energy: int = Field(ge=0)
    max_energy: int
    is_human: bool
    is_current_turn: bool = False

    @classmethod
    def from_player(cls, player: PlayerState, current_turn: Optional[str] = None) -> "PlayerInfo":
        return cls(
            profile=ProfileInfo.from_profile(player.profile),
            system_integrity=player.system_integrity,
            energy=player.energy,
            max_energy=player.max_energy,
            is_human=player.is_human,
            is_current_turn=player.username == current_turn,
        )


class LogEntryInfo(BaseModel):
    id: str
    turn: int
    text: str
    timestamp: float

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntryInfo":
        return cls(id=entry.entry_id, turn=entry.turn, text=entry.text, timestamp=entry.timestamp)


# =============================================================================
# Request Models
# =============================================================================

class StartMatchmakingRequest(BaseModel):
    """Request to find a match for a player."""
    profile: ProfileInfo


class SubmitActionRequest(BaseModel):
    """Request to play an action."""
    username: str = Field(..., description="Player submitting the action")
    action_id: str = Field(..., description="Catalog action id")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class MatchResponse(BaseModel):
    """Full match snapshot."""
    id: str
    players: list[PlayerInfo]
    current_turn: str
    turn_number: int
    log: list[LogEntryInfo] = Field(default_factory=list)
    status: MatchStatusName
    winner: Optional[str] = None

    @classmethod
    def from_match(cls, match: Match) -> "MatchResponse":
        return cls(
            id=match.match_id,
            players=[PlayerInfo.from_player(p, match.current_turn) for p in match.players],
            current_turn=match.current_turn,
            turn_number=match.turn_number,
            log=[LogEntryInfo.from_entry(e) for e in match.log],
            status=MatchStatusName(match.status.value),
            winner=match.winner,
        )


class SubmitActionResponse(BaseModel):
    """Outcome of a submission. Rejections are not HTTP errors."""
    success: bool
    reason: Optional[str] = Field(None, description="Rejection reason when success is false")
    message: str = ""
    log: list[LogEntryInfo] = Field(default_factory=list)
    winner: Optional[str] = None
    match: Optional[MatchResponse] = None

    @classmethod
    def from_result(cls, result: ActionResult, match: Optional[Match] = None) -> "SubmitActionResponse":
        return cls(
            success=result.success,
            reason=result.reason.value if result.reason else None,
            message=result.message,
            log=[LogEntryInfo.from_entry(e) for e in result.log_entries],
            winner=result.winner,
            match=MatchResponse.from_match(match) if match else None,
        )


class ActionListResponse(BaseModel):
    actions: list[ActionInfo]
    count: int


class MatchmakingStatusResponse(BaseModel):
    searching: bool
    cancelled: bool = False


class LobbyResponse(BaseModel):
    """Response from returning to the lobby."""
    success: bool
    match_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    env: str
