"""
Engine Core - Deterministic match state and action resolution.

The engine is the runtime that:
1. Defines the action catalog
2. Holds Match / PlayerState / LogEntry
3. Validates submitted actions
4. Applies them via the reducer
"""

from .state import (
    Match,
    MatchStatus,
    PlayerProfile,
    PlayerState,
    LogEntry,
    Role,
    MAX_INTEGRITY,
    STARTING_ENERGY,
    MAX_ENERGY,
    ENERGY_REGEN,
)
from .action import ActionResult, RejectionReason
from .catalog import ActionCatalog, ActionDef, DEFAULT_CATALOG
from .reducer import Reducer, apply_action

__all__ = [
    "Match",
    "MatchStatus",
    "PlayerProfile",
    "PlayerState",
    "LogEntry",
    "Role",
    "MAX_INTEGRITY",
    "STARTING_ENERGY",
    "MAX_ENERGY",
    "ENERGY_REGEN",
    "ActionResult",
    "RejectionReason",
    "ActionCatalog",
    "ActionDef",
    "DEFAULT_CATALOG",
    "Reducer",
    "apply_action",
]
