"""
Action Results - Outcome of submitting an action.

A submission either resolves (success) or is rejected with a reason.
Rejections never mutate the match; callers are free to ignore them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .catalog import ActionDef
    from .state import LogEntry


class RejectionReason(Enum):
    """Why a submitted action was not applied."""
    MATCH_NOT_FOUND = "match_not_found"
    MATCH_FINISHED = "match_finished"
    NOT_YOUR_TURN = "not_your_turn"
    ROLE_MISMATCH = "role_mismatch"
    INSUFFICIENT_ENERGY = "insufficient_energy"


@dataclass
class ActionResult:
    """
    Result of submitting an action.

    Contains:
    - Whether the action was applied
    - The rejection reason (if not)
    - Log entries appended by the resolution
    - The winner, if this action ended the match
    """
    success: bool
    reason: RejectionReason | None = None
    message: str = ""
    action: ActionDef | None = None
    log_entries: list[LogEntry] = field(default_factory=list)
    winner: str | None = None

    @property
    def ended_match(self) -> bool:
        return self.winner is not None

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str) -> ActionResult:
        """Create a rejection result."""
        return cls(success=False, reason=reason, message=message)

    @classmethod
    def resolved(
        cls,
        action: ActionDef,
        log_entries: list[LogEntry],
        winner: str | None = None,
    ) -> ActionResult:
        """Create a success result."""
        return cls(
            success=True,
            action=action,
            log_entries=log_entries,
            winner=winner,
            message=log_entries[0].text if log_entries else "",
        )
