"""
Session Module - The live match and everything that touches it.

A match lives in the MatchStore:
- Installed by the lifecycle manager after matchmaking
- Mutated only through the ActionResolver
- Pushed to subscribers by the UpdateNotifier
- Played for the non-human side by the OpponentDriver
- Discarded when the player returns to the lobby

Nothing is persisted.
"""

from .store import MatchStore
from .notifier import UpdateNotifier, Subscription, UpdateCallback
from .resolver import ActionResolver
from .manager import MatchLifecycleManager, fabricate_opponent
from .driver import OpponentDriver
from .game_loop import GameLoop, LoopResult

__all__ = [
    "MatchStore",
    "UpdateNotifier",
    "Subscription",
    "UpdateCallback",
    "ActionResolver",
    "MatchLifecycleManager",
    "fabricate_opponent",
    "OpponentDriver",
    "GameLoop",
    "LoopResult",
]
