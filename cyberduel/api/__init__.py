"""
API Module - Battle UI interface.

Exposes the engine to the dashboard:
1. Lobby starts / cancels matchmaking
2. Battle view streams snapshots and submits actions
3. Results view returns to the lobby

All state is in-memory. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    StartMatchmakingRequest,
    SubmitActionRequest,
    # Responses
    MatchResponse,
    SubmitActionResponse,
    ActionListResponse,
    ErrorResponse,
    # Shared
    ActionInfo,
    ProfileInfo,
    PlayerInfo,
    LogEntryInfo,
)
from .service import PvpService
from .app import create_app

__all__ = [
    # Requests
    "StartMatchmakingRequest",
    "SubmitActionRequest",
    # Responses
    "MatchResponse",
    "SubmitActionResponse",
    "ActionListResponse",
    "ErrorResponse",
    # Shared
    "ActionInfo",
    "ProfileInfo",
    "PlayerInfo",
    "LogEntryInfo",
    # Service
    "PvpService",
    "create_app",
]
