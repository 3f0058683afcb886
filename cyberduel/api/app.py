"""
FastAPI Application - HTTP/WebSocket API for the battle UI.

Endpoints:
    GET    /api/v1/health                   Liveness and version
    GET    /api/v1/actions                  Action catalog (optionally by role)
    POST   /api/v1/matchmaking              Find a match (waits for the matchmaking delay)
    DELETE /api/v1/matchmaking              Cancel the outstanding matchmaking request
    GET    /api/v1/matches/current          Snapshot of the live match
    GET    /api/v1/matches/{id}             Snapshot of a match by id
    POST   /api/v1/matches/{id}/actions     Submit an action
    DELETE /api/v1/matches/{id}             Return to lobby (discard the match)
    WS     /api/v1/matches/{id}/ws          Live snapshots + autonomous opponent

WebSocket Flow:
    1. Client connects; the current snapshot is sent immediately
    2. The opponent driver runs for as long as the socket is open
    3. Every change to the match is pushed as {"type": "match", "match": ...}
    4. Clients may also submit actions over the socket with
       {"username": ..., "action_id": ...}; the reply is
       {"type": "action_result", ...}

Rejected actions (wrong turn, not enough energy, ...) are NOT errors:
they return 200 with success=false and a reason.
"""

from typing import Optional, Union
import asyncio
import logging

from .. import __version__
from ..config import Settings
from ..errors import (
    InvalidActionError,
    MatchmakingCancelledError,
    MatchmakingInProgressError,
    MatchmakingTimeoutError,
)


logger = logging.getLogger(__name__)


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional PvpService instance (creates new if not provided)
        settings: Optional Settings (loaded from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
        from pydantic import ValidationError
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import PvpService
    from .schemas import (
        # Request models
        StartMatchmakingRequest,
        SubmitActionRequest,
        # Response models
        ActionInfo,
        ActionListResponse,
        ErrorResponse,
        HealthResponse,
        LobbyResponse,
        MatchmakingStatusResponse,
        MatchResponse,
        SubmitActionResponse,
        # Enums
        ErrorCode,
        RoleName,
    )

    settings = settings or (service.settings if service else Settings.from_env())
    pvp_service = service or PvpService(settings=settings)

    app = FastAPI(
        title="CyberDuel PVP API",
        description="""
Turn-based attacker vs defender battles for the security dashboard.

## Match Flow

1. `POST /matchmaking` with your profile; an opponent of the other role
   is found after a short delay
2. Open `WS /matches/{id}/ws` to receive live snapshots; the opponent
   plays automatically while the socket is open
3. `POST /matches/{id}/actions` on your turn
4. When `status` is `finished`, `DELETE /matches/{id}` to return to the lobby

## Error Codes

| Code | Description |
|------|-------------|
| `MATCH_NOT_FOUND` | No live match with that id |
| `INVALID_ACTION` | Action id is not in the catalog |
| `MATCHMAKING_IN_PROGRESS` | A matchmaking request is already outstanding |
| `MATCHMAKING_CANCELLED` | Matchmaking was cancelled |
| `MATCHMAKING_TIMEOUT` | No match found in time |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = pvp_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def match_not_found(match_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.MATCH_NOT_FOUND,
            f"No live match with id {match_id}",
            status_code=404,
            details={"match_id": match_id},
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, env=settings.env)

    @app.get(
        "/api/v1/actions",
        response_model=ActionListResponse,
        tags=["Catalog"],
        summary="List catalog actions",
    )
    async def list_actions(
        role: Optional[RoleName] = Query(None, description="Only actions of this role"),
    ) -> ActionListResponse:
        if role is None:
            actions = list(pvp_service.catalog)
        else:
            actions = pvp_service.actions_for(role.to_role())
        return ActionListResponse(
            actions=[ActionInfo.from_action(a) for a in actions],
            count=len(actions),
        )

    # =========================================================================
    # Matchmaking
    # =========================================================================

    @app.post(
        "/api/v1/matchmaking",
        response_model=MatchResponse,
        responses={
            409: {"model": ErrorResponse, "description": "In progress or cancelled"},
            504: {"model": ErrorResponse, "description": "Matchmaking timed out"},
        },
        tags=["Matchmaking"],
        summary="Find a match",
    )
    async def start_matchmaking(
        request: StartMatchmakingRequest,
    ) -> Union[MatchResponse, JSONResponse]:
        """
        Find an opponent for the given profile.

        Completes after the configured matchmaking delay. The requesting
        player acts first.
        """
        try:
            match = await pvp_service.start_matchmaking(request.profile.to_profile())
        except MatchmakingInProgressError as e:
            return make_error_response(ErrorCode.MATCHMAKING_IN_PROGRESS, str(e), status_code=409)
        except MatchmakingCancelledError as e:
            return make_error_response(ErrorCode.MATCHMAKING_CANCELLED, str(e), status_code=409)
        except MatchmakingTimeoutError as e:
            return make_error_response(ErrorCode.MATCHMAKING_TIMEOUT, str(e), status_code=504)
        return MatchResponse.from_match(match)

    @app.delete(
        "/api/v1/matchmaking",
        response_model=MatchmakingStatusResponse,
        tags=["Matchmaking"],
        summary="Cancel matchmaking",
    )
    async def cancel_matchmaking() -> MatchmakingStatusResponse:
        cancelled = pvp_service.cancel_matchmaking()
        return MatchmakingStatusResponse(searching=pvp_service.is_searching, cancelled=cancelled)

    @app.get(
        "/api/v1/matchmaking",
        response_model=MatchmakingStatusResponse,
        tags=["Matchmaking"],
        summary="Matchmaking status",
    )
    async def matchmaking_status() -> MatchmakingStatusResponse:
        return MatchmakingStatusResponse(searching=pvp_service.is_searching)

    # =========================================================================
    # Matches
    # =========================================================================

    @app.get(
        "/api/v1/matches/current",
        response_model=MatchResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get the live match",
    )
    async def get_current_match() -> Union[MatchResponse, JSONResponse]:
        match = pvp_service.current_match()
        if match is None:
            return make_error_response(
                ErrorCode.MATCH_NOT_FOUND, "No live match", status_code=404
            )
        return MatchResponse.from_match(match)

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get a match snapshot",
    )
    async def get_match(match_id: str) -> Union[MatchResponse, JSONResponse]:
        match = pvp_service.get_match(match_id)
        if match is None:
            return match_not_found(match_id)
        return MatchResponse.from_match(match)

    @app.post(
        "/api/v1/matches/{match_id}/actions",
        response_model=SubmitActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unknown action id"},
        },
        tags=["Matches"],
        summary="Submit an action",
    )
    async def submit_action(
        match_id: str,
        request: SubmitActionRequest,
    ) -> Union[SubmitActionResponse, JSONResponse]:
        """
        Play an action for a player.

        Check `success`; a rejected action carries a `reason`
        (`not_your_turn`, `insufficient_energy`, ...).
        """
        try:
            result = await pvp_service.submit_action(match_id, request.username, request.action_id)
        except InvalidActionError as e:
            return make_error_response(
                ErrorCode.INVALID_ACTION,
                str(e),
                details={"action_id": e.action_id},
            )
        return SubmitActionResponse.from_result(result, pvp_service.get_match(match_id))

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=LobbyResponse,
        tags=["Matches"],
        summary="Return to lobby",
    )
    async def return_to_lobby(match_id: str) -> LobbyResponse:
        """Discard the match. Safe to call more than once."""
        success = pvp_service.return_to_lobby(match_id)
        return LobbyResponse(success=success, match_id=match_id)

    # =========================================================================
    # WebSocket
    # =========================================================================

    @app.websocket("/api/v1/matches/{match_id}/ws")
    async def match_stream(websocket: WebSocket, match_id: str):
        """Push match snapshots and run the opponent while connected."""
        await websocket.accept()

        snapshot = pvp_service.get_match(match_id)
        if snapshot is None:
            await websocket.send_json({
                "type": "error",
                **ErrorResponse(
                    error=f"No live match with id {match_id}",
                    error_code=ErrorCode.MATCH_NOT_FOUND,
                ).model_dump(mode="json"),
            })
            await websocket.close(code=4404)
            return

        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(snapshot)
        subscription = pvp_service.subscribe(match_id, queue.put_nowait)

        async def pump():
            while True:
                match = await queue.get()
                await websocket.send_json({
                    "type": "match",
                    "match": MatchResponse.from_match(match).model_dump(mode="json"),
                })

        pump_task = asyncio.ensure_future(pump())
        try:
            while True:
                message = await websocket.receive_json()
                try:
                    request = SubmitActionRequest.model_validate(message)
                except ValidationError as e:
                    await websocket.send_json({
                        "type": "error",
                        "error": "Invalid action message",
                        "error_code": ErrorCode.VALIDATION_ERROR.value,
                        "details": {"errors": e.errors(include_url=False)},
                    })
                    continue
                try:
                    result = await pvp_service.submit_action(
                        match_id, request.username, request.action_id
                    )
                except InvalidActionError as e:
                    await websocket.send_json({
                        "type": "error",
                        "error": str(e),
                        "error_code": ErrorCode.INVALID_ACTION.value,
                    })
                    continue
                await websocket.send_json({
                    "type": "action_result",
                    **SubmitActionResponse.from_result(result).model_dump(mode="json"),
                })
        except WebSocketDisconnect:
            logger.debug("WebSocket for match %s disconnected", match_id)
        finally:
            subscription.cancel()
            pump_task.cancel()

    return app
