"""
FastAPI Application - REST API for the influence contest.

Endpoints:
    POST   /api/v1/games                              Create a game
    GET    /api/v1/games                              List active games
    GET    /api/v1/games/{id}/state?viewer=...        Get the state for one player
    GET    /api/v1/games/{id}/moves                   Legal moves of the active player
    POST   /api/v1/games/{id}/initial-influence       Initial face-down placement
    POST   /api/v1/games/{id}/play                    Play a card
    POST   /api/v1/games/{id}/skip                    Skip the second card
    POST   /api/v1/games/{id}/vote                    Vote of Confidence
    POST   /api/v1/games/{id}/draw                    Draw to the hand limit, end the turn
    POST   /api/v1/games/{id}/veto                    Out-of-turn Veto
    POST   /api/v1/games/{id}/reset                   Fresh game under the same id
    DELETE /api/v1/games/{id}                         End the game

Rejected calls return ErrorResponse JSON:
    400 MALFORMED_INPUT / VALIDATION_ERROR
    404 NOT_FOUND / SESSION_NOT_FOUND
    409 ILLEGAL_STATE

All request and response bodies are JSON with explicit Pydantic schemas.
"""

import logging
from typing import Annotated, Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import ALLOWED_ORIGINS, SENATUS_ENV, SENATUS_SEED
from ..engine_core.errors import GameError
from ..session import SessionManager
from .schemas import (
    # Request models
    CreateGameRequest,
    InitialPlacementRequest,
    PlayCardRequest,
    PlayerRequest,
    VoteRequest,
    DrawRequest,
    VetoRequest,
    # Response models
    GameCreatedResponse,
    GameStateResponse,
    GameListResponse,
    LegalMovesResponse,
    MoveResponse,
    EndGameResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from .service import GameService

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE = {
    ErrorCode.ILLEGAL_STATE: 409,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.MALFORMED_INPUT: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed input"},
    404: {"model": ErrorResponse, "description": "Game or card not found"},
    409: {"model": ErrorResponse, "description": "Not allowed in the current state"},
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Senatus Engine API",
        description="""
Two-player Patrician influence contest.

## Turn Flow

1. Both players place initial influence (`POST /initial-influence`)
2. On each turn the active player plays one or two cards (`POST /play`),
   optionally skipping the second (`POST /skip`)
3. The active player calls a Vote of Confidence (`POST /vote`)
4. The active player draws to the hand limit (`POST /draw`); the turn passes

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `ILLEGAL_STATE` | 409 | Wrong mode, phase or player, or a per-turn limit reached |
| `NOT_FOUND` | 404 | Card not in hand, or played-card index out of range |
| `MALFORMED_INPUT` | 400 | Unknown player, group or card name |
| `SESSION_NOT_FOUND` | 404 | Game does not exist |
        """,
        version=__version__,
        docs_url=None if SENATUS_ENV == "production" else "/api/docs",
        redoc_url=None if SENATUS_ENV == "production" else "/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    game_service = service or GameService(session_manager=SessionManager(default_seed=SENATUS_SEED))

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

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
        try:
            error_code = ErrorCode(exc.error_code)
        except ValueError:
            error_code = ErrorCode.INTERNAL_ERROR
        status_code = STATUS_BY_ERROR_CODE[error_code]
        logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc.message)
        return make_error_response(error_code, exc.message, status_code=status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request body failed validation",
            status_code=400,
            details={"errors": [str(error.get("msg")) for error in exc.errors()]},
        )

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameCreatedResponse,
        status_code=201,
        responses={400: ERROR_RESPONSES[400]},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(body: Optional[CreateGameRequest] = None) -> GameCreatedResponse:
        """
        Create a new game in initial placement mode.

        Pass a `seed` for reproducible deck order.
        """
        seed = body.seed if body else None
        return game_service.create_game(seed=seed)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> GameListResponse:
        games = game_service.list_games()
        return GameListResponse(games=games, count=len(games))

    @app.get(
        "/api/v1/games/{game_id}/state",
        response_model=GameStateResponse,
        responses=ERROR_RESPONSES,
        tags=["Games"],
        summary="Get the game state for one player",
    )
    async def get_state(
        game_id: str,
        viewer: Annotated[Optional[str], Query(description="caesar or cleopatra")] = None,
    ) -> GameStateResponse:
        """
        Get the game state as seen by `viewer` (default: the active player).

        The opponent's hand is reported by size only.
        """
        return game_service.get_state(game_id, viewer)

    @app.get(
        "/api/v1/games/{game_id}/moves",
        response_model=LegalMovesResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Games"],
        summary="List the active player's legal moves",
    )
    async def get_legal_moves(game_id: str) -> LegalMovesResponse:
        return game_service.get_legal_moves(game_id)

    @app.post(
        "/api/v1/games/{game_id}/reset",
        response_model=GameCreatedResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Games"],
        summary="Start a fresh game under the same id",
    )
    async def reset_game(game_id: str, body: Optional[CreateGameRequest] = None) -> GameCreatedResponse:
        return game_service.reset_game(game_id, seed=body.seed if body else None)

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        success = game_service.end_game(game_id)
        return EndGameResponse(success=success, game_id=game_id)

    # =========================================================================
    # Turn Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{game_id}/initial-influence",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Place initial influence face down",
    )
    async def place_initial_influence(
        game_id: str, body: InitialPlacementRequest
    ) -> MoveResponse:
        """
        Place one numbered Influence card face down on each named group.

        **Request Body:**
        ```json
        {"player_id": "caesar", "placements": {"praetor": "three", "consul": "one"}}
        ```
        """
        return game_service.place_initial_influence(game_id, body)

    @app.post(
        "/api/v1/games/{game_id}/play",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Play a card from hand",
    )
    async def play_card(game_id: str, body: PlayCardRequest) -> MoveResponse:
        """
        Play an Influence card on a group, or an Action card with its context.

        The first card of a turn goes face down, the second face up.
        """
        return game_service.play_card(game_id, body)

    @app.post(
        "/api/v1/games/{game_id}/skip",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Skip the second card and go to the vote",
    )
    async def skip_to_vote(game_id: str, body: PlayerRequest) -> MoveResponse:
        return game_service.skip_to_vote(game_id, body.player_id)

    @app.post(
        "/api/v1/games/{game_id}/vote",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Call a Vote of Confidence",
    )
    async def vote(game_id: str, body: VoteRequest) -> MoveResponse:
        """Resolve a Vote of Confidence on one group; the turn moves to the draw phase."""
        return game_service.vote(game_id, body)

    @app.post(
        "/api/v1/games/{game_id}/draw",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Draw to the hand limit and end the turn",
    )
    async def draw(game_id: str, body: DrawRequest) -> MoveResponse:
        return game_service.draw(game_id, body)

    @app.post(
        "/api/v1/games/{game_id}/veto",
        response_model=MoveResponse,
        responses=ERROR_RESPONSES,
        tags=["Turns"],
        summary="Veto the active player's Action card",
    )
    async def veto(game_id: str, body: VetoRequest) -> MoveResponse:
        """Called by the non-active player holding a Veto card."""
        return game_service.veto(game_id, body)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="senatus", version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """API root - links to documentation."""
        return {
            "name": "Senatus Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn senatus.api.app:app
app = create_app()
