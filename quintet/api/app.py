"""
FastAPI Application - REST adapter for a presentation layer.

Endpoints:
    GET    /api/v1/health                  Health check
    GET    /api/v1/cards                   Card catalog (metadata only)
    POST   /api/v1/matches                 Create a match
    GET    /api/v1/matches                 List live matches
    GET    /api/v1/matches/{id}            Match snapshot
    DELETE /api/v1/matches/{id}            End a match
    POST   /api/v1/matches/{id}/choose     CHOOSE_CARD intent
    POST   /api/v1/matches/{id}/target     SELECT_TARGET intent
    POST   /api/v1/matches/{id}/bot        Let the bot play its turn
    POST   /api/v1/matches/{id}/reset      Restart with merged configuration
    GET    /api/v1/matches/{id}/state      Serialized GameState

Intent Flow:
    1. GET the snapshot; it lists the drawn cards
    2. POST /choose with one of them
    3. If awaiting_target is true, POST /target
    4. Each response carries accepted (did the intent take effect) and
       the fresh snapshot; an illegal intent is not an HTTP error

All matches live in process memory. This is not a multiplayer server.
"""

from typing import Annotated, Any, Optional
import logging
import os

from .. import __version__

# Environment configuration
QUINTET_ENV = os.getenv("QUINTET_ENV", "development")
QUINTET_LOG_LEVEL = os.getenv("QUINTET_LOG_LEVEL")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import Body, FastAPI, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService, ServiceError
    from .schemas import (
        # Request models
        ChooseCardRequest,
        TargetRequest,
        # Response models
        BotTurnResponse,
        CardListResponse,
        EndMatchResponse,
        ErrorResponse,
        GameStateDocument,
        HealthResponse,
        IntentResponse,
        MatchListResponse,
        MatchSnapshot,
        # Enums
        ErrorCode,
    )

    if QUINTET_LOG_LEVEL:
        logging.getLogger("quintet").setLevel(QUINTET_LOG_LEVEL.upper())

    app = FastAPI(
        title="Quintet Engine API",
        description="""
Card-augmented five-in-a-row engine.

Each turn the player to move draws two cards, plays one (with a target if
the card needs one), and the engine resolves it and checks for five in a row.

## Error Codes

| Code | Description |
|------|-------------|
| `MATCH_NOT_FOUND` | Match does not exist |
| `INVALID_CONFIG` | Match configuration rejected |
| `INVALID_INTENT` | Intent body malformed |
| `NOT_BOT_TURN` | Bot turn requested on a human turn |
| `GAME_OVER` | Match already finished |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

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

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        return make_error_response(exc.error_code, exc.message, exc.status_code, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ]},
        )

    # =========================================================================
    # Health and catalog
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="quintet",
            version=__version__,
            environment=QUINTET_ENV,
        )

    @app.get(
        "/api/v1/cards",
        response_model=CardListResponse,
        tags=["Cards"],
        summary="List card definitions",
    )
    async def list_cards() -> CardListResponse:
        """Display metadata for every registered card."""
        return api_service.list_cards()

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchSnapshot,
        status_code=201,
        responses={400: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Create a match",
    )
    async def create_match(
        config: Annotated[Optional[dict[str, Any]], Body(description="MatchConfig, snake_case or camelCase")] = None,
    ) -> MatchSnapshot:
        """
        Create a match and start its first turn.

        Example body:
        ```json
        {"boardSize": 15, "seed": "demo", "opponent": "bot", "botStrategyId": "heuristic-v1"}
        ```
        """
        snapshot = api_service.create_match(config)
        logger.info("Created match %s", snapshot.match_id)
        return snapshot

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List live matches",
    )
    async def list_matches() -> MatchListResponse:
        return api_service.list_matches()

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchSnapshot,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get a match snapshot",
    )
    async def get_match(match_id: str) -> MatchSnapshot:
        return api_service.get_match(match_id)

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=EndMatchResponse,
        tags=["Matches"],
        summary="End a match",
    )
    async def end_match(match_id: str) -> EndMatchResponse:
        """End a match and release it. Nothing is kept."""
        return api_service.end_match(match_id)

    @app.post(
        "/api/v1/matches/{match_id}/reset",
        response_model=MatchSnapshot,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Restart a match",
    )
    async def reset_match(
        match_id: str,
        overrides: Annotated[Optional[dict[str, Any]], Body(description="Config keys to change")] = None,
    ) -> MatchSnapshot:
        return api_service.reset_match(match_id, overrides)

    @app.get(
        "/api/v1/matches/{match_id}/state",
        response_model=GameStateDocument,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get the serialized game state",
    )
    async def get_state(match_id: str) -> GameStateDocument:
        return api_service.get_state(match_id)

    # =========================================================================
    # Intent Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches/{match_id}/choose",
        response_model=IntentResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Turn"],
        summary="Choose one of the drawn cards",
    )
    async def choose_card(match_id: str, request: ChooseCardRequest) -> IntentResponse:
        return api_service.choose_card(match_id, request.card_id)

    @app.post(
        "/api/v1/matches/{match_id}/target",
        response_model=IntentResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Turn"],
        summary="Select the target for the chosen card",
    )
    async def select_target(match_id: str, request: TargetRequest) -> IntentResponse:
        return api_service.select_target(match_id, request)

    @app.post(
        "/api/v1/matches/{match_id}/bot",
        response_model=BotTurnResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Turn"],
        summary="Let the bot play its turn",
    )
    async def play_bot_turn(match_id: str) -> BotTurnResponse:
        return api_service.play_bot_turn(match_id)

    return app


# For running directly: uvicorn quintet.api.app:app
app = create_app()
