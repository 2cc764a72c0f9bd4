"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a presentation layer and the
engine. Snapshots are read-only views; intents that do not take effect
come back with accepted=false rather than as errors.

Error Codes:
- MATCH_NOT_FOUND: Match does not exist or has ended
- INVALID_CONFIG: Match configuration rejected
- INVALID_INTENT: Intent body is malformed (not merely illegal right now)
- NOT_BOT_TURN: Bot turn requested while a human is to move
- GAME_OVER: Match already finished
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_INTENT = "INVALID_INTENT"
    NOT_BOT_TURN = "NOT_BOT_TURN"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PointInfo(BaseModel):
    x: int
    y: int


class LastMoveInfo(BaseModel):
    x: int
    y: int
    player: int


class BoardInfo(BaseModel):
    """Board for rendering. cells[y][x] is 0 (empty), 1 or 2."""
    size: int
    cells: list[list[int]]
    last_move: Optional[LastMoveInfo] = None


class DeckInfo(BaseModel):
    """Pile sizes only; card order is hidden."""
    draw_pile: int
    discard_pile: int


class TurnLogInfo(BaseModel):
    tag: str = Field(..., description="skip, drawTwo, choose, selectTarget, resolve, checkWin")
    message: str


class TurnRecordInfo(BaseModel):
    turn: int
    player: int
    logs: list[TurnLogInfo] = Field(default_factory=list)


class CardInfo(BaseModel):
    """Card metadata for display."""
    card_id: str
    name: str
    description: str
    icon: str = ""
    target_kind: str = Field(..., description="none, cell, player")


class BotDecisionInfo(BaseModel):
    card_id: str
    target: Optional[dict[str, Any]] = None
    score: Optional[float] = None
    explanation: str = ""


# =============================================================================
# Request Models
# =============================================================================

class ChooseCardRequest(BaseModel):
    """CHOOSE_CARD intent."""
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    card_id: str = Field(..., description="One of the cards drawn this turn")


class TargetRequest(BaseModel):
    """
    SELECT_TARGET intent.

    {"kind": "cell", "point": {"x": 4, "y": 0}} or
    {"kind": "player", "player": 1} or {"kind": "none"}
    """
    kind: Literal["none", "cell", "player"] = "cell"
    point: Optional[PointInfo] = None
    player: Optional[int] = None


# =============================================================================
# Response Models
# =============================================================================

class MatchSnapshot(BaseModel):
    """Read-only view of a match."""
    match_id: str
    config: dict[str, Any]
    board: BoardInfo
    current_player: int
    deck: DeckInfo
    skip_next_turns: dict[str, int] = Field(default_factory=dict)
    winner: Optional[Union[int, str]] = Field(None, description="1, 2, 'draw' or null")
    winning_line: Optional[list[PointInfo]] = None
    turn_number: int
    phase: Optional[str] = Field(None, description="Turn phase, null once the match is over")
    drawn: list[str] = Field(default_factory=list)
    chosen: Optional[str] = None
    awaiting_target: bool = False
    is_bot_turn: bool = False
    stalled: bool = False
    logs: list[TurnLogInfo] = Field(default_factory=list)
    history: list[TurnRecordInfo] = Field(default_factory=list)
    api_version: str = "v1"


class IntentResponse(BaseModel):
    """Result of an intent: whether it took effect, and the resulting view."""
    accepted: bool
    snapshot: MatchSnapshot


class BotTurnResponse(BaseModel):
    accepted: bool
    decision: Optional[BotDecisionInfo] = None
    snapshot: MatchSnapshot


class GameStateDocument(BaseModel):
    """Lossless serialized GameState."""
    match_id: str
    state: dict[str, Any]
    api_version: str = "v1"


class CardListResponse(BaseModel):
    cards: list[CardInfo]
    count: int


class MatchListResponse(BaseModel):
    """Response listing live matches."""
    matches: list[str]
    count: int


class EndMatchResponse(BaseModel):
    """Response after ending a match."""
    success: bool
    match_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
