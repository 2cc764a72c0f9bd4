"""
API Module - HTTP interface for a presentation layer.

A client:
1. Creates a match
2. Reads snapshots (board, drawn cards, logs)
3. Sends CHOOSE_CARD / SELECT_TARGET intents
4. Asks the bot to move on its turns

All state is process-local. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    ChooseCardRequest,
    TargetRequest,
    # Responses
    MatchSnapshot,
    IntentResponse,
    BotTurnResponse,
    GameStateDocument,
    CardListResponse,
    MatchListResponse,
    EndMatchResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from .service import APIService, ServiceError
from .app import create_app

__all__ = [
    # Requests
    "ChooseCardRequest",
    "TargetRequest",
    # Responses
    "MatchSnapshot",
    "IntentResponse",
    "BotTurnResponse",
    "GameStateDocument",
    "CardListResponse",
    "MatchListResponse",
    "EndMatchResponse",
    "ErrorResponse",
    "HealthResponse",
    # Enums
    "ErrorCode",
    # Service
    "APIService",
    "ServiceError",
    "create_app",
]
