"""
API Service - Business logic layer between the HTTP app and the engine.

The service:
1. Validates configuration and intent bodies
2. Manages matches through the SessionManager
3. Formats snapshots as response models

This layer is framework-agnostic; failures are ServiceError exceptions
carrying an ErrorCode and an HTTP status for the app to render.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..cards.base_cards import create_default_registry
from ..cards.types import TargetValue
from ..engine_core.serialize import serialize_game_state
from ..session import Match, MatchConfig, SessionManager
from .schemas import (
    BotDecisionInfo,
    BotTurnResponse,
    CardInfo,
    CardListResponse,
    EndMatchResponse,
    ErrorCode,
    GameStateDocument,
    IntentResponse,
    MatchListResponse,
    MatchSnapshot,
    TargetRequest,
)


class ServiceError(Exception):
    """A request the service refuses, with its API error code."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        snapshot = service.create_match({"boardSize": 9, "opponent": "bot"})
        result = service.choose_card(snapshot.match_id, "Place")
        result = service.select_target(snapshot.match_id, TargetRequest(kind="cell", point={"x": 4, "y": 4}))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def list_cards(self) -> CardListResponse:
        registry = create_default_registry()
        cards = [
            CardInfo(
                card_id=d.id,
                name=d.meta.name,
                description=d.meta.description,
                icon=d.meta.icon,
                target_kind=d.target.kind.value,
            )
            for d in registry.list()
        ]
        return CardListResponse(cards=cards, count=len(cards))

    # -------------------------------------------------------------------------
    # Matches
    # -------------------------------------------------------------------------

    def create_match(self, config: dict[str, Any] | None = None) -> MatchSnapshot:
        try:
            match_config = MatchConfig.model_validate(config or {})
        except ValidationError as e:
            raise ServiceError(
                ErrorCode.INVALID_CONFIG,
                "Invalid match configuration",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from None
        match = self.session_manager.create_match(match_config)
        return self._snapshot(match)

    def get_match(self, match_id: str) -> MatchSnapshot:
        return self._snapshot(self._require(match_id))

    def list_matches(self) -> MatchListResponse:
        matches = self.session_manager.list_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    def end_match(self, match_id: str) -> EndMatchResponse:
        return EndMatchResponse(success=self.session_manager.end_match(match_id), match_id=match_id)

    def reset_match(self, match_id: str, overrides: dict[str, Any] | None = None) -> MatchSnapshot:
        match = self._require(match_id)
        try:
            match.reset(**(overrides or {}))
        except ValidationError as e:
            raise ServiceError(
                ErrorCode.INVALID_CONFIG,
                "Invalid match configuration",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from None
        return self._snapshot(match)

    def get_state(self, match_id: str) -> GameStateDocument:
        match = self._require(match_id)
        return GameStateDocument(match_id=match_id, state=serialize_game_state(match.current_state))

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def choose_card(self, match_id: str, card_id: str) -> IntentResponse:
        match = self._require(match_id)
        accepted = match.choose_card(card_id)
        return IntentResponse(accepted=accepted, snapshot=self._snapshot(match))

    def select_target(self, match_id: str, request: TargetRequest) -> IntentResponse:
        match = self._require(match_id)
        try:
            target = TargetValue.from_dict(request.model_dump(exclude_none=True))
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(ErrorCode.INVALID_INTENT, f"Malformed target: {e}") from None
        accepted = match.select_target(target)
        return IntentResponse(accepted=accepted, snapshot=self._snapshot(match))

    def play_bot_turn(self, match_id: str) -> BotTurnResponse:
        match = self._require(match_id)
        if match.is_over:
            raise ServiceError(ErrorCode.GAME_OVER, f"Match {match_id} is over", status_code=409)
        if not match.is_bot_turn():
            raise ServiceError(ErrorCode.NOT_BOT_TURN, "It is not the bot's turn", status_code=409)

        decision = match.play_bot_turn()
        return BotTurnResponse(
            accepted=decision is not None,
            decision=BotDecisionInfo(**decision.to_dict()) if decision else None,
            snapshot=self._snapshot(match),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require(self, match_id: str) -> Match:
        match = self.session_manager.get_match(match_id)
        if match is None:
            raise ServiceError(ErrorCode.MATCH_NOT_FOUND, f"Match {match_id} not found", status_code=404)
        return match

    def _snapshot(self, match: Match) -> MatchSnapshot:
        return MatchSnapshot.model_validate(match.snapshot())
